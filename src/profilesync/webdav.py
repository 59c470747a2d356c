"""Minimal WebDAV client built on httpx.

Covers exactly what the WebDAV repository needs: ``stat``, ``readdir``,
``read_file``, ``write_file`` and ``mkdir``.  Every call is a single HTTP
request; nothing is retried.
"""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from dataclasses import dataclass
from email.utils import parsedate_to_datetime
from datetime import datetime
from typing import Any
from urllib.parse import quote, unquote, urlsplit

import httpx

from .exceptions import WebDAVConnectionError, WebDAVError
from .path import RemotePath

logger = logging.getLogger(__name__)

_DAV = "{DAV:}"

_PROPFIND_BODY = (
    b'<?xml version="1.0" encoding="utf-8"?>'
    b'<d:propfind xmlns:d="DAV:"><d:prop>'
    b"<d:resourcetype/><d:getcontentlength/><d:getlastmodified/><d:getetag/>"
    b"</d:prop></d:propfind>"
)


@dataclass
class RemoteEntry:
    """One file or collection reported by the server."""
    name: str
    path: RemotePath
    is_directory: bool
    size: int = 0
    modified: datetime | None = None
    etag: str | None = None


class WebDAVClient:
    """Blocking WebDAV client for a single base URL."""

    def __init__(
        self,
        url: str,
        *,
        username: str | None = None,
        password: str | None = None,
        headers: dict[str, str] | None = None,
        timeout: float = 30.0,
        verify: bool = True,
        transport: httpx.BaseTransport | None = None,
    ):
        self.url = url.rstrip("/")
        self._base_path = unquote(urlsplit(self.url).path).rstrip("/")
        auth = (username, password or "") if username else None
        self._client = httpx.Client(
            auth=auth,
            headers=headers or {},
            timeout=httpx.Timeout(timeout),
            verify=verify,
            transport=transport,
            follow_redirects=True,
        )

    @classmethod
    def from_options(cls, url: str, options: dict[str, Any]) -> WebDAVClient:
        """Build a client from repository ``options`` (unknown keys ignored)."""
        kwargs: dict[str, Any] = {}
        for key in ("username", "password", "headers", "timeout", "verify"):
            if key in options:
                kwargs[key] = options[key]
        return cls(url, **kwargs)

    def __repr__(self) -> str:
        return f"WebDAVClient({self.url!r})"

    def __enter__(self) -> WebDAVClient:
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def stat(self, path: RemotePath | str) -> RemoteEntry:
        """Return the entry at *path*; raises `WebDAVError` if it is missing."""
        path = RemotePath(path)
        response = self._request("PROPFIND", path, headers={"Depth": "0"}, content=_PROPFIND_BODY)
        entries = self._parse_multistatus(response)
        for entry in entries:
            if entry.path == path:
                return entry
        if entries:
            return entries[0]
        raise WebDAVError(f"Empty PROPFIND response for {path}", status=response.status_code, path=str(path))

    def readdir(self, path: RemotePath | str) -> list[RemoteEntry]:
        """List the direct children of the collection at *path*."""
        path = RemotePath(path)
        response = self._request(
            "PROPFIND", path, collection=True, headers={"Depth": "1"}, content=_PROPFIND_BODY,
        )
        return [e for e in self._parse_multistatus(response) if e.path != path]

    def read_file(self, path: RemotePath | str) -> str:
        path = RemotePath(path)
        response = self._request("GET", path)
        return response.content.decode("utf-8")

    def write_file(self, path: RemotePath | str, text: str) -> None:
        path = RemotePath(path)
        self._request(
            "PUT", path,
            headers={"Content-Type": "text/plain; charset=utf-8"},
            content=text.encode("utf-8"),
        )

    def mkdir(self, path: RemotePath | str) -> None:
        path = RemotePath(path)
        self._request("MKCOL", path, collection=True)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _url_for(self, path: RemotePath, *, collection: bool = False) -> str:
        url = self.url + quote(str(path))
        if collection and not url.endswith("/"):
            url += "/"
        return url

    def _request(self, method: str, path: RemotePath, *, collection: bool = False,
                 **kwargs: Any) -> httpx.Response:
        url = self._url_for(path, collection=collection)
        logger.debug("%s %s", method, url)
        try:
            response = self._client.request(method, url, **kwargs)
        except httpx.RequestError as exc:
            raise WebDAVConnectionError(f"{method} {path} failed: {exc}", path=str(path)) from exc
        if response.status_code >= 400:
            raise WebDAVError(
                f"{method} {path} failed with status {response.status_code}",
                status=response.status_code,
                path=str(path),
            )
        return response

    def _href_to_path(self, href: str) -> RemotePath:
        href_path = unquote(urlsplit(href).path)
        if self._base_path and href_path.startswith(self._base_path):
            href_path = href_path[len(self._base_path):]
        return RemotePath(href_path)

    def _parse_multistatus(self, response: httpx.Response) -> list[RemoteEntry]:
        try:
            root = ET.fromstring(response.content)
        except ET.ParseError as exc:
            raise WebDAVError(f"Invalid PROPFIND response: {exc}", status=response.status_code)

        entries: list[RemoteEntry] = []
        for node in root.iter(f"{_DAV}response"):
            href = node.findtext(f"{_DAV}href")
            if href is None:
                continue
            path = self._href_to_path(href.strip())
            prop = _ok_prop(node)
            is_dir = prop is not None and prop.find(f"{_DAV}resourcetype/{_DAV}collection") is not None
            entries.append(RemoteEntry(
                name=path.name,
                path=path,
                is_directory=is_dir,
                size=_int_prop(prop, "getcontentlength"),
                modified=_date_prop(prop, "getlastmodified"),
                etag=_text_prop(prop, "getetag"),
            ))
        return entries


def _ok_prop(response_node: ET.Element) -> ET.Element | None:
    """Return the <prop> of the 200 propstat, or the first one present."""
    fallback = None
    for propstat in response_node.findall(f"{_DAV}propstat"):
        prop = propstat.find(f"{_DAV}prop")
        status = propstat.findtext(f"{_DAV}status") or ""
        if " 200 " in f"{status} ":
            return prop
        if fallback is None:
            fallback = prop
    return fallback


def _text_prop(prop: ET.Element | None, name: str) -> str | None:
    if prop is None:
        return None
    value = prop.findtext(f"{_DAV}{name}")
    return value.strip() if value else None


def _int_prop(prop: ET.Element | None, name: str) -> int:
    value = _text_prop(prop, name)
    try:
        return int(value) if value else 0
    except ValueError:
        return 0


def _date_prop(prop: ET.Element | None, name: str) -> datetime | None:
    value = _text_prop(prop, name)
    if not value:
        return None
    try:
        return parsedate_to_datetime(value)
    except (TypeError, ValueError):
        return None
