"""Root health check for remote stores.

Classifies why a remote store cannot be used, so callers can react to each
case instead of inspecting exceptions themselves.
"""

from __future__ import annotations

import errno
from dataclasses import dataclass
from enum import Enum
from typing import Protocol

from .exceptions import WebDAVError
from .path import RemotePath


class HealthStatus(str, Enum):
    OK = "ok"
    CONNECTION_REFUSED = "connection-refused"
    UNAUTHORIZED = "unauthorized"
    NOT_FOUND = "not-found"
    UNKNOWN = "unknown"


@dataclass
class HealthCheck:
    status: HealthStatus
    message: str
    error: BaseException | None = None

    @property
    def ok(self) -> bool:
        return self.status is HealthStatus.OK


class _Stattable(Protocol):
    def stat(self, path: RemotePath | str): ...


def _is_connection_refused(error: BaseException) -> bool:
    """True if a refused connection appears anywhere in the cause chain."""
    seen: set[int] = set()
    current: BaseException | None = error
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        if isinstance(current, ConnectionRefusedError):
            return True
        if getattr(current, "errno", None) == errno.ECONNREFUSED:
            return True
        current = current.__cause__ or current.__context__
    return False


def classify_error(error: BaseException, url: str) -> HealthCheck:
    """Map *error* from a root stat onto a `HealthCheck`."""
    if _is_connection_refused(error):
        return HealthCheck(
            HealthStatus.CONNECTION_REFUSED,
            f'The connection to "{url}" is refused.',
            error,
        )
    status = error.status if isinstance(error, WebDAVError) else None
    if status == 401:
        return HealthCheck(
            HealthStatus.UNAUTHORIZED,
            f'The connection to "{url}" isn\'t authorized.',
            error,
        )
    if status == 404:
        return HealthCheck(
            HealthStatus.NOT_FOUND,
            f'The url "{url}" can\'t be found.',
            error,
        )
    return HealthCheck(HealthStatus.UNKNOWN, str(error), error)


def check_remote(client: _Stattable, url: str) -> HealthCheck:
    """Stat the root of *client* and classify the outcome."""
    try:
        client.stat(RemotePath.root())
    except Exception as exc:
        return classify_error(exc, url)
    return HealthCheck(HealthStatus.OK, f'Connected to "{url}".')
