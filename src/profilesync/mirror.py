"""Temporary local mirrors for remote repositories.

A WebDAV repository stages its files in a directory under the temp dir.
The directory name is derived from the repository settings, so the same
remote always maps to the same mirror and two remotes never share one.
"""

from __future__ import annotations

import hashlib
import json
import logging
import shutil
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .settings import Settings

logger = logging.getLogger(__name__)

_KEY_LENGTH = 16


def mirror_key(repo_type: str, url: str, options: dict) -> str:
    """Stable short key for a (type, url, options) triple."""
    h = hashlib.sha256()
    h.update(repo_type.encode())
    h.update(b"\0")
    h.update(url.encode())
    h.update(b"\0")
    h.update(json.dumps(options, sort_keys=True, default=str).encode())
    return h.hexdigest()[:_KEY_LENGTH]


class TemporaryMirror:
    """Location and lifecycle of a temporary mirror directory."""

    def __init__(self, base: Path, key: str, *, repo_type: str, url: str):
        self.base = Path(base)
        self.key = key
        self.repo_type = repo_type
        self.url = url

    def __repr__(self) -> str:
        return f"TemporaryMirror({str(self.path)!r})"

    @classmethod
    def for_settings(cls, settings: Settings, base: Path | None = None) -> TemporaryMirror:
        repo = settings.repository
        key = mirror_key(repo.type.value, repo.url or "", repo.options)
        return cls(
            base if base is not None else settings.temporary_base(),
            key,
            repo_type=repo.type.value,
            url=repo.url or "",
        )

    @property
    def path(self) -> Path:
        return self.base / self.key

    @property
    def metadata_path(self) -> Path:
        return self.base / f"{self.key}.json"

    def initialize(self) -> Path:
        """Create the mirror directory and record what it mirrors."""
        self.path.mkdir(parents=True, exist_ok=True)
        self.metadata_path.write_text(
            json.dumps({"type": self.repo_type, "url": self.url}, indent=2),
            encoding="utf-8",
        )
        logger.debug("temporary mirror at %s", self.path)
        return self.path

    def terminate(self) -> None:
        """Remove the mirror directory and its metadata."""
        if self.path.exists():
            shutil.rmtree(self.path)
        if self.metadata_path.exists():
            self.metadata_path.unlink()
