"""Settings for profilesync repositories."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

from .exceptions import ConfigError


class RepositoryType(str, Enum):
    """Which backend a repository uses."""
    WEBDAV = "webdav"
    GIT = "git"


_REPOSITORY_KEYS = ("type", "url", "path", "branch")


@dataclass
class RepositorySettings:
    type: RepositoryType
    url: str | None = None
    path: str | None = None
    branch: str = "main"
    options: dict[str, Any] = field(default_factory=dict)  # webdav client extras

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> RepositorySettings:
        """Build from a mapping, collecting unknown keys into ``options``.

        ``{"type": "webdav", "url": ..., "username": ...}`` puts
        ``username`` in ``options``.
        """
        if not isinstance(data, dict):
            raise ConfigError("'repository' must be an object")
        raw_type = data.get("type")
        try:
            repo_type = RepositoryType(raw_type)
        except ValueError:
            raise ConfigError(f"Unknown repository type: {raw_type!r}")

        options = dict(data.get("options") or {})
        for key, value in data.items():
            if key not in _REPOSITORY_KEYS and key != "options":
                options[key] = value

        settings = cls(
            type=repo_type,
            url=data.get("url"),
            path=data.get("path"),
            branch=data.get("branch") or "main",
            options=options,
        )
        settings.validate()
        return settings

    def validate(self) -> None:
        if self.type is RepositoryType.WEBDAV and not self.url:
            raise ConfigError("A webdav repository requires 'url'")
        if self.type is RepositoryType.GIT and not self.path:
            raise ConfigError("A git repository requires 'path'")


@dataclass
class Settings:
    repository: RepositorySettings
    profile: str = "main"
    temporary_directory: str | None = None
    author: str = "profilesync"
    email: str = "profilesync@localhost"

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Settings:
        if "repository" not in data:
            raise ConfigError("Missing 'repository' section")
        profile = data.get("profile") or "main"
        if "/" in profile or profile in (".", ".."):
            raise ConfigError(f"Invalid profile name: {profile!r}")
        return cls(
            repository=RepositorySettings.from_dict(data["repository"]),
            profile=profile,
            temporary_directory=data.get("temporary_directory"),
            author=data.get("author") or "profilesync",
            email=data.get("email") or "profilesync@localhost",
        )

    @property
    def identity(self) -> bytes:
        """Commit identity in git's ``name <email>`` form."""
        return f"{self.author} <{self.email}>".encode()

    def temporary_base(self) -> Path:
        """Directory holding temporary mirrors.

        ``temporary_directory`` wins, then ``PROFILESYNC_TMPDIR``, then the
        system temp dir.
        """
        import tempfile

        base = self.temporary_directory or os.environ.get("PROFILESYNC_TMPDIR")
        return Path(base or tempfile.gettempdir()) / "profilesync"


def load_settings(path: str | os.PathLike, *, profile: str | None = None) -> Settings:
    """Load settings from a JSON file, optionally overriding the profile."""
    path = Path(path)
    if not path.is_file():
        raise ConfigError(f"Settings file not found: {path}")
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ConfigError(f"Invalid JSON in {path}: {exc}")
    if not isinstance(data, dict):
        raise ConfigError(f"Settings in {path} must be a JSON object")
    if profile:
        data["profile"] = profile
    return Settings.from_dict(data)
