"""Repository backends and the interface they share."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from ..exceptions import ConfigError
from ..settings import RepositoryType, Settings
from .git import CommitIntent, LocalGitRepository, commit_message
from .webdav import WebDAVRepository


@runtime_checkable
class Repository(Protocol):
    """What an orchestrator can do with any backend."""

    type: RepositoryType

    @property
    def initialized(self) -> bool: ...

    def initialize(self): ...

    def download(self) -> None: ...

    def upload(self) -> None: ...

    def duplicate_profile_to(self, original_profile: str, new_profile: str): ...

    def terminate(self) -> None: ...


def create_repository(settings: Settings) -> Repository:
    """Build the backend selected by ``settings.repository.type``."""
    repo_type = settings.repository.type
    if repo_type is RepositoryType.WEBDAV:
        return WebDAVRepository(settings)
    if repo_type is RepositoryType.GIT:
        return LocalGitRepository(settings)
    raise ConfigError(f"Unsupported repository type: {repo_type!r}")


__all__ = [
    "Repository",
    "create_repository",
    "WebDAVRepository",
    "LocalGitRepository",
    "CommitIntent",
    "commit_message",
]
