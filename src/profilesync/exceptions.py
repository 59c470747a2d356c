"""Exceptions for profilesync."""

from __future__ import annotations


class ProfileSyncError(Exception):
    """Base class for all profilesync errors."""


class ConfigError(ProfileSyncError):
    """Raised when settings are missing or invalid."""


class RepositoryNotInitializedError(ProfileSyncError, RuntimeError):
    """Raised when a repository is used before a successful ``initialize()``.

    This signals a programming error in the caller, not a recoverable
    condition: check ``repository.initialized`` first.
    """


class ProfileNotFoundError(ProfileSyncError, FileNotFoundError):
    """Raised when a profile directory does not exist in the mirror."""


class WebDAVError(ProfileSyncError):
    """An HTTP-level failure talking to a WebDAV server."""

    def __init__(self, message: str, *, status: int | None = None, path: str | None = None):
        super().__init__(message)
        self.status = status
        self.path = path


class WebDAVConnectionError(WebDAVError):
    """The WebDAV server could not be reached."""
