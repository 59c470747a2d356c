from .exceptions import (
    ConfigError,
    ProfileNotFoundError,
    ProfileSyncError,
    RepositoryNotInitializedError,
    WebDAVConnectionError,
    WebDAVError,
)
from .git import ChangeSet, GitIndex
from .health import HealthCheck, HealthStatus, check_remote
from .mirror import TemporaryMirror
from .path import RemotePath
from .profiles import ProfileStore
from .repositories import (
    CommitIntent,
    LocalGitRepository,
    Repository,
    WebDAVRepository,
    commit_message,
    create_repository,
)
from .settings import RepositorySettings, RepositoryType, Settings, load_settings
from .webdav import RemoteEntry, WebDAVClient

__all__ = [
    "ProfileSyncError", "ConfigError", "RepositoryNotInitializedError",
    "ProfileNotFoundError", "WebDAVError", "WebDAVConnectionError",
    "ChangeSet", "GitIndex",
    "HealthCheck", "HealthStatus", "check_remote",
    "TemporaryMirror", "RemotePath", "ProfileStore",
    "Repository", "create_repository", "WebDAVRepository", "LocalGitRepository",
    "CommitIntent", "commit_message",
    "Settings", "RepositorySettings", "RepositoryType", "load_settings",
    "WebDAVClient", "RemoteEntry",
]
