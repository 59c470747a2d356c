"""WebDAV repository: mirror a remote collection into a temporary directory."""

from __future__ import annotations

import logging
import os
import shutil
from pathlib import Path

from ..exceptions import RepositoryNotInitializedError
from ..health import HealthCheck, check_remote
from ..mirror import TemporaryMirror
from ..path import RemotePath
from ..profiles import ProfileStore
from ..settings import RepositoryType, Settings
from ..webdav import WebDAVClient

logger = logging.getLogger(__name__)


def _walk_local_files(root: Path) -> list[str]:
    """Relative posix paths of regular files under *root*.

    Symlinks (files or directories) are not followed and not returned.
    """
    result: list[str] = []
    for dirpath, dirnames, filenames in os.walk(root):
        dp = Path(dirpath)
        dirnames[:] = sorted(d for d in dirnames if not (dp / d).is_symlink())
        for fname in filenames:
            full = dp / fname
            if full.is_symlink() or not full.is_file():
                continue
            result.append(full.relative_to(root).as_posix())
    return sorted(result)


class WebDAVRepository:
    """Profile repository stored on a WebDAV server.

    ``download()`` replaces the local mirror with the remote tree;
    ``upload()`` sends every local file back, creating remote collections
    as needed.  Content is always transferred as UTF-8 text.
    """

    type = RepositoryType.WEBDAV

    def __init__(
        self,
        settings: Settings,
        *,
        client: WebDAVClient | None = None,
        mirror: TemporaryMirror | None = None,
    ):
        self._settings = settings
        self._url = settings.repository.url or ""
        self._options = settings.repository.options
        self._mirror = mirror or TemporaryMirror.for_settings(settings)
        self._profiles = ProfileStore(self._mirror.path, settings.profile)
        self._client = client
        self._initialized = False

    def __repr__(self) -> str:
        return f"WebDAVRepository({self._url!r}, profile={self.profile!r})"

    @property
    def root_path(self) -> Path:
        return self._mirror.path

    @property
    def profile(self) -> str:
        return self._profiles.profile

    @property
    def profiles(self) -> ProfileStore:
        return self._profiles

    @property
    def initialized(self) -> bool:
        return self._initialized

    def check_initialized(self) -> None:
        if not self._initialized:
            raise RepositoryNotInitializedError(
                f"{self!r} is not initialized; call initialize() first"
            )

    @property
    def _fs(self) -> WebDAVClient:
        if self._client is None:
            self._client = WebDAVClient.from_options(self._url, self._options)
        return self._client

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def initialize(self) -> HealthCheck:
        """Check the server and prepare the local mirror.

        Failures are logged and returned, never raised; the repository then
        stays uninitialized.
        """
        self._mirror.initialize()

        check = self.check()
        if not check.ok:
            logger.error(check.message)
            return check

        self._profiles.ensure_profile()
        self._initialized = True
        return check

    def check(self) -> HealthCheck:
        """Stat the server root and classify the outcome."""
        return check_remote(self._fs, self._url)

    def download(self) -> None:
        self.check_initialized()
        self.pull()

    def upload(self) -> None:
        self.check_initialized()
        self.push()

    def duplicate_profile_to(self, original_profile: str, new_profile: str) -> None:
        self.check_initialized()
        self._profiles.duplicate(original_profile, new_profile)
        self.push()

    def terminate(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None
        self._mirror.terminate()
        self._initialized = False

    # ------------------------------------------------------------------
    # Pull: remote -> local
    # ------------------------------------------------------------------

    def pull(self) -> None:
        """Replace the local mirror with the remote tree."""
        logger.info("pull from webdav")

        root = self.root_path
        if root.exists():
            shutil.rmtree(root)
        root.mkdir(parents=True)

        for entry in self._fs.readdir(RemotePath.root()):
            if entry.is_directory:
                self.pull_directory(entry.path.to_local(root), entry.path)
            else:
                self.pull_file(entry.path.to_local(root), entry.path)

        logger.info("pull done")

    def pull_directory(self, local_dir: Path, remote_dir: RemotePath) -> None:
        local_dir.mkdir()

        for entry in self._fs.readdir(remote_dir):
            remote = remote_dir.join(entry.name)
            if entry.is_directory:
                self.pull_directory(remote.to_local(self.root_path), remote)
            else:
                self.pull_file(remote.to_local(self.root_path), remote)

    def pull_file(self, local_file: Path, remote_file: RemotePath) -> None:
        data = self._fs.read_file(remote_file)
        with open(local_file, "w", encoding="utf-8", newline="") as f:
            f.write(data)

    # ------------------------------------------------------------------
    # Push: local -> remote
    # ------------------------------------------------------------------

    def push(self) -> None:
        """Upload every local file, creating missing remote collections."""
        logger.info("push to webdav")

        root = self.root_path
        exists: dict[RemotePath, bool] = {}
        for rel in _walk_local_files(root):
            local_file = root / rel
            self.push_file(local_file, RemotePath.from_local(root, local_file), exists)

        logger.info("push done")

    def push_file(self, local_file: Path, remote_file: RemotePath,
                  exists: dict[RemotePath, bool]) -> None:
        logger.info("push file: %s", remote_file)

        self.ensure_dir(remote_file.parent(), exists)

        with open(local_file, encoding="utf-8", newline="") as f:
            data = f.read()
        self._fs.write_file(remote_file, data)

    def ensure_dir(self, directory: RemotePath, exists: dict[RemotePath, bool]) -> None:
        """Make sure *directory* and its ancestors exist remotely.

        Each directory is probed (and created if the probe fails) at most
        once per *exists* map; ancestors are settled before descendants.
        """
        if exists.get(directory):
            return

        if not directory.is_root:
            self.ensure_dir(directory.parent(), exists)

        try:
            self._fs.stat(directory)
        except Exception:
            self._fs.mkdir(directory)

        exists[directory] = True
