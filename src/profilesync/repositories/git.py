"""Local git repository: the mirror directory is a git working tree."""

from __future__ import annotations

import logging
from enum import Enum
from pathlib import Path

from ..exceptions import RepositoryNotInitializedError
from ..git import GitIndex
from ..profiles import ProfileStore
from ..settings import RepositoryType, Settings

logger = logging.getLogger(__name__)


class CommitIntent(str, Enum):
    """Why a push happens; selects the commit message."""
    CREATE = "create"
    UPLOAD = "upload"


def commit_message(intent: CommitIntent, profile: str) -> str:
    if intent is CommitIntent.CREATE:
        return f"{profile}: create"
    return f"{profile}: update"


class LocalGitRepository:
    """Profile repository kept in a local git working tree.

    There is no separate remote: the working tree is the store, and every
    push turns staged changes into one commit.  A push with nothing staged
    commits nothing.
    """

    type = RepositoryType.GIT

    def __init__(self, settings: Settings):
        repo = settings.repository
        self._settings = settings
        self._root_path = Path(repo.path or "").expanduser()
        self._branch = repo.branch
        self._identity = settings.identity
        self._profiles = ProfileStore(self._root_path, settings.profile)
        self._git: GitIndex | None = None
        self._initialized = False

    def __repr__(self) -> str:
        return f"LocalGitRepository({str(self._root_path)!r}, branch={self._branch!r})"

    @property
    def root_path(self) -> Path:
        return self._root_path

    @property
    def branch(self) -> str:
        return self._branch

    @property
    def profile(self) -> str:
        return self._profiles.profile

    @property
    def profiles(self) -> ProfileStore:
        return self._profiles

    @property
    def initialized(self) -> bool:
        return self._initialized

    @property
    def git(self) -> GitIndex:
        if self._git is None:
            self._git = GitIndex.open(self._root_path)
        return self._git

    def check_initialized(self) -> None:
        if not self._initialized:
            raise RepositoryNotInitializedError(
                f"{self!r} is not initialized; call initialize() first"
            )

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def initialize(self) -> None:
        if not self.pull():
            logger.error("can not pull git repository")
            return

        if self._profiles.ensure_placeholder():
            self.push(CommitIntent.CREATE)

        self._initialized = True

    def download(self) -> None:
        # The working tree is the store; there is nothing to fetch.
        self.check_initialized()

    def upload(self) -> None:
        self.check_initialized()
        self.push(CommitIntent.UPLOAD)

    def duplicate_profile_to(self, original_profile: str, new_profile: str) -> str | None:
        self.check_initialized()
        self._profiles.duplicate(original_profile, new_profile)
        self._profiles.ensure_placeholder(new_profile)
        return self.push(CommitIntent.CREATE, new_profile)

    def terminate(self) -> None:
        if self._git is not None:
            self._git.close()
            self._git = None
        self._initialized = False

    # ------------------------------------------------------------------
    # Sync
    # ------------------------------------------------------------------

    def pull(self) -> bool:
        """Make sure the working tree and its repository exist.

        Always True once they do; dulwich errors propagate.
        """
        self._root_path.mkdir(parents=True, exist_ok=True)

        if not GitIndex.is_repo(self._root_path):
            logger.info("creating git at %s", self._root_path)
            self._git = GitIndex.init(self._root_path, self._branch)

        return True

    def push(self, intent: CommitIntent, profile: str | None = None) -> str | None:
        """Stage everything and commit if anything changed.

        Returns the new commit id, or None when there was nothing to commit.
        """
        git = self.git
        git.stage_all()

        changes = git.staged()
        if changes.is_empty:
            logger.info("no changes, no commit")
            return None

        message = commit_message(intent, profile or self.profile)
        logger.info("commit: %s (%d changed)", message, changes.total)
        logger.debug("staged: %s", ", ".join(changes.paths()))
        return git.commit(message, self._identity)
