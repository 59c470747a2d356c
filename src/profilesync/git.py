"""Working-tree git operations on top of dulwich.

Only what the git repository backend needs: detect/initialize a repo,
stage the whole working tree, inspect the staged changes and commit them.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from dulwich import porcelain
from dulwich.errors import NotGitRepository
from dulwich.repo import Repo


@dataclass
class ChangeSet:
    """Paths staged in the index relative to ``HEAD``."""
    add: list[str] = field(default_factory=list)
    modify: list[str] = field(default_factory=list)
    delete: list[str] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.add and not self.modify and not self.delete

    @property
    def total(self) -> int:
        return len(self.add) + len(self.modify) + len(self.delete)

    def paths(self) -> list[str]:
        """All changed paths, sorted."""
        return sorted(self.add + self.modify + self.delete)


def _decode(p: str | bytes) -> str:
    return p.decode("utf-8", "surrogateescape") if isinstance(p, bytes) else p


def _walk_worktree(root: Path) -> list[str]:
    """Relative posix paths of all files under *root*, skipping ``.git``.

    Symlinks are neither followed nor staged.
    """
    result: list[str] = []
    for dirpath, dirnames, filenames in os.walk(root):
        dp = Path(dirpath)
        dirnames[:] = sorted(
            d for d in dirnames
            if not (dp == root and d == ".git") and not (dp / d).is_symlink()
        )
        for fname in filenames:
            full = dp / fname
            if full.is_symlink():
                continue
            result.append(full.relative_to(root).as_posix())
    return sorted(result)


class GitIndex:
    """A non-bare git repository whose working tree is the local mirror."""

    def __init__(self, repo: Repo):
        self._repo = repo
        self.path = Path(repo.path)

    def __repr__(self) -> str:
        return f"GitIndex({str(self.path)!r})"

    @staticmethod
    def is_repo(path: str | os.PathLike) -> bool:
        """True if *path* is the top of a git working tree."""
        try:
            Repo(str(path)).close()
        except NotGitRepository:
            return False
        return True

    @classmethod
    def open(cls, path: str | os.PathLike) -> GitIndex:
        return cls(Repo(str(path)))

    @classmethod
    def init(cls, path: str | os.PathLike, branch: str = "main") -> GitIndex:
        """Create a repository at *path* whose HEAD points at *branch*."""
        repo = Repo.init(str(path), mkdir=False)
        repo.refs.set_symbolic_ref(b"HEAD", b"refs/heads/" + branch.encode())
        return cls(repo)

    def close(self) -> None:
        self._repo.close()

    # ------------------------------------------------------------------
    def head(self) -> str | None:
        """Hex id of the HEAD commit, or None before the first commit."""
        try:
            return self._repo.head().decode()
        except KeyError:
            return None

    def branch(self) -> str | None:
        """Name of the branch HEAD points at."""
        refs, _sha = self._repo.refs.follow(b"HEAD")
        if len(refs) < 2:
            return None
        return refs[-1].decode().removeprefix("refs/heads/")

    def stage_all(self) -> None:
        """Stage additions, modifications and deletions (``git add -A``)."""
        files = _walk_worktree(self.path)
        if files:
            porcelain.add(self._repo, paths=[str(self.path / f) for f in files])

        present = set(files)
        index = self._repo.open_index()
        removed = [p for p in index if _decode(p) not in present]
        if removed:
            for p in removed:
                del index[p]
            index.write()

    def staged(self) -> ChangeSet:
        """Staged changes between the index and ``HEAD``."""
        status = porcelain.status(self._repo, untracked_files="no")
        return ChangeSet(
            add=sorted(_decode(p) for p in status.staged["add"]),
            modify=sorted(_decode(p) for p in status.staged["modify"]),
            delete=sorted(_decode(p) for p in status.staged["delete"]),
        )

    def commit(self, message: str, author: bytes) -> str:
        """Commit the index and return the new commit id."""
        sha = porcelain.commit(
            self._repo,
            message=message.encode("utf-8"),
            author=author,
            committer=author,
        )
        return _decode(sha)

    def log_messages(self) -> list[str]:
        """First lines of commit messages reachable from HEAD, newest first."""
        head = self.head()
        if head is None:
            return []
        messages: list[str] = []
        for entry in self._repo.get_walker(include=[head.encode()]):
            messages.append(entry.commit.message.decode("utf-8").splitlines()[0])
        return messages
