"""Remote path values and their mapping onto the local mirror."""

from __future__ import annotations

import os
from pathlib import Path


def _normalize_parts(raw: str) -> tuple[str, ...]:
    """Split *raw* into canonical segments, resolving '.' and '..'.

    '..' above the root stays at the root.
    """
    parts: list[str] = []
    for seg in raw.replace("\\", "/").split("/"):
        if not seg or seg == ".":
            continue
        if seg == "..":
            if parts:
                parts.pop()
            continue
        parts.append(seg)
    return tuple(parts)


class RemotePath:
    """An immutable, hashable path inside a remote store.

    The root is ``/``.  Equality and hashing use the canonical string form,
    so ``RemotePath("a//b/")`` and ``RemotePath("/a/b")`` are the same key.
    """

    __slots__ = ("_parts",)

    def __init__(self, path: str | RemotePath = "/"):
        if isinstance(path, RemotePath):
            self._parts = path._parts
        else:
            self._parts = _normalize_parts(path)

    @classmethod
    def root(cls) -> RemotePath:
        return cls("/")

    @classmethod
    def _from_parts(cls, parts: tuple[str, ...]) -> RemotePath:
        obj = cls.__new__(cls)
        obj._parts = parts
        return obj

    @classmethod
    def from_local(cls, root: str | os.PathLike, local: str | os.PathLike) -> RemotePath:
        """Map a file under the mirror *root* to its remote path."""
        rel = Path(local).relative_to(Path(root))
        return cls._from_parts(_normalize_parts(rel.as_posix()))

    # ------------------------------------------------------------------
    @property
    def parts(self) -> tuple[str, ...]:
        return self._parts

    @property
    def name(self) -> str:
        """Last segment, or '' for the root."""
        return self._parts[-1] if self._parts else ""

    @property
    def is_root(self) -> bool:
        return not self._parts

    def join(self, *segments: str) -> RemotePath:
        """Return a new path with *segments* appended (normalized)."""
        joined = "/".join((str(self), *segments))
        return RemotePath(joined)

    def parent(self) -> RemotePath:
        """Parent directory.  The parent of the root is the root."""
        if not self._parts:
            return self
        return self._from_parts(self._parts[:-1])

    def ancestors(self) -> list[RemotePath]:
        """All ancestors from the root down to (excluding) this path."""
        return [self._from_parts(self._parts[:i]) for i in range(len(self._parts))]

    def to_local(self, root: str | os.PathLike) -> Path:
        """Map this path onto the local mirror rooted at *root*."""
        return Path(root).joinpath(*self._parts)

    # ------------------------------------------------------------------
    def __str__(self) -> str:
        return "/" + "/".join(self._parts)

    def __repr__(self) -> str:
        return f"RemotePath({str(self)!r})"

    def __eq__(self, other):
        if isinstance(other, RemotePath):
            return self._parts == other._parts
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._parts)
