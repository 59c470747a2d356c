"""Local profile layout inside a mirror directory.

Profiles live in ``<root>/profiles/<name>``.  Both repository backends hold a
`ProfileStore` for this layout instead of inheriting it.
"""

from __future__ import annotations

import os
import shutil
from pathlib import Path

from .exceptions import ProfileNotFoundError

PROFILES_DIR = "profiles"
PLACEHOLDER_NAME = ".gitkeep"


class ProfileStore:
    """Profile directories under a mirror root."""

    def __init__(self, root_path: str | os.PathLike, profile: str):
        self.root_path = Path(root_path)
        self.profile = profile

    def __repr__(self) -> str:
        return f"ProfileStore({str(self.root_path)!r}, profile={self.profile!r})"

    def profile_path(self, name: str | None = None) -> Path:
        return self.root_path / PROFILES_DIR / (name or self.profile)

    def placeholder_path(self, name: str | None = None) -> Path:
        return self.profile_path(name) / PLACEHOLDER_NAME

    def exists(self, name: str | None = None) -> bool:
        return self.profile_path(name).is_dir()

    def ensure_profile(self, name: str | None = None) -> Path:
        path = self.profile_path(name)
        path.mkdir(parents=True, exist_ok=True)
        return path

    def ensure_placeholder(self, name: str | None = None) -> bool:
        """Create an empty marker file in the profile; True if it was created.

        Lets an otherwise empty profile directory survive in stores that do
        not track empty directories.
        """
        marker = self.placeholder_path(name)
        if marker.exists():
            return False
        marker.parent.mkdir(parents=True, exist_ok=True)
        marker.write_text("", encoding="utf-8")
        return True

    def list_profiles(self) -> list[str]:
        base = self.root_path / PROFILES_DIR
        if not base.is_dir():
            return []
        return sorted(p.name for p in base.iterdir() if p.is_dir())

    def duplicate(self, original: str, new: str) -> Path:
        """Copy profile *original* to *new*, merging into an existing *new*."""
        src = self.profile_path(original)
        if not self.exists(original):
            raise ProfileNotFoundError(f"Profile not found: {original}")
        dest = self.profile_path(new)
        shutil.copytree(src, dest, symlinks=True, dirs_exist_ok=True)
        return dest
