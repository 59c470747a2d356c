"""Tests for the local profile layout."""

import pytest

from profilesync.exceptions import ProfileNotFoundError
from profilesync.profiles import ProfileStore


@pytest.fixture
def profiles(tmp_path):
    return ProfileStore(tmp_path / "mirror", "main")


class TestProfileStore:
    def test_profile_path(self, profiles, tmp_path):
        assert profiles.profile_path() == tmp_path / "mirror" / "profiles" / "main"
        assert profiles.profile_path("work") == tmp_path / "mirror" / "profiles" / "work"

    def test_ensure_profile(self, profiles):
        path = profiles.ensure_profile()
        assert path.is_dir()
        assert profiles.exists()
        assert not profiles.exists("other")

    def test_list_profiles(self, profiles):
        assert profiles.list_profiles() == []
        profiles.ensure_profile("b")
        profiles.ensure_profile("a")
        assert profiles.list_profiles() == ["a", "b"]

    def test_list_ignores_files(self, profiles):
        profiles.ensure_profile()
        (profiles.root_path / "profiles" / "stray.txt").write_text("x")
        assert profiles.list_profiles() == ["main"]


class TestPlaceholder:
    def test_created_once(self, profiles):
        assert profiles.ensure_placeholder() is True
        assert profiles.placeholder_path().read_text() == ""
        assert profiles.ensure_placeholder() is False

    def test_creates_directory(self, profiles):
        profiles.ensure_placeholder("fresh")
        assert profiles.placeholder_path("fresh").is_file()

    def test_existing_content_untouched(self, profiles):
        profiles.ensure_profile()
        profiles.placeholder_path().write_text("keep")
        assert profiles.ensure_placeholder() is False
        assert profiles.placeholder_path().read_text() == "keep"


class TestDuplicate:
    def test_copies_tree(self, profiles):
        src = profiles.ensure_profile("a")
        (src / "settings.json").write_text("{}")
        (src / "snippets").mkdir()
        (src / "snippets" / "py.json").write_text("[]")

        dest = profiles.duplicate("a", "b")
        assert (dest / "settings.json").read_text() == "{}"
        assert (dest / "snippets" / "py.json").read_text() == "[]"
        assert (src / "settings.json").exists()

    def test_merges_into_existing(self, profiles):
        src = profiles.ensure_profile("a")
        (src / "x.txt").write_text("new")
        dest = profiles.ensure_profile("b")
        (dest / "y.txt").write_text("old")

        profiles.duplicate("a", "b")
        assert (dest / "x.txt").read_text() == "new"
        assert (dest / "y.txt").read_text() == "old"

    def test_missing_source(self, profiles):
        with pytest.raises(ProfileNotFoundError):
            profiles.duplicate("nope", "b")

    def test_missing_source_is_file_not_found(self, profiles):
        with pytest.raises(FileNotFoundError):
            profiles.duplicate("nope", "b")
