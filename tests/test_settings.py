"""Tests for settings loading and validation."""

import json

import pytest

from profilesync.exceptions import ConfigError
from profilesync.settings import RepositoryType, Settings, load_settings


class TestRepositorySettings:
    def test_webdav_options_collected(self):
        s = Settings.from_dict({"repository": {
            "type": "webdav", "url": "https://h/dav", "username": "u", "password": "p",
        }})
        assert s.repository.type is RepositoryType.WEBDAV
        assert s.repository.url == "https://h/dav"
        assert s.repository.options == {"username": "u", "password": "p"}

    def test_explicit_options_merged(self):
        s = Settings.from_dict({"repository": {
            "type": "webdav", "url": "https://h", "options": {"timeout": 5}, "verify": False,
        }})
        assert s.repository.options == {"timeout": 5, "verify": False}

    def test_git(self):
        s = Settings.from_dict({"repository": {"type": "git", "path": "/tmp/x", "branch": "dev"}})
        assert s.repository.type is RepositoryType.GIT
        assert s.repository.branch == "dev"
        assert s.repository.options == {}

    def test_default_branch(self):
        s = Settings.from_dict({"repository": {"type": "git", "path": "/tmp/x"}})
        assert s.repository.branch == "main"

    def test_unknown_type(self):
        with pytest.raises(ConfigError, match="Unknown repository type"):
            Settings.from_dict({"repository": {"type": "ftp"}})

    def test_webdav_requires_url(self):
        with pytest.raises(ConfigError, match="url"):
            Settings.from_dict({"repository": {"type": "webdav"}})

    def test_git_requires_path(self):
        with pytest.raises(ConfigError, match="path"):
            Settings.from_dict({"repository": {"type": "git"}})

    def test_repository_must_be_object(self):
        with pytest.raises(ConfigError):
            Settings.from_dict({"repository": "git"})


class TestSettings:
    def test_missing_repository(self):
        with pytest.raises(ConfigError, match="repository"):
            Settings.from_dict({})

    def test_defaults(self):
        s = Settings.from_dict({"repository": {"type": "git", "path": "/tmp/x"}})
        assert s.profile == "main"
        assert s.identity == b"profilesync <profilesync@localhost>"

    def test_invalid_profile(self):
        with pytest.raises(ConfigError, match="profile"):
            Settings.from_dict({"repository": {"type": "git", "path": "/x"}, "profile": "a/b"})

    def test_temporary_base_setting_wins(self, tmp_path, monkeypatch):
        monkeypatch.setenv("PROFILESYNC_TMPDIR", str(tmp_path / "env"))
        s = Settings.from_dict({
            "repository": {"type": "git", "path": "/x"},
            "temporary_directory": str(tmp_path / "cfg"),
        })
        assert s.temporary_base() == tmp_path / "cfg" / "profilesync"

    def test_temporary_base_env(self, tmp_path, monkeypatch):
        monkeypatch.setenv("PROFILESYNC_TMPDIR", str(tmp_path / "env"))
        s = Settings.from_dict({"repository": {"type": "git", "path": "/x"}})
        assert s.temporary_base() == tmp_path / "env" / "profilesync"


class TestLoadSettings:
    def test_load(self, tmp_path):
        p = tmp_path / "s.json"
        p.write_text(json.dumps({"repository": {"type": "git", "path": "/x"}, "profile": "work"}))
        assert load_settings(p).profile == "work"

    def test_profile_override(self, tmp_path):
        p = tmp_path / "s.json"
        p.write_text(json.dumps({"repository": {"type": "git", "path": "/x"}, "profile": "work"}))
        assert load_settings(p, profile="home").profile == "home"

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError, match="not found"):
            load_settings(tmp_path / "nope.json")

    def test_invalid_json(self, tmp_path):
        p = tmp_path / "s.json"
        p.write_text("{nope")
        with pytest.raises(ConfigError, match="Invalid JSON"):
            load_settings(p)

    def test_not_an_object(self, tmp_path):
        p = tmp_path / "s.json"
        p.write_text("[1, 2]")
        with pytest.raises(ConfigError, match="object"):
            load_settings(p)
