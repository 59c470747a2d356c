"""Shared fixtures for profilesync tests."""

import pytest
from click.testing import CliRunner

from profilesync.exceptions import WebDAVError
from profilesync.mirror import TemporaryMirror
from profilesync.path import RemotePath
from profilesync.repositories import LocalGitRepository, WebDAVRepository
from profilesync.settings import Settings
from profilesync.webdav import RemoteEntry


# ---------------------------------------------------------------------------
# In-memory WebDAV store
# ---------------------------------------------------------------------------

class FakeDAV:
    """Stands in for `WebDAVClient`, recording every call as (op, path)."""

    def __init__(self):
        self.dirs: set[RemotePath] = {RemotePath.root()}
        self.files: dict[RemotePath, str] = {}
        self.calls: list[tuple[str, str]] = []
        self.fail_stat: BaseException | None = None
        self.fail_write: set[str] = set()

    # helpers for tests
    def add_file(self, path: str, text: str) -> None:
        p = RemotePath(path)
        for a in p.ancestors():
            self.dirs.add(a)
        self.files[p] = text

    def add_dir(self, path: str) -> None:
        p = RemotePath(path)
        for a in p.ancestors():
            self.dirs.add(a)
        self.dirs.add(p)

    def ops(self, op: str) -> list[str]:
        return [path for name, path in self.calls if name == op]

    # client interface
    def stat(self, path):
        path = RemotePath(path)
        self.calls.append(("stat", str(path)))
        if self.fail_stat is not None:
            raise self.fail_stat
        if path in self.dirs:
            return RemoteEntry(name=path.name, path=path, is_directory=True)
        if path in self.files:
            return RemoteEntry(name=path.name, path=path, is_directory=False,
                               size=len(self.files[path]))
        raise WebDAVError(f"PROPFIND {path} failed with status 404", status=404, path=str(path))

    def readdir(self, path):
        path = RemotePath(path)
        self.calls.append(("readdir", str(path)))
        if path not in self.dirs:
            raise WebDAVError(f"PROPFIND {path} failed with status 404", status=404, path=str(path))
        entries = [
            RemoteEntry(name=d.name, path=d, is_directory=True)
            for d in self.dirs if not d.is_root and d.parent() == path
        ]
        entries += [
            RemoteEntry(name=f.name, path=f, is_directory=False, size=len(t))
            for f, t in self.files.items() if f.parent() == path
        ]
        return sorted(entries, key=lambda e: e.name)

    def read_file(self, path):
        path = RemotePath(path)
        self.calls.append(("read_file", str(path)))
        if path not in self.files:
            raise WebDAVError(f"GET {path} failed with status 404", status=404, path=str(path))
        return self.files[path]

    def write_file(self, path, text):
        path = RemotePath(path)
        self.calls.append(("write_file", str(path)))
        if str(path) in self.fail_write:
            raise WebDAVError(f"PUT {path} failed with status 507", status=507, path=str(path))
        if path.parent() not in self.dirs:
            raise WebDAVError(f"PUT {path} failed with status 409", status=409, path=str(path))
        self.files[path] = text

    def mkdir(self, path):
        path = RemotePath(path)
        self.calls.append(("mkdir", str(path)))
        if path in self.dirs:
            raise WebDAVError(f"MKCOL {path} failed with status 405", status=405, path=str(path))
        if path.parent() not in self.dirs:
            raise WebDAVError(f"MKCOL {path} failed with status 409", status=409, path=str(path))
        self.dirs.add(path)

    def close(self):
        self.calls.append(("close", "/"))


# ---------------------------------------------------------------------------
# Settings and repositories
# ---------------------------------------------------------------------------

@pytest.fixture
def fake_dav():
    return FakeDAV()


@pytest.fixture
def webdav_settings(tmp_path):
    return Settings.from_dict({
        "repository": {"type": "webdav", "url": "https://dav.example.com/sync"},
        "profile": "main",
        "temporary_directory": str(tmp_path / "tmp"),
    })


@pytest.fixture
def webdav_repo(webdav_settings, fake_dav, tmp_path):
    """A WebDAVRepository talking to `FakeDAV`, not yet initialized."""
    mirror = TemporaryMirror.for_settings(webdav_settings, base=tmp_path / "mirrors")
    return WebDAVRepository(webdav_settings, client=fake_dav, mirror=mirror)


@pytest.fixture
def git_settings(tmp_path):
    return Settings.from_dict({
        "repository": {"type": "git", "path": str(tmp_path / "profiles-repo"), "branch": "main"},
        "profile": "main",
        "author": "tester",
        "email": "tester@example.com",
    })


@pytest.fixture
def git_repo(git_settings):
    """An initialized LocalGitRepository."""
    repo = LocalGitRepository(git_settings)
    repo.initialize()
    yield repo
    repo.terminate()


# ---------------------------------------------------------------------------
# CLI fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def git_config(tmp_path):
    """A settings file for a git repository; returns its path."""
    import json

    p = tmp_path / "sync.json"
    p.write_text(json.dumps({
        "repository": {"type": "git", "path": str(tmp_path / "cli-repo")},
        "profile": "work",
    }))
    return str(p)
