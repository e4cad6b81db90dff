"""Shared pytest fixtures for the test suite."""

import os
import sys

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from terminal_ping.config import reset_config  # noqa: E402
from terminal_ping.constants import CONFIG_PATH_ENV  # noqa: E402
from terminal_ping.session_store import SessionStore  # noqa: E402


class FakeInspector:
    """In-memory ProcessIntrospection built from a parent map."""

    def __init__(self, parents, paths=None, windows=(), ttys=None):
        self.parents = dict(parents)
        self.paths = dict(paths or {})
        self.windows = set(windows)
        self.ttys = dict(ttys or {})
        self.parent_calls = 0

    def parent_of(self, pid):
        self.parent_calls += 1
        return self.parents.get(pid)

    def executable_path_of(self, pid):
        return self.paths.get(pid)

    def has_visible_window(self, pid):
        return pid in self.windows

    def tty_device_of(self, pid):
        return self.ttys.get(pid)


def gui_set(*pids):
    """Classifier that accepts exactly ``pids``."""
    accepted = set(pids)

    def _classifier(pid, _path):
        return pid in accepted

    return _classifier


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Point config loading at a path that does not exist and drop the cache."""
    monkeypatch.setenv(CONFIG_PATH_ENV, str(tmp_path / "no-such-config.json"))
    reset_config()
    yield
    reset_config()


@pytest.fixture
def store(tmp_path):
    """A SessionStore writing under tmp_path."""
    return SessionStore(str(tmp_path / "claude_terminal_pid"))
