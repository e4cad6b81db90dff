"""Tests for classifier.py — per-OS GUI host predicates."""

from conftest import FakeInspector

from terminal_ping.classifier import (
    display_classifier,
    has_display_env,
    is_app_bundle,
    never_gui,
    read_environ,
    window_classifier,
)


def _write_environ(proc_root, pid, entries):
    pid_dir = proc_root / str(pid)
    pid_dir.mkdir()
    (pid_dir / "environ").write_bytes(b"\0".join(entries) + b"\0")


class TestIsAppBundle:
    def test_bundle_executable(self):
        assert is_app_bundle(1, "/Applications/iTerm.app/Contents/MacOS/iTerm2")

    def test_nested_helper_bundle(self):
        path = "/Applications/Visual Studio Code.app/Contents/Frameworks/Code Helper.app/Contents/MacOS/Code Helper"
        assert is_app_bundle(1, path)

    def test_plain_binary(self):
        assert not is_app_bundle(1, "/bin/zsh")

    def test_missing_path(self):
        assert not is_app_bundle(1, None)
        assert not is_app_bundle(1, "")


class TestDisplayEnvironment:
    def test_x11_display(self):
        assert has_display_env(b"HOME=/root\0DISPLAY=:0\0")

    def test_wayland_display(self):
        assert has_display_env(b"WAYLAND_DISPLAY=wayland-0\0SHELL=/bin/bash\0")

    def test_no_display(self):
        assert not has_display_env(b"HOME=/root\0MY_DISPLAY_MODE=dark\0")

    def test_empty(self):
        assert not has_display_env(b"")

    def test_reads_proc_environ(self, tmp_path):
        _write_environ(tmp_path, 2210, [b"DISPLAY=:1", b"TERM=xterm"])
        classifier = display_classifier(str(tmp_path))
        assert classifier(2210, "/usr/bin/gnome-terminal-server") is True

    def test_proc_entry_without_display(self, tmp_path):
        _write_environ(tmp_path, 2300, [b"TERM=xterm-256color"])
        classifier = display_classifier(str(tmp_path))
        assert classifier(2300, "/bin/bash") is False

    def test_unreadable_environ(self, tmp_path):
        assert read_environ(999_999, str(tmp_path)) == b""
        assert display_classifier(str(tmp_path))(999_999, None) is False


class TestWindowClassifier:
    def test_uses_inspector_window_flag(self):
        inspector = FakeInspector({}, windows={4000})
        classifier = window_classifier(inspector)
        assert classifier(4000, "WindowsTerminal.exe") is True
        assert classifier(4100, "pwsh.exe") is False


class TestNeverGui:
    def test_always_false(self):
        assert never_gui(1, "/Applications/iTerm.app/Contents/MacOS/iTerm2") is False
