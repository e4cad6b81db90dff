"""Tests for process_inspector.py — bulk snapshots and fail-soft lookups."""

import json
import os
import subprocess
import sys
from unittest.mock import MagicMock, patch

import pytest

from terminal_ping.models import ProcessEntry
from terminal_ping.process_inspector import (
    SnapshotInspector,
    parse_ps_output,
    parse_windows_snapshot,
    process_exists,
    snapshot_unix,
    snapshot_windows,
)

MAC_PS_OUTPUT = """\
    1     0 ??       /sbin/launchd
  612     1 ??       /Applications/Visual Studio Code.app/Contents/MacOS/Electron
  700   612 ttys001  /bin/zsh
  801   700 ttys001  node
"""

LINUX_PS_OUTPUT = """\
      1       0 ?        systemd
   2210       1 ?        gnome-terminal-
   2300    2210 pts/0    bash
"""


# ---------------------------------------------------------------------------
# parse_ps_output / snapshot_unix
# ---------------------------------------------------------------------------


class TestParsePsOutput:
    def test_parses_mac_paths_with_spaces(self):
        table = parse_ps_output(MAC_PS_OUTPUT)
        assert table[612].executable == (
            "/Applications/Visual Studio Code.app/Contents/MacOS/Electron"
        )
        assert table[612].ppid == 1
        assert table[700].tty == "ttys001"

    def test_parses_linux_output(self):
        table = parse_ps_output(LINUX_PS_OUTPUT)
        assert set(table) == {1, 2210, 2300}
        assert table[2300].ppid == 2210
        assert table[2300].tty == "pts/0"

    def test_skips_malformed_lines(self):
        table = parse_ps_output("garbage\n  12 x ?? foo\n  13 1 ?? bar\n")
        assert list(table) == [13]

    def test_empty_output(self):
        assert parse_ps_output("") == {}


class TestSnapshotUnix:
    def test_single_ps_call(self):
        mock_run = MagicMock(return_value=MagicMock(returncode=0, stdout=MAC_PS_OUTPUT))
        with patch("terminal_ping.shell.subprocess.run", mock_run):
            table = snapshot_unix()
        assert mock_run.call_count == 1
        args = mock_run.call_args[0][0]
        assert args[0] == "ps"
        assert "pid=,ppid=,tty=,comm=" in args
        assert 801 in table

    def test_ps_failure_returns_empty(self):
        mock_run = MagicMock(return_value=MagicMock(returncode=1, stdout=""))
        with patch("terminal_ping.shell.subprocess.run", mock_run):
            assert snapshot_unix() == {}

    def test_ps_timeout_returns_empty(self):
        with patch(
            "terminal_ping.shell.subprocess.run",
            side_effect=subprocess.TimeoutExpired(cmd="ps", timeout=10),
        ):
            assert snapshot_unix() == {}

    def test_ps_missing_returns_empty(self):
        with patch("terminal_ping.shell.subprocess.run", side_effect=FileNotFoundError("ps")):
            assert snapshot_unix() == {}


# ---------------------------------------------------------------------------
# parse_windows_snapshot / snapshot_windows
# ---------------------------------------------------------------------------


class TestParseWindowsSnapshot:
    def test_list_of_rows(self):
        rows = [
            {
                "ProcessId": 4000,
                "ParentProcessId": 900,
                "Name": "WindowsTerminal.exe",
                "ExecutablePath": "C:\\Program Files\\WindowsApps\\WindowsTerminal.exe",
                "HasWindow": True,
            },
            {
                "ProcessId": 4100,
                "ParentProcessId": 4000,
                "Name": "pwsh.exe",
                "ExecutablePath": None,
                "HasWindow": False,
            },
        ]
        table = parse_windows_snapshot(json.dumps(rows))
        assert table[4000].has_window is True
        assert table[4100].ppid == 4000
        # Falls back to Name when ExecutablePath is inaccessible
        assert table[4100].executable == "pwsh.exe"

    def test_single_row_dict(self):
        table = parse_windows_snapshot(json.dumps({"ProcessId": 5, "ParentProcessId": 4}))
        assert table[5].ppid == 4

    def test_invalid_json(self):
        assert parse_windows_snapshot("not json") == {}

    def test_skips_rows_without_pid(self):
        table = parse_windows_snapshot(json.dumps([{"ProcessId": None}, "junk"]))
        assert table == {}


class TestSnapshotWindows:
    def test_uses_one_powershell_call(self):
        out = json.dumps([{"ProcessId": 10, "ParentProcessId": 4, "HasWindow": True}])
        mock_run = MagicMock(return_value=MagicMock(returncode=0, stdout=out))
        with patch("terminal_ping.shell.subprocess.run", mock_run):
            table = snapshot_windows()
        assert mock_run.call_count == 1
        args = mock_run.call_args[0][0]
        assert args[0] == "powershell"
        assert "Win32_Process" in args[-1]
        assert "MainWindowHandle" in args[-1]
        assert table[10].has_window

    def test_failure_returns_empty(self):
        with patch("terminal_ping.shell.subprocess.run", side_effect=OSError("no powershell")):
            assert snapshot_windows() == {}


# ---------------------------------------------------------------------------
# SnapshotInspector
# ---------------------------------------------------------------------------


def _inspector(entries, proc_root=None):
    table = {e.pid: e for e in entries}
    return SnapshotInspector(lambda: table, proc_root=proc_root)


class TestSnapshotInspector:
    def test_lookups(self):
        inspector = _inspector(
            [
                ProcessEntry(pid=700, ppid=612, executable="/bin/zsh", tty="ttys001"),
                ProcessEntry(pid=612, ppid=1, executable="/Applications/X.app/Contents/MacOS/X"),
            ]
        )
        assert inspector.parent_of(700) == 612
        assert inspector.executable_path_of(612) == "/Applications/X.app/Contents/MacOS/X"
        assert inspector.tty_device_of(700) == "/dev/ttys001"
        assert inspector.has_visible_window(612) is False

    def test_loader_called_once(self):
        loader = MagicMock(return_value={1: ProcessEntry(pid=1)})
        inspector = SnapshotInspector(loader)
        inspector.parent_of(1)
        inspector.executable_path_of(1)
        inspector.tty_device_of(1)
        assert loader.call_count == 1

    @pytest.mark.parametrize("pid", [999_999, 0, -5, None])
    def test_missing_pid_fails_soft(self, pid):
        inspector = _inspector([ProcessEntry(pid=1)])
        assert inspector.parent_of(pid) is None
        assert inspector.executable_path_of(pid) is None
        assert inspector.has_visible_window(pid) is False
        assert inspector.tty_device_of(pid) is None

    def test_loader_exception_yields_empty_table(self):
        inspector = SnapshotInspector(MagicMock(side_effect=RuntimeError("boom")))
        assert inspector.parent_of(1) is None
        assert inspector.table == {}

    @pytest.mark.parametrize("tty", ["??", "?", ""])
    def test_no_controlling_tty(self, tty):
        inspector = _inspector([ProcessEntry(pid=5, ppid=1, tty=tty)])
        assert inspector.tty_device_of(5) is None

    def test_zero_ppid_is_none(self):
        inspector = _inspector([ProcessEntry(pid=1, ppid=0)])
        assert inspector.parent_of(1) is None

    @pytest.mark.skipif(sys.platform == "win32", reason="symlinks need privileges on Windows")
    def test_executable_from_proc_exe(self, tmp_path):
        proc_dir = tmp_path / "2210"
        proc_dir.mkdir()
        os.symlink("/usr/bin/gnome-terminal-server", proc_dir / "exe")
        inspector = _inspector(
            [ProcessEntry(pid=2210, ppid=1, executable="gnome-terminal-")], proc_root=str(tmp_path)
        )
        assert inspector.executable_path_of(2210) == "/usr/bin/gnome-terminal-server"

    def test_proc_exe_unreadable_falls_back_to_comm(self, tmp_path):
        inspector = _inspector(
            [ProcessEntry(pid=2210, ppid=1, executable="gnome-terminal-")], proc_root=str(tmp_path)
        )
        assert inspector.executable_path_of(2210) == "gnome-terminal-"


# ---------------------------------------------------------------------------
# process_exists
# ---------------------------------------------------------------------------


class TestProcessExists:
    @pytest.mark.skipif(sys.platform == "win32", reason="signal 0 probing is Unix-only")
    def test_current_process_exists(self):
        assert process_exists(os.getpid(), "linux") is True

    def test_lookup_error_means_gone(self):
        with patch("terminal_ping.process_inspector.os.kill", side_effect=ProcessLookupError):
            assert process_exists(4242, "darwin") is False

    def test_permission_error_means_alive(self):
        with patch("terminal_ping.process_inspector.os.kill", side_effect=PermissionError):
            assert process_exists(4242, "linux") is True

    @pytest.mark.parametrize("pid", [0, -1, None, "123"])
    def test_invalid_pid(self, pid):
        assert process_exists(pid, "linux") is False

    def test_windows_open_process_failure(self):
        mock_pywintypes = MagicMock()
        mock_pywintypes.error = type("error", (Exception,), {})
        mock_win32api = MagicMock()
        mock_win32api.OpenProcess.side_effect = mock_pywintypes.error("gone")
        with patch.dict("sys.modules", {"win32api": mock_win32api, "pywintypes": mock_pywintypes}):
            assert process_exists(4242, "win32") is False

    def test_windows_open_process_success(self):
        mock_pywintypes = MagicMock()
        mock_pywintypes.error = type("error", (Exception,), {})
        mock_win32api = MagicMock()
        with patch.dict("sys.modules", {"win32api": mock_win32api, "pywintypes": mock_pywintypes}):
            assert process_exists(4242, "win32") is True
        mock_win32api.CloseHandle.assert_called_once()
