"""
Process inspection for the ancestry walk.

Takes one bulk snapshot of the process table (``ps`` on Unix, a single
Win32_Process CIM query on Windows) and answers parent / executable / window /
tty lookups from it. Spawning a tool per hop costs up to a second each on
Windows, so the snapshot is loaded lazily once and reused.

Every lookup fails soft: a PID that is missing from the snapshot, or a
snapshot that could not be taken at all, yields ``None`` / ``False``.
"""

from __future__ import annotations

import json
import logging
import os
import sys
from collections.abc import Callable
from typing import Protocol

from .constants import (
    NO_TTY_NAMES,
    PROC_ROOT,
    PROCESS_QUERY_LIMITED_INFORMATION,
    PS_TIMEOUT,
)
from .models import ProcessEntry
from .shell import run_powershell, run_tool

logger = logging.getLogger(__name__)

ProcessTable = dict[int, ProcessEntry]


class ProcessIntrospection(Protocol):
    """Read-only view of process metadata used by the ancestry walker."""

    def parent_of(self, pid: int) -> int | None: ...

    def executable_path_of(self, pid: int) -> str | None: ...

    def has_visible_window(self, pid: int) -> bool: ...

    def tty_device_of(self, pid: int) -> str | None: ...


# ---------------------------------------------------------------------------
# Snapshot loaders
# ---------------------------------------------------------------------------


def parse_ps_output(output: str) -> ProcessTable:
    """Parse ``ps -A -o pid=,ppid=,tty=,comm=`` output.

    ``comm`` is last because on macOS it is the full executable path and may
    contain spaces (``/Applications/Visual Studio Code.app/...``).
    """
    table: ProcessTable = {}
    for line in output.splitlines():
        parts = line.split(None, 3)
        if len(parts) < 4:
            continue
        try:
            pid = int(parts[0])
            ppid = int(parts[1])
        except ValueError:
            continue
        table[pid] = ProcessEntry(pid=pid, ppid=ppid, tty=parts[2], executable=parts[3].strip())
    return table


def snapshot_unix() -> ProcessTable:
    """Snapshot every process via a single ``ps`` call."""
    result = run_tool(["ps", "-A", "-o", "pid=,ppid=,tty=,comm="], PS_TIMEOUT)
    if result is None or result.returncode != 0 or not result.stdout.strip():
        return {}
    return parse_ps_output(result.stdout)


# Processes with a main window are collected first, then joined onto the CIM
# rows so the whole table comes back from one powershell.exe launch.
_WINDOWS_SNAPSHOT_SCRIPT = (
    "$windowed = @{}; "
    "Get-Process | Where-Object { $_.MainWindowHandle -ne [IntPtr]::Zero } | "
    "ForEach-Object { $windowed[[int]$_.Id] = $true }; "
    "Get-CimInstance Win32_Process | "
    "Select-Object ProcessId,ParentProcessId,Name,ExecutablePath,"
    "@{N='HasWindow';E={$windowed.ContainsKey([int]$_.ProcessId)}} | "
    "ConvertTo-Json -Depth 2 -Compress"
)


def parse_windows_snapshot(output: str) -> ProcessTable:
    """Parse the JSON emitted by :data:`_WINDOWS_SNAPSHOT_SCRIPT`."""
    try:
        data = json.loads(output)
    except json.JSONDecodeError as e:
        logger.debug("Failed to parse PowerShell output: %s", e)
        return {}
    if isinstance(data, dict):
        data = [data]
    if not isinstance(data, list):
        return {}

    table: ProcessTable = {}
    for row in data:
        if not isinstance(row, dict):
            continue
        try:
            pid = int(row.get("ProcessId") or 0)
            ppid = int(row.get("ParentProcessId") or 0)
        except (TypeError, ValueError):
            continue
        if not pid:
            continue
        table[pid] = ProcessEntry(
            pid=pid,
            ppid=ppid,
            executable=row.get("ExecutablePath") or row.get("Name") or "",
            has_window=bool(row.get("HasWindow")),
        )
    return table


def snapshot_windows() -> ProcessTable:
    """Snapshot every process via one PowerShell/WMI query."""
    result = run_powershell(_WINDOWS_SNAPSHOT_SCRIPT)
    if result is None or result.returncode != 0 or not result.stdout.strip():
        return {}
    return parse_windows_snapshot(result.stdout)


# ---------------------------------------------------------------------------
# Inspector
# ---------------------------------------------------------------------------


class SnapshotInspector:
    """ProcessIntrospection backed by a lazily-taken process table.

    ``loader`` returns the table; it is called at most once. ``proc_root``,
    when set, is used to read the real executable path from
    ``<proc_root>/<pid>/exe`` (Linux).
    """

    def __init__(self, loader: Callable[[], ProcessTable], proc_root: str | None = None):
        self._loader = loader
        self._proc_root = proc_root
        self._table: ProcessTable | None = None

    @property
    def table(self) -> ProcessTable:
        if self._table is None:
            try:
                self._table = self._loader()
            except Exception as e:
                logger.warning("Error scanning processes: %s", e)
                self._table = {}
        return self._table

    def _entry(self, pid) -> ProcessEntry | None:
        if not isinstance(pid, int) or pid <= 0:
            return None
        return self.table.get(pid)

    def parent_of(self, pid: int) -> int | None:
        entry = self._entry(pid)
        if entry is None or entry.ppid <= 0:
            return None
        return entry.ppid

    def executable_path_of(self, pid: int) -> str | None:
        entry = self._entry(pid)
        if entry is None:
            return None
        if self._proc_root:
            try:
                return os.readlink(os.path.join(self._proc_root, str(pid), "exe"))
            except OSError:
                pass
        return entry.executable or None

    def has_visible_window(self, pid: int) -> bool:
        entry = self._entry(pid)
        return bool(entry and entry.has_window)

    def tty_device_of(self, pid: int) -> str | None:
        entry = self._entry(pid)
        if entry is None or entry.tty in NO_TTY_NAMES:
            return None
        return f"/dev/{entry.tty}"


def unix_inspector() -> SnapshotInspector:
    proc_root = PROC_ROOT if sys.platform.startswith("linux") else None
    return SnapshotInspector(snapshot_unix, proc_root=proc_root)


def windows_inspector() -> SnapshotInspector:
    return SnapshotInspector(snapshot_windows)


# ---------------------------------------------------------------------------
# Liveness
# ---------------------------------------------------------------------------


def _process_exists_windows(pid: int) -> bool:
    try:
        import pywintypes
        import win32api
    except ImportError:
        # Without pywin32 we cannot tell; let the focus attempt find out.
        return True
    try:
        handle = win32api.OpenProcess(PROCESS_QUERY_LIMITED_INFORMATION, False, pid)
    except pywintypes.error:
        return False
    win32api.CloseHandle(handle)
    return True


def process_exists(pid, platform: str | None = None) -> bool:
    """Whether ``pid`` names a live process. Never raises."""
    if not isinstance(pid, int) or pid <= 0:
        return False
    platform = platform or sys.platform
    if platform == "win32":
        return _process_exists_windows(pid)
    try:
        os.kill(pid, 0)
    except ProcessLookupError:
        return False
    except PermissionError:
        # Exists, but owned by another user
        return True
    except OSError:
        return False
    return True
