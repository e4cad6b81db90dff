"""
Bring a terminal window to the foreground.

Policy, first success wins:
  1. activate the named application (app hint); needs no extra permissions
     and works from a notification daemon's restricted context;
  2. derive the application name from the live process's executable path;
  3. manipulate window focus for the PID directly.

Every implementation checks the PID is still alive first and returns False
without doing anything if it is gone. None of them raise.
"""

from __future__ import annotations

import logging
import re
from typing import Protocol

from .constants import (
    FOCUS_ACTION,
    OSASCRIPT_TIMEOUT,
    URI_SCHEME,
    WINDOW_TOOL_TIMEOUT,
)
from .process_inspector import process_exists
from .shell import has_tool, run_tool, tool_output

logger = logging.getLogger(__name__)

_URI_PID_RE = re.compile(r"[?&]pid=(\d+)")
_APP_BUNDLE_RE = re.compile(r"/([^/]+)\.app/")


class WindowFocus(Protocol):
    """Raises the window owned by a PID."""

    def focus(self, pid: int, app_hint: str | None = None) -> bool: ...


# ---------------------------------------------------------------------------
# Click-callback URIs
# ---------------------------------------------------------------------------


def build_focus_uri(pid: int) -> str:
    """``claude-ping:focus?pid=<pid>``"""
    return f"{URI_SCHEME}:{FOCUS_ACTION}?pid={int(pid)}"


def parse_pid_from_uri(uri: str | None) -> int | None:
    """Extract the decimal ``pid`` query parameter, or None if absent/malformed."""
    if not uri:
        return None
    match = _URI_PID_RE.search(uri)
    if not match:
        return None
    pid = int(match.group(1))
    return pid or None


def app_name_from_path(path: str | None) -> str | None:
    """``/Applications/iTerm.app/Contents/MacOS/iTerm2`` -> ``iTerm``."""
    if not path:
        return None
    match = _APP_BUNDLE_RE.search(path)
    return match.group(1) if match else None


# ---------------------------------------------------------------------------
# macOS
# ---------------------------------------------------------------------------


class MacFocus:
    """``open -a`` by application name, System Events by PID as a last resort."""

    def focus(self, pid: int, app_hint: str | None = None) -> bool:
        if not process_exists(pid, "darwin"):
            logger.debug("PID %s no longer exists, nothing to focus", pid)
            return False
        try:
            app = app_hint or app_name_from_path(
                tool_output(["ps", "-p", str(pid), "-o", "comm="], OSASCRIPT_TIMEOUT)
            )
            if app:
                result = run_tool(["open", "-a", app], OSASCRIPT_TIMEOUT)
                if result is not None and result.returncode == 0:
                    logger.debug("Activated %s", app)
                    return True
            # Needs the Accessibility permission
            script = (
                'tell application "System Events" to set frontmost of '
                f"(first process whose unix id is {int(pid)}) to true"
            )
            result = run_tool(["osascript", "-e", script], OSASCRIPT_TIMEOUT)
            return result is not None and result.returncode == 0
        except Exception as e:
            logger.debug("Could not focus PID %s: %s", pid, e)
            return False


# ---------------------------------------------------------------------------
# Linux
# ---------------------------------------------------------------------------


def _wmctrl_window_for_pid(pid: int) -> str | None:
    """Find a window id in ``wmctrl -lp`` output (id, desktop, pid, host, title)."""
    listing = tool_output(["wmctrl", "-lp"], WINDOW_TOOL_TIMEOUT)
    for line in listing.splitlines():
        parts = line.split(None, 3)
        if len(parts) >= 3 and parts[2] == str(pid):
            return parts[0]
    return None


class LinuxFocus:
    """xdotool, falling back to wmctrl. Both need an X11 (or XWayland) session."""

    def focus(self, pid: int, app_hint: str | None = None) -> bool:
        if not process_exists(pid, "linux"):
            logger.debug("PID %s no longer exists, nothing to focus", pid)
            return False
        try:
            if app_hint and has_tool("wmctrl"):
                result = run_tool(["wmctrl", "-xa", app_hint], WINDOW_TOOL_TIMEOUT)
                if result is not None and result.returncode == 0:
                    return True

            if has_tool("xdotool"):
                found = tool_output(["xdotool", "search", "--pid", str(pid)], WINDOW_TOOL_TIMEOUT)
                window_id = found.splitlines()[0] if found else ""
                if window_id:
                    result = run_tool(
                        ["xdotool", "windowactivate", "--sync", window_id], WINDOW_TOOL_TIMEOUT
                    )
                    if result is not None and result.returncode == 0:
                        return True

            if has_tool("wmctrl"):
                window_id = _wmctrl_window_for_pid(pid)
                if window_id:
                    result = run_tool(["wmctrl", "-ia", window_id], WINDOW_TOOL_TIMEOUT)
                    return result is not None and result.returncode == 0
        except Exception as e:
            logger.debug("Could not focus PID %s: %s", pid, e)
        return False


# ---------------------------------------------------------------------------
# Windows
# ---------------------------------------------------------------------------


class WindowsFocus:
    """SetForegroundWindow via pywin32, attached to the foreground input queue.

    Windows only lets the foreground thread hand out focus, so a background
    process attaches its input queue to that thread before raising the target.
    Named-application activation has no equivalent here; the hint is ignored.
    """

    def focus(self, pid: int, app_hint: str | None = None) -> bool:
        try:
            import win32api
            import win32con
            import win32gui
            import win32process
        except ImportError:
            logger.debug("pywin32 not installed; cannot focus windows")
            return False

        if not process_exists(pid, "win32"):
            logger.debug("PID %s no longer exists, nothing to focus", pid)
            return False

        target_hwnd = None

        def enum_cb(hwnd, _):
            nonlocal target_hwnd
            if target_hwnd is None and win32gui.IsWindowVisible(hwnd):
                _, owner = win32process.GetWindowThreadProcessId(hwnd)
                if owner == pid and win32gui.GetWindowText(hwnd):
                    target_hwnd = hwnd
            return True

        try:
            win32gui.EnumWindows(enum_cb, None)
            if not target_hwnd:
                logger.debug("No visible window found for PID %s", pid)
                return False

            fg_thread = win32process.GetWindowThreadProcessId(win32gui.GetForegroundWindow())[0]
            my_thread = win32api.GetCurrentThreadId()
            attach = bool(fg_thread) and fg_thread != my_thread
            if attach:
                win32process.AttachThreadInput(my_thread, fg_thread, True)
            try:
                placement = win32gui.GetWindowPlacement(target_hwnd)
                if placement[1] == win32con.SW_SHOWMINIMIZED:
                    win32gui.ShowWindow(target_hwnd, win32con.SW_RESTORE)
                win32gui.SetForegroundWindow(target_hwnd)
            finally:
                if attach:
                    win32process.AttachThreadInput(my_thread, fg_thread, False)
            logger.debug("Focused: %s", win32gui.GetWindowText(target_hwnd))
            return True
        except Exception as e:
            logger.debug("Could not focus window for PID %s: %s", pid, e)
            return False


class NullFocus:
    """Unsupported platforms."""

    def focus(self, pid: int, app_hint: str | None = None) -> bool:
        logger.debug("Window focus not supported on this platform")
        return False
