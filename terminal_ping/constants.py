"""
Centralised constants for terminal-ping.

All timeouts, file-system paths, hop limits and hardcoded names live here so
they are easy to find, tune, and test.
"""

from __future__ import annotations

import os
import tempfile

# ── File-system paths ─────────────────────────────────────────────────────────

SESSION_PID_FILENAME = "claude_terminal_pid"
"""Name of the single-slot session file inside the OS temp directory."""

SESSION_PID_FILE = os.path.join(tempfile.gettempdir(), SESSION_PID_FILENAME)

WRAPPER_SCRIPT_PREFIX = "claude_focus_"
"""Prefix of the macOS click-handler wrapper scripts written to the temp dir."""

WRAPPER_MAX_AGE = 24 * 60 * 60
"""Unclicked wrappers older than this (seconds) are removed at session end."""

CONFIG_PATH = os.path.join(os.path.expanduser("~"), ".claude", "terminal-ping.json")
CONFIG_PATH_ENV = "TERMINAL_PING_CONFIG"
"""Environment variable that overrides :data:`CONFIG_PATH`."""

PROC_ROOT = "/proc"

# ── Subprocess timeouts (seconds) ────────────────────────────────────────────

POWERSHELL_TIMEOUT = 15
"""Timeout for the Win32_Process snapshot and the toast/protocol script."""

PS_TIMEOUT = 10
"""Timeout for the Unix ``ps`` process listing."""

OSASCRIPT_TIMEOUT = 5
"""Timeout for macOS ``open``/``osascript`` focus commands."""

NOTIFY_TIMEOUT = 10
"""Timeout for ``terminal-notifier`` / ``notify-send``."""

WINDOW_TOOL_TIMEOUT = 5
"""Timeout for ``xdotool`` / ``wmctrl`` calls on Linux."""

# ── Process tree traversal limits ────────────────────────────────────────────

MAX_ANCESTRY_DEPTH = 20
"""How far up the process tree to walk when looking for a GUI ancestor."""

ROOT_PID = 1
"""Parents at or below this PID are init/launchd/System; the walk stops there."""

# ── Notification text ────────────────────────────────────────────────────────

MAX_MESSAGE_LENGTH = 100
"""Messages longer than this are cut and suffixed with :data:`ELLIPSIS`."""

ELLIPSIS = "…"

DEFAULT_MESSAGE = "Claude needs your attention"
"""Shown when the hook payload carries no usable text."""

NOTIFICATION_TITLE = "Claude Code"

MACOS_SOUND = "Basso"

STOP_EVENT = "Stop"
"""Hook event whose text lives in ``last_assistant_message``."""

# ── Click callback ───────────────────────────────────────────────────────────

URI_SCHEME = "claude-ping"
"""Custom URI protocol registered on Windows for toast activation."""

FOCUS_ACTION = "focus"

DUNST_ACTION_LABEL = "Go to Claude"

# ── GUI-host heuristics ──────────────────────────────────────────────────────

MACOS_APP_BUNDLE_MARKER = ".app/Contents/MacOS/"
"""Executables inside an application bundle own a GUI window."""

DISPLAY_ENV_MARKERS: tuple[bytes, ...] = (b"DISPLAY=", b"WAYLAND_DISPLAY=")
"""Environment entries that indicate a display-server connection on Linux."""

NO_TTY_NAMES: frozenset[str] = frozenset({"", "?", "??", "-"})
"""Values ``ps -o tty=`` prints for processes without a controlling terminal."""

WINDOWS_TOAST_AUMID = (
    "{1AC14E77-02E7-4E5D-B744-2EB1AE5198B7}\\WindowsPowerShell\\v1.0\\powershell.exe"
)
"""AppUserModelID toasts are shown under (PowerShell's, always registered)."""

PROCESS_QUERY_LIMITED_INFORMATION = 0x1000
"""Access right used to probe whether a Windows process is still alive."""
