"""
GUI-host classification.

Decides whether an ancestor process owns the terminal/IDE window. No single
signal works everywhere, so each OS gets its own predicate:

- macOS: the executable lives inside an application bundle.
- Linux: the process is connected to a display server (X11 or Wayland).
- Windows: the process has a main window handle.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Callable

from .constants import DISPLAY_ENV_MARKERS, MACOS_APP_BUNDLE_MARKER, PROC_ROOT
from .process_inspector import ProcessIntrospection

logger = logging.getLogger(__name__)

GuiClassifier = Callable[[int, str | None], bool]
"""``(pid, executable_path) -> bool``."""


def is_app_bundle(_pid: int, executable_path: str | None) -> bool:
    """macOS: path-based check."""
    return bool(executable_path) and MACOS_APP_BUNDLE_MARKER in executable_path


def read_environ(pid: int, proc_root: str = PROC_ROOT) -> bytes:
    """Raw ``/proc/<pid>/environ`` bytes, or b"" if unreadable."""
    try:
        with open(os.path.join(proc_root, str(pid), "environ"), "rb") as f:
            return f.read()
    except OSError as e:
        logger.debug("Cannot read environ of PID %d: %s", pid, e)
        return b""


def has_display_env(environ: bytes) -> bool:
    """Whether a NUL-separated environ block sets DISPLAY or WAYLAND_DISPLAY."""
    for entry in environ.split(b"\0"):
        if entry.startswith(DISPLAY_ENV_MARKERS):
            return True
    return False


def display_classifier(proc_root: str = PROC_ROOT) -> GuiClassifier:
    """Linux: environment-based check against ``proc_root``."""

    def _is_gui_host(pid: int, _executable_path: str | None) -> bool:
        return has_display_env(read_environ(pid, proc_root))

    return _is_gui_host


def window_classifier(inspector: ProcessIntrospection) -> GuiClassifier:
    """Windows: window-based check using the inspector's snapshot."""

    def _is_gui_host(pid: int, _executable_path: str | None) -> bool:
        return inspector.has_visible_window(pid)

    return _is_gui_host


def never_gui(_pid: int, _executable_path: str | None) -> bool:
    """Unsupported platforms: nothing qualifies, so the walk finds nothing."""
    return False
