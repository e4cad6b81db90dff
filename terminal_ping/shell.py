"""Thin wrapper around external tool invocations.

Every OS utility we drive (ps, powershell, osascript, xdotool, ...) can be
missing, slow or broken. ``run_tool`` bounds each call with a timeout and
turns every failure into ``None`` so callers can degrade to a no-op.
"""

from __future__ import annotations

import logging
import shutil
import subprocess
import sys

from .constants import POWERSHELL_TIMEOUT

logger = logging.getLogger(__name__)


def run_tool(args: list[str], timeout: float) -> subprocess.CompletedProcess | None:
    """Run ``args`` and return the CompletedProcess, or None on failure.

    A non-zero exit status is not a failure here; callers inspect
    ``returncode`` themselves.
    """
    try:
        return subprocess.run(
            args,
            capture_output=True,
            text=True,
            timeout=timeout,
            check=False,
            creationflags=subprocess.CREATE_NO_WINDOW if sys.platform == "win32" else 0,
        )
    except subprocess.TimeoutExpired:
        logger.debug("%s timed out after %ss", args[0], timeout)
    except OSError as e:
        logger.debug("Could not run %s: %s", args[0], e)
    return None


def tool_output(args: list[str], timeout: float) -> str:
    """Stripped stdout of a successful run, or "" if it failed."""
    result = run_tool(args, timeout)
    if result is None or result.returncode != 0:
        return ""
    return (result.stdout or "").strip()


def has_tool(name: str) -> bool:
    """Whether ``name`` is on PATH."""
    return shutil.which(name) is not None


def run_powershell(
    script: str, timeout: float = POWERSHELL_TIMEOUT
) -> subprocess.CompletedProcess | None:
    """Run a PowerShell script without loading the user's profile."""
    return run_tool(
        ["powershell", "-NoProfile", "-NonInteractive", "-Command", script],
        timeout,
    )
