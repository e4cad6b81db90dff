"""
Desktop notifications with click-to-focus.

How a click is wired back to us differs per OS:
  - macOS: terminal-notifier runs an executable on click. It only does so
    reliably for a plain path, so a tiny wrapper script is written to the
    temp dir that re-invokes ``python -m terminal_ping focus <pid> [app]``.
  - Windows: toasts can only launch a URI, so a ``claude-ping:`` protocol
    handler is registered (per user, no admin) and the PID travels in the URI.
  - Linux: dunstify reports the chosen action on stdout, so a detached shell
    waits for it. Plain notify-send cannot wire a click at all; there the
    window is focused right away instead.

Sending is best effort: failures are logged and swallowed.
"""

from __future__ import annotations

import glob
import logging
import os
import shlex
import subprocess
import sys
import tempfile
import time
from typing import Protocol
from xml.sax.saxutils import escape

from .config import Config, get_config
from .constants import (
    DUNST_ACTION_LABEL,
    FOCUS_ACTION,
    NOTIFY_TIMEOUT,
    URI_SCHEME,
    WINDOWS_TOAST_AUMID,
    WRAPPER_MAX_AGE,
    WRAPPER_SCRIPT_PREFIX,
)
from .focus import WindowFocus, build_focus_uri
from .models import NotificationRequest
from .shell import has_tool, run_powershell, run_tool

logger = logging.getLogger(__name__)


class NotificationSink(Protocol):
    """Shows a notification whose click focuses ``request.target_pid``."""

    def send(self, request: NotificationRequest) -> None: ...


def ring_bell(tty_device: str | None) -> bool:
    """Write BEL to the session's TTY so the terminal highlights the tab."""
    if not tty_device:
        return False
    try:
        with open(tty_device, "w", encoding="utf-8") as tty:
            tty.write("\a")
        return True
    except OSError as e:
        logger.debug("Could not ring bell on %s: %s", tty_device, e)
        return False


def focus_command(
    target_pid: int | None = None, app_hint: str | None = None, python: str | None = None
) -> list[str]:
    """argv that runs the focus entry point for ``target_pid``."""
    cmd = [python or sys.executable, "-m", "terminal_ping", FOCUS_ACTION]
    if target_pid:
        cmd.append(str(target_pid))
        if app_hint:
            cmd.append(app_hint)
    return cmd


def remove_wrappers(tmpdir: str | None = None, max_age: float = WRAPPER_MAX_AGE) -> int:
    """Delete stale click wrappers from the temp dir. Returns the count.

    A wrapper removes itself when clicked, so anything left behind belongs to
    a notification that was dismissed. Younger ones may still be on screen
    for another session and are kept.
    """
    pattern = os.path.join(tmpdir or tempfile.gettempdir(), f"{WRAPPER_SCRIPT_PREFIX}*.sh")
    cutoff = time.time() - max_age
    removed = 0
    for path in glob.glob(pattern):
        try:
            if os.path.getmtime(path) > cutoff:
                continue
            os.remove(path)
            removed += 1
        except OSError as e:
            logger.debug("Could not remove %s: %s", path, e)
    return removed


def _applescript_string(text: str) -> str:
    return '"' + text.replace("\\", "\\\\").replace('"', '\\"') + '"'


# ---------------------------------------------------------------------------
# macOS
# ---------------------------------------------------------------------------


class MacNotifier:
    """terminal-notifier with an ``-execute`` wrapper; osascript as fallback."""

    def __init__(self, focuser: WindowFocus, config: Config | None = None, tmpdir: str | None = None):
        self.focuser = focuser
        self.config = config or get_config()
        self.tmpdir = tmpdir or tempfile.gettempdir()

    def write_wrapper(self, request: NotificationRequest) -> str | None:
        """Write an executable ``#!/bin/bash`` launcher for the click action."""
        path = os.path.join(
            self.tmpdir, f"{WRAPPER_SCRIPT_PREFIX}{os.getpid()}_{int(time.time() * 1000)}.sh"
        )
        command = shlex.join(focus_command(request.target_pid, request.app_hint))
        try:
            with open(path, "w", encoding="utf-8") as f:
                f.write(f'#!/bin/bash\nrm -f -- "$0"\nexec {command}\n')
            os.chmod(path, 0o755)
        except OSError as e:
            logger.debug("Could not write focus wrapper %s: %s", path, e)
            return None
        return path

    def send(self, request: NotificationRequest) -> None:
        try:
            if has_tool("terminal-notifier"):
                self._send_terminal_notifier(request)
            else:
                self._send_osascript(request)
        except Exception as e:
            logger.debug("macOS notification failed: %s", e)

    def _send_terminal_notifier(self, request: NotificationRequest) -> None:
        args = [
            "terminal-notifier",
            "-title",
            self.config.title,
            "-message",
            request.message,
            "-sound",
            self.config.sound,
            # Persistent alert: banners vanish before the user can click them
            "-ignoreDnD",
        ]
        wrapper = self.write_wrapper(request)
        if wrapper:
            args += ["-execute", wrapper]
        run_tool(args, NOTIFY_TIMEOUT)

    def _send_osascript(self, request: NotificationRequest) -> None:
        script = (
            f"display notification {_applescript_string(request.message)} "
            f"with title {_applescript_string(self.config.title)} "
            f"sound name {_applescript_string(self.config.sound)}"
        )
        run_tool(["osascript", "-e", script], NOTIFY_TIMEOUT)
        # display notification has no click action
        if request.target_pid:
            self.focuser.focus(request.target_pid, request.app_hint)


# ---------------------------------------------------------------------------
# Windows
# ---------------------------------------------------------------------------


def _ps_quote(text: str) -> str:
    """Quote for a PowerShell single-quoted string."""
    return "'" + text.replace("'", "''") + "'"


def _pythonw() -> str:
    """pythonw.exe next to the interpreter, so clicks don't flash a console."""
    candidate = os.path.join(os.path.dirname(sys.executable), "pythonw.exe")
    return candidate if os.path.exists(candidate) else sys.executable


def build_toast_script(request: NotificationRequest, title: str, python: str) -> str:
    """PowerShell that registers the protocol handler and shows the toast."""
    handler = f'"{python}" -m terminal_ping {FOCUS_ACTION} "%1"'
    attrs = ""
    if request.target_pid:
        uri = escape(build_focus_uri(request.target_pid))
        attrs = f' activationType="protocol" launch="{uri}"'
    body = escape(request.message, {'"': "&quot;"})
    xml = (
        f"<toast{attrs}><visual><binding template=\"ToastGeneric\">"
        f"<text>{escape(title)}</text>"
        f"<text>{body}</text>"
        "</binding></visual>"
        '<audio src="ms-winsoundevent:Notification.Default"/></toast>'
    )
    proto_key = f"HKCU:\\Software\\Classes\\{URI_SCHEME}"
    return "\n".join(
        [
            f"$protoKey = {_ps_quote(proto_key)}",
            "if (-not (Test-Path $protoKey)) { New-Item -Path $protoKey -Force | Out-Null }",
            f"Set-ItemProperty -Path $protoKey -Name '(Default)' -Value {_ps_quote('URL:' + URI_SCHEME)}",
            "Set-ItemProperty -Path $protoKey -Name 'URL Protocol' -Value ''",
            "$cmdKey = \"$protoKey\\shell\\open\\command\"",
            "if (-not (Test-Path $cmdKey)) { New-Item -Path $cmdKey -Force | Out-Null }",
            f"Set-ItemProperty -Path $cmdKey -Name '(Default)' -Value {_ps_quote(handler)}",
            "[void][Windows.UI.Notifications.ToastNotificationManager, Windows.UI.Notifications, ContentType = WindowsRuntime]",
            "[void][Windows.Data.Xml.Dom.XmlDocument, Windows.Data.Xml.Dom.XmlDocument, ContentType = WindowsRuntime]",
            "$doc = [Windows.Data.Xml.Dom.XmlDocument]::new()",
            f"$doc.LoadXml({_ps_quote(xml)})",
            "$toast = [Windows.UI.Notifications.ToastNotification]::new($doc)",
            f"[Windows.UI.Notifications.ToastNotificationManager]::CreateToastNotifier({_ps_quote(WINDOWS_TOAST_AUMID)}).Show($toast)",
        ]
    )


class WindowsNotifier:
    """WinRT toast via PowerShell; clicks arrive as ``claude-ping:`` URIs."""

    def __init__(self, config: Config | None = None):
        self.config = config or get_config()

    def send(self, request: NotificationRequest) -> None:
        try:
            script = build_toast_script(request, self.config.title, _pythonw())
            result = run_powershell(script)
            if result is not None and result.returncode != 0:
                logger.debug("Toast failed: %s", (result.stderr or "").strip())
        except Exception as e:
            logger.debug("Windows notification failed: %s", e)


# ---------------------------------------------------------------------------
# Linux
# ---------------------------------------------------------------------------


class LinuxNotifier:
    """dunstify with a focus action, else notify-send plus immediate focus."""

    def __init__(self, focuser: WindowFocus, config: Config | None = None):
        self.focuser = focuser
        self.config = config or get_config()

    def send(self, request: NotificationRequest) -> None:
        try:
            if has_tool("dunstify"):
                self._send_dunstify(request)
            else:
                self._send_notify_send(request)
        except Exception as e:
            logger.debug("Linux notification failed: %s", e)

    def _send_dunstify(self, request: NotificationRequest) -> None:
        dunstify = shlex.join(
            [
                "dunstify",
                "-A",
                f"{FOCUS_ACTION},{DUNST_ACTION_LABEL}",
                self.config.title,
                request.message,
            ]
        )
        focus = shlex.join(focus_command(request.target_pid, request.app_hint))
        script = (
            f"result=$({dunstify}); "
            f'if [ "$result" = {shlex.quote(FOCUS_ACTION)} ]; then {focus}; fi'
        )
        # Outlives this hook process: dunstify blocks until the user acts
        subprocess.Popen(  # pylint: disable=consider-using-with
            ["bash", "-c", script],
            stdin=subprocess.DEVNULL,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            start_new_session=True,
        )

    def _send_notify_send(self, request: NotificationRequest) -> None:
        if has_tool("notify-send"):
            run_tool(
                ["notify-send", "--icon=terminal", self.config.title, request.message],
                NOTIFY_TIMEOUT,
            )
        # notify-send has no click action
        if request.target_pid:
            self.focuser.focus(request.target_pid, request.app_hint)


class NullNotifier:
    """Unsupported platforms."""

    def send(self, request: NotificationRequest) -> None:
        logger.debug("Desktop notifications not supported on this platform")
