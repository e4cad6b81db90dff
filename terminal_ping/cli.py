"""
terminal-ping - CLI entry point.

Hook entry points for the coding assistant:
  notify          Stop / Notification hook: bell + desktop notification
  focus           notification click handler: raise the terminal window
  session-start   remember the terminal PID early
  session-end     forget it again
"""

import argparse
import logging
import sys

from .__version__ import __version__
from .ancestry import resolve
from .config import get_config
from .constants import URI_SCHEME
from .focus import app_name_from_path, parse_pid_from_uri
from .models import NotificationRequest
from .notifier import remove_wrappers, ring_bell
from .platforms import PlatformSupport, detect_platform
from .schemas import parse_hook_event, truncate_message
from .session_store import SessionStore

logger = logging.getLogger(__name__)


def _read_stdin() -> str:
    """Hook payload from stdin; empty when run by hand from a terminal."""
    stream = sys.stdin
    if stream is None or stream.isatty():
        return ""
    try:
        return stream.read()
    except (OSError, ValueError) as e:
        logger.debug("Could not read stdin: %s", e)
        return ""


def parse_focus_target(target: str | None) -> int | None:
    """A ``claude-ping:`` URI or a bare decimal PID; anything else is None."""
    if not target:
        return None
    target = target.strip()
    if target.startswith(f"{URI_SCHEME}:"):
        return parse_pid_from_uri(target)
    if target.isdecimal():
        return int(target) or None
    return None


def cmd_notify(_args, support: PlatformSupport, store: SessionStore) -> int:
    """Ring the bell and send a notification that focuses this terminal on click."""
    config = get_config()
    event = parse_hook_event(_read_stdin())
    message = truncate_message(event.text, config.max_message_length, config.placeholder)

    ancestry = resolve(support.inspector, support.classifier)
    if ancestry.terminal_pid:
        store.save(ancestry.terminal_pid)
        target_pid = ancestry.terminal_pid
    else:
        # e.g. forked into a detached subshell; use what session-start saw
        target_pid = store.load()

    app_hint = None
    if ancestry.terminal_pid:
        app_hint = app_name_from_path(support.inspector.executable_path_of(ancestry.terminal_pid))

    # Bell first so the tab is highlighted before the notification lands
    if config.bell and support.supports_bell and ancestry.session_pid:
        ring_bell(support.inspector.tty_device_of(ancestry.session_pid))

    support.notifier.send(
        NotificationRequest(message=message, target_pid=target_pid, app_hint=app_hint)
    )
    return 0


def cmd_focus(args, support: PlatformSupport, store: SessionStore) -> int:
    """Bring the terminal window to the front (notification click handler)."""
    pid = parse_focus_target(args.target) or store.load()
    if not pid:
        logger.debug("No terminal PID to focus")
        return 0
    support.focuser.focus(pid, args.app or None)
    return 0


def cmd_session_start(_args, support: PlatformSupport, store: SessionStore) -> int:
    """Save the terminal PID while the process tree is still intact."""
    ancestry = resolve(support.inspector, support.classifier)
    if ancestry.terminal_pid:
        store.save(ancestry.terminal_pid)
    return 0


def cmd_session_end(_args, _support: PlatformSupport, store: SessionStore) -> int:
    """Remove the session file and stale click wrappers."""
    store.clear()
    remove_wrappers()
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="terminal-ping",
        description="Bell, desktop notification and click-to-focus for coding-assistant hooks",
        epilog=(
            "Examples:\n"
            "  terminal-ping notify < hook.json            Notify from a Stop/Notification hook\n"
            "  terminal-ping focus 4242                    Focus the window of PID 4242\n"
            "  terminal-ping focus claude-ping:focus?pid=4242\n"
            "  terminal-ping session-start                 Remember the terminal PID\n"
            "  terminal-ping session-end                   Forget it\n"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Log debug details to stderr"
    )
    sub = parser.add_subparsers(dest="command")

    sub.add_parser("notify", help="Ring the bell and send a desktop notification")

    focus_p = sub.add_parser("focus", help="Bring the terminal window to the foreground")
    focus_p.add_argument(
        "target", nargs="?", help=f"Terminal PID or {URI_SCHEME}: URI (default: saved PID)"
    )
    focus_p.add_argument("app", nargs="?", help="Application name to activate (macOS)")

    sub.add_parser("session-start", help="Save the terminal PID for this session")
    sub.add_parser("session-end", help="Clear the saved terminal PID")
    return parser


def main(argv=None) -> int:
    """CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            stream=sys.stderr,
            format="%(asctime)s %(name)s %(levelname)s: %(message)s",
        )
    if not args.command:
        parser.print_help()
        return 0

    handler = {
        "notify": cmd_notify,
        "focus": cmd_focus,
        "session-start": cmd_session_start,
        "session-end": cmd_session_end,
    }[args.command]
    return handler(args, detect_platform(), SessionStore())


if __name__ == "__main__":
    sys.exit(main())
