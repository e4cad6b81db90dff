"""
Per-OS capability selection.

Each supported platform contributes one implementation of each capability
(process introspection, GUI classification, window focus, notification).
``detect_platform`` picks the bundle for the running interpreter once at
startup; the rest of the code only talks to the bundle.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass

from .classifier import GuiClassifier, display_classifier, is_app_bundle, never_gui, window_classifier
from .config import Config, get_config
from .focus import LinuxFocus, MacFocus, NullFocus, WindowFocus, WindowsFocus
from .notifier import LinuxNotifier, MacNotifier, NotificationSink, NullNotifier, WindowsNotifier
from .process_inspector import (
    ProcessIntrospection,
    SnapshotInspector,
    unix_inspector,
    windows_inspector,
)


@dataclass
class PlatformSupport:
    """The capability implementations for one OS."""

    name: str
    inspector: ProcessIntrospection
    classifier: GuiClassifier
    focuser: WindowFocus
    notifier: NotificationSink
    supports_bell: bool = True


def detect_platform(platform: str | None = None, config: Config | None = None) -> PlatformSupport:
    """Build the capability bundle for ``platform`` (default ``sys.platform``)."""
    platform = platform or sys.platform
    config = config or get_config()

    if platform == "darwin":
        focuser = MacFocus()
        return PlatformSupport(
            name=platform,
            inspector=unix_inspector(),
            classifier=is_app_bundle,
            focuser=focuser,
            notifier=MacNotifier(focuser, config),
        )
    if platform == "win32":
        inspector = windows_inspector()
        return PlatformSupport(
            name=platform,
            inspector=inspector,
            classifier=window_classifier(inspector),
            focuser=WindowsFocus(),
            notifier=WindowsNotifier(config),
            # The toast plays its own sound
            supports_bell=False,
        )
    if platform.startswith("linux"):
        focuser = LinuxFocus()
        return PlatformSupport(
            name=platform,
            inspector=unix_inspector(),
            classifier=display_classifier(),
            focuser=focuser,
            notifier=LinuxNotifier(focuser, config),
        )
    return PlatformSupport(
        name=platform,
        inspector=SnapshotInspector(dict),
        classifier=never_gui,
        focuser=NullFocus(),
        notifier=NullNotifier(),
        supports_bell=False,
    )
