"""Typed data models for terminal-ping."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class ProcessEntry:
    """One row of a process-table snapshot."""

    pid: int
    ppid: int = 0
    executable: str = ""
    tty: str = ""
    has_window: bool = False


@dataclass(frozen=True)
class AncestryResult:
    """Outcome of an ancestry walk.

    ``terminal_pid`` is the GUI-owning ancestor (terminal or IDE);
    ``session_pid`` is its direct child, unique per tab/pane. Both are
    ``None`` when no GUI ancestor was found within the hop bound.
    """

    session_pid: int | None = None
    terminal_pid: int | None = None

    @property
    def found(self) -> bool:
        return self.terminal_pid is not None


@dataclass(frozen=True)
class NotificationRequest:
    """What to show and which window to focus when the user clicks."""

    message: str
    target_pid: int | None = None
    app_hint: str | None = None
