"""
Ancestry walker: find the terminal/IDE window that hosts this session.

Climbs the parent-PID chain from the hook process and returns the nearest
ancestor the platform classifier accepts as a GUI host, together with its
direct child (the shell or pane process unique to this tab).
"""

from __future__ import annotations

import logging
import os

from .classifier import GuiClassifier
from .constants import MAX_ANCESTRY_DEPTH, ROOT_PID
from .models import AncestryResult
from .process_inspector import ProcessIntrospection

logger = logging.getLogger(__name__)


def resolve(
    inspector: ProcessIntrospection,
    classifier: GuiClassifier,
    start_pid: int | None = None,
    max_depth: int = MAX_ANCESTRY_DEPTH,
) -> AncestryResult:
    """Walk up from ``start_pid`` (default: our parent) to the first GUI host.

    Stops at init/root or after ``max_depth`` hops, whichever comes first, so
    the walk terminates even if the inspector reports a cycle.
    """
    current = os.getppid() if start_pid is None else start_pid
    for _ in range(max_depth):
        try:
            candidate = inspector.parent_of(current)
        except Exception as e:
            logger.debug("Parent lookup failed for PID %s: %s", current, e)
            break
        if candidate is None or candidate <= ROOT_PID:
            break
        try:
            path = inspector.executable_path_of(candidate)
            is_gui = classifier(candidate, path)
        except Exception as e:
            logger.debug("Could not classify PID %d: %s", candidate, e)
            is_gui = False
        if is_gui:
            logger.debug("GUI ancestor PID %d (%s), session PID %d", candidate, path, current)
            return AncestryResult(session_pid=current, terminal_pid=candidate)
        current = candidate

    logger.debug("No GUI ancestor within %d hops", max_depth)
    return AncestryResult()
