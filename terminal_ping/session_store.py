"""
Single-slot persistence of the terminal PID.

The notifying process and the process launched by a notification click are
unrelated, so the terminal PID is handed over through one small text file in
the OS temp directory. Last writer wins; readers tolerate a stale or missing
value. This is a cache, not authoritative state: every I/O error is logged and
swallowed.
"""

from __future__ import annotations

import logging
import os

from .constants import SESSION_PID_FILE

logger = logging.getLogger(__name__)


class SessionStore:
    """Save, load and clear the persisted terminal PID."""

    def __init__(self, path: str | None = None):
        self.path = path or SESSION_PID_FILE

    def save(self, pid: int) -> None:
        try:
            with open(self.path, "w", encoding="utf-8") as f:
                f.write(str(int(pid)))
        except (OSError, TypeError, ValueError) as e:
            logger.debug("Could not save terminal PID to %s: %s", self.path, e)

    def load(self) -> int | None:
        """Read the PID back, returning None if missing or corrupt."""
        if not os.path.exists(self.path):
            return None
        try:
            with open(self.path, encoding="utf-8") as f:
                pid = int(f.read().strip())
        except (ValueError, OSError) as e:
            logger.debug("Could not read terminal PID from %s: %s", self.path, e)
            return None
        return pid if pid > 0 else None

    def clear(self) -> None:
        try:
            os.remove(self.path)
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.debug("Could not remove %s: %s", self.path, e)
