"""
Pydantic model for the hook payload read from stdin.

The assistant's hook runner pipes one JSON object per invocation. Only three
fields matter here; everything else is accepted and ignored.
"""

from __future__ import annotations

import json
import logging

from pydantic import BaseModel, ConfigDict, ValidationError

from .constants import DEFAULT_MESSAGE, ELLIPSIS, MAX_MESSAGE_LENGTH, STOP_EVENT

logger = logging.getLogger(__name__)


class HookEvent(BaseModel):
    """A Stop / Notification hook payload."""

    model_config = ConfigDict(extra="ignore")

    hook_event_name: str = ""
    message: str | None = None
    last_assistant_message: str | None = None

    @property
    def text(self) -> str:
        """Raw text to notify with: Stop carries the final assistant message."""
        if self.hook_event_name == STOP_EVENT:
            return self.last_assistant_message or ""
        return self.message or ""


def parse_hook_event(raw: str) -> HookEvent:
    """Parse stdin JSON; malformed or unexpected input yields an empty event."""
    if not raw or not raw.strip():
        return HookEvent()
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        logger.debug("Hook payload is not JSON: %s", e)
        return HookEvent()
    if not isinstance(data, dict):
        return HookEvent()
    try:
        return HookEvent.model_validate(data)
    except ValidationError as e:
        logger.debug("Hook payload failed validation: %s", e)
        return HookEvent()


def truncate_message(
    text: str | None,
    limit: int = MAX_MESSAGE_LENGTH,
    placeholder: str = DEFAULT_MESSAGE,
) -> str:
    """Cut ``text`` to ``limit`` characters plus an ellipsis.

    Empty text becomes ``placeholder``; short text passes through unchanged.
    """
    if not text:
        return placeholder
    if len(text) > limit:
        return text[:limit] + ELLIPSIS
    return text
