"""User configuration for terminal-ping.

Supports an optional JSON file at ~/.claude/terminal-ping.json (or the path
in $TERMINAL_PING_CONFIG) that overrides notification defaults.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, fields

from .constants import (
    CONFIG_PATH,
    CONFIG_PATH_ENV,
    DEFAULT_MESSAGE,
    MACOS_SOUND,
    MAX_MESSAGE_LENGTH,
    NOTIFICATION_TITLE,
)

logger = logging.getLogger(__name__)


@dataclass
class Config:
    """Notification settings. Every field has a built-in default."""

    title: str = NOTIFICATION_TITLE
    sound: str = MACOS_SOUND
    max_message_length: int = MAX_MESSAGE_LENGTH
    placeholder: str = DEFAULT_MESSAGE
    bell: bool = True


# Loaded once on first call
_config: Config | None = None


def _config_path() -> str:
    return os.environ.get(CONFIG_PATH_ENV) or CONFIG_PATH


def _load_config() -> Config:
    """Read the config file, ignoring unknown keys and wrongly-typed values.

    Expected format:
    {
        "title": "Claude Code",
        "sound": "Basso",
        "max_message_length": 100,
        "placeholder": "Claude needs your attention",
        "bell": true
    }
    """
    config = Config()
    path = _config_path()
    if not os.path.exists(path):
        return config
    try:
        with open(path, encoding="utf-8") as f:
            raw = json.load(f)
    except Exception as e:
        logger.debug("Ignoring unreadable config %s: %s", path, e)
        return config
    if not isinstance(raw, dict):
        return config

    for field in fields(Config):
        if field.name not in raw:
            continue
        value = raw[field.name]
        default = getattr(config, field.name)
        # bool is a subclass of int; keep the two apart
        if type(value) is not type(default):
            logger.debug("Ignoring config key %r: expected %s", field.name, type(default).__name__)
            continue
        setattr(config, field.name, value)
    if config.max_message_length <= 0:
        config.max_message_length = MAX_MESSAGE_LENGTH
    return config


def get_config() -> Config:
    """Return the cached configuration, loading it on first use."""
    global _config
    if _config is None:
        _config = _load_config()
    return _config


def reset_config() -> None:
    """Drop the cached configuration so the next call re-reads the file."""
    global _config
    _config = None
