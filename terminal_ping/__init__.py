"""terminal-ping: bell, desktop notification and click-to-focus for coding-assistant hooks."""

from .__version__ import __version__

__all__ = ["__version__"]
