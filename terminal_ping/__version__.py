"""Version information for terminal-ping."""

__version__ = "0.3.0"
