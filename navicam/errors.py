"""
Error types raised by navicam.

Nothing in the analysis core is fatal; these cover misconfiguration
and misuse of a stopped session.
"""


class NavicamError(Exception):
    """Base class for navicam errors."""


class ConfigError(NavicamError):
    """Configuration could not be loaded or failed validation."""


class SessionStoppedError(NavicamError):
    """A frame was submitted to a session that has been stopped."""
