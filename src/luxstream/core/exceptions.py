"""
Custom Exceptions for luxstream.

Provides a hierarchy of exceptions for the frame pipeline, separating
per-tick recoverable failures (a bad color, a dropped send) from
startup-time configuration errors that must stop the process.
"""

from __future__ import annotations


class LightingError(Exception):
    """Base exception for all luxstream errors."""

    def __init__(self, message: str, recoverable: bool = True):
        super().__init__(message)
        self.message = message
        self.recoverable = recoverable


# =============================================================================
# Color Errors
# =============================================================================


class ColorParseError(LightingError):
    """Color specification string could not be converted."""

    def __init__(self, spec: str, reason: str = "unrecognized color"):
        super().__init__(f"Unknown color {spec!r}: {reason}", recoverable=True)
        self.spec = spec
        self.reason = reason


# =============================================================================
# Configuration Errors
# =============================================================================


class ConfigError(LightingError):
    """Base exception for configuration errors."""

    def __init__(self, message: str):
        super().__init__(message, recoverable=False)


class ConfigReferenceError(ConfigError):
    """A channel names a universe that does not exist."""

    def __init__(self, channel: int, universe: str):
        super().__init__(f"Channel at offset {channel} references unknown universe '{universe}'")
        self.channel = channel
        self.universe = universe


class ChannelBoundsError(ConfigError):
    """A channel write window does not fit inside its universe."""

    def __init__(self, offset: int, length: int, channel_count: int):
        super().__init__(
            f"Channel window [{offset}, {offset + length}) exceeds "
            f"universe channel count {channel_count}"
        )
        self.offset = offset
        self.length = length
        self.channel_count = channel_count


class DuplicateUniverseError(ConfigError):
    """Two universes share the same name."""

    def __init__(self, name: str):
        super().__init__(f"Universe name '{name}' is defined more than once")
        self.name = name


# =============================================================================
# Transport Errors
# =============================================================================


class TransportError(LightingError):
    """Opening or sending on a universe transport failed."""

    def __init__(self, destination: str, reason: str):
        super().__init__(f"Transport error for {destination}: {reason}", recoverable=True)
        self.destination = destination
        self.reason = reason
