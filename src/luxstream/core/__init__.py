"""Core configuration and error types for luxstream."""

from luxstream.core.config import (
    CandleConfig,
    ChannelConfig,
    Settings,
    UniverseConfig,
)
from luxstream.core.exceptions import (
    ChannelBoundsError,
    ColorParseError,
    ConfigError,
    ConfigReferenceError,
    DuplicateUniverseError,
    LightingError,
    TransportError,
)

__all__ = [
    "Settings",
    "UniverseConfig",
    "ChannelConfig",
    "CandleConfig",
    "LightingError",
    "ColorParseError",
    "ConfigError",
    "ConfigReferenceError",
    "ChannelBoundsError",
    "DuplicateUniverseError",
    "TransportError",
]
