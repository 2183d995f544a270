"""
Configuration Management for luxstream.

Uses Pydantic Settings for type-safe configuration with environment
variable support and YAML file loading. The universes and channels
lists are fixed for the lifetime of a run.
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional, Tuple

import yaml
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from luxstream.dmx.e131 import (
    E131_DEFAULT_PRIORITY,
    E131_PORT,
    E131_UNIVERSE_MAX,
    E131_UNIVERSE_MIN,
)
from luxstream.dmx.slots import DMX_CHANNEL_COUNT

DEFAULT_FRAME_RATE_HZ = 30.0
DEFAULT_SOURCE_NAME = "luxstream"


class UniverseConfig(BaseModel):
    """One E1.31 output stream."""
    name: str
    address: Optional[str] = None  # None = standard multicast group
    channels: int = Field(default=DMX_CHANNEL_COUNT, ge=1, le=DMX_CHANNEL_COUNT)
    universe: int = Field(default=1, ge=E131_UNIVERSE_MIN, le=E131_UNIVERSE_MAX)
    port: int = E131_PORT
    priority: int = Field(default=E131_DEFAULT_PRIORITY, ge=0, le=200)


class CandleConfig(BaseModel):
    """Candle flicker parameters."""
    level: Tuple[int, int] = (0, 255)  # base, amplitude (byte units)
    smoothing: float = Field(default=0.35, gt=0.0, le=1.0)
    jitter: float = Field(default=28.0, ge=0.0)
    gutter_chance: float = Field(default=0.03, ge=0.0, le=1.0)
    seed: Optional[int] = None


class ChannelConfig(BaseModel):
    """A three-component color output at a fixed offset of a universe."""
    universe: str
    channel: int = Field(ge=0)  # 0-based offset into the universe buffer
    type: str  # "rgb" or "hsv"
    hue: str
    effect: Optional[str] = None  # "candle"
    candle: Optional[CandleConfig] = None


class Settings(BaseSettings):
    """
    Main application settings.

    Can be configured via:
    - Environment variables (prefixed with LUXSTREAM_)
    - YAML config file
    - Direct instantiation
    """

    model_config = SettingsConfigDict(
        env_prefix="LUXSTREAM_",
        env_nested_delimiter="__",
    )

    universes: List[UniverseConfig] = Field(default_factory=list)
    channels: List[ChannelConfig] = Field(default_factory=list)

    frame_rate: float = Field(default=DEFAULT_FRAME_RATE_HZ, gt=0.0)
    preview: bool = True
    source_name: str = DEFAULT_SOURCE_NAME

    # Debug
    debug: bool = False
    log_level: str = "INFO"

    @classmethod
    def from_yaml(cls, path: Path) -> "Settings":
        """Load settings from a YAML file."""
        with open(path) as f:
            data = yaml.safe_load(f)
        return cls(**(data or {}))

    def to_yaml(self, path: Path) -> None:
        """Save settings to a YAML file."""
        with open(path, "w") as f:
            yaml.dump(self.model_dump(mode="json"), f, default_flow_style=False)
