"""
Channel: renders one color into a three-slot window of a universe.

Each tick a channel takes its static color, optionally modulates the
brightness with a candle flame, encodes the result as HSV or RGB and
writes the three components into its universe buffer.
"""

from __future__ import annotations

from typing import Optional, Tuple

import structlog

from luxstream.core.config import ChannelConfig, CandleConfig
from luxstream.core.exceptions import ColorParseError
from luxstream.dmx.universe import Universe
from luxstream.effects.candle import CandleFlicker
from luxstream.effects.color import HSV, hsv_to_bytes, hsv_to_rgb, parse_to_hsv

logger = structlog.get_logger()

COLOR_COMPONENTS = 3
ENCODING_HSV = "hsv"
ENCODING_RGB = "rgb"
EFFECT_CANDLE = "candle"


class Channel:
    """
    A color output at ``offset`` in a universe buffer.

    The write window is borrowed from the universe at construction time,
    which also rejects offsets whose three slots would overrun the
    universe.
    """

    def __init__(self, config: ChannelConfig, universe: Universe):
        self.config = config
        self.universe = universe
        self.offset = config.channel
        self.encoding = config.type
        self.spec = config.hue

        self._window = universe.window(self.offset, COLOR_COMPONENTS)

        # The spec string never changes, so parse once. A bad color is
        # reported on every tick rather than failing startup.
        self._base: Optional[HSV] = None
        self._parse_error: Optional[ColorParseError] = None
        try:
            self._base = parse_to_hsv(self.spec)
        except ColorParseError as e:
            self._parse_error = e

        self.candle: Optional[CandleFlicker] = None
        self._level: Tuple[int, int] = (0, 255)
        if config.effect == EFFECT_CANDLE:
            candle_config = config.candle or CandleConfig()
            self._level = candle_config.level
            self.candle = CandleFlicker(
                smoothing=candle_config.smoothing,
                jitter=candle_config.jitter,
                gutter_chance=candle_config.gutter_chance,
                seed=candle_config.seed,
            )
        elif config.effect is not None:
            logger.warning("Unknown effect ignored", effect=config.effect, offset=self.offset)

    def compute(self) -> HSV:
        """Return this tick's color, advancing the effect if one is attached."""
        if self._parse_error is not None:
            raise self._parse_error
        hsv = self._base
        if self.candle is not None:
            self.candle.update()
            base, amplitude = self._level
            value = base + self.candle.normalized() * amplitude
            hsv = hsv._replace(value=max(0.0, min(1.0, value / 255.0)))
        return hsv

    def update(self) -> None:
        """Write this tick's color into the universe buffer."""
        try:
            hsv = self.compute()
        except ColorParseError as e:
            logger.error(
                "Color parse failed",
                universe=self.universe.name,
                offset=self.offset,
                error=e.message,
            )
            return

        if self.encoding == ENCODING_HSV:
            color = hsv_to_bytes(hsv)
        elif self.encoding == ENCODING_RGB:
            color = tuple(hsv_to_rgb(hsv))
        else:
            logger.error(
                "Unhandled color type",
                type=self.encoding,
                universe=self.universe.name,
                offset=self.offset,
            )
            return

        for i in range(COLOR_COMPONENTS):
            self._window[i] = color[i]
