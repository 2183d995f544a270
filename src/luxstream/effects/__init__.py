"""Color conversion and procedural effects."""

from luxstream.effects.candle import CandleFlicker
from luxstream.effects.color import (
    HSV,
    RGB,
    hsv_to_bytes,
    hsv_to_rgb,
    parse_to_hsv,
    rgb_to_hsv,
)

__all__ = [
    "CandleFlicker",
    "HSV",
    "RGB",
    "hsv_to_bytes",
    "hsv_to_rgb",
    "parse_to_hsv",
    "rgb_to_hsv",
]
