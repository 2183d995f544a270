"""Canonical DMX slot sizing and value helpers."""

from __future__ import annotations

DMX_START_CODE = 0x00
DMX_CHANNEL_COUNT = 512
DMX_SLOT_MIN = 0
DMX_SLOT_MAX = 255


def clamp_slot(value: float) -> int:
    """Round and clamp a numeric level into a 0-255 slot value."""
    return max(DMX_SLOT_MIN, min(DMX_SLOT_MAX, int(round(value))))
