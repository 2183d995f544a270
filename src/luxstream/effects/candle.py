"""
Candle flicker simulation.

A flame is modelled as a bounded random walk: each step nudges a target
intensity with gaussian jitter, occasionally drops it sharply (the flame
"guttering"), then eases the visible intensity towards that target. The
result stays within [0, 255] and never repeats a fixed pattern.
"""

from __future__ import annotations

from typing import Optional

import numpy as np

FLAME_MIN = 0.0
FLAME_MAX = 255.0

# Resting point the walk is pulled back towards.
FLAME_REST = 200.0
REST_PULL = 0.08
GUTTER_DEPTH = (0.35, 0.7)


class CandleFlicker:
    """
    Stateful per-channel flame intensity generator.

    Each instance owns its own random generator, so two candles never
    share a sequence. Pass ``seed`` for a reproducible flame.
    """

    def __init__(
        self,
        smoothing: float = 0.35,
        jitter: float = 28.0,
        gutter_chance: float = 0.03,
        seed: Optional[int] = None,
    ):
        if not 0.0 < smoothing <= 1.0:
            raise ValueError(f"smoothing must be in (0, 1], got {smoothing}")
        self.smoothing = smoothing
        self.jitter = jitter
        self.gutter_chance = gutter_chance
        self._rng = np.random.default_rng(seed)

        self._target = FLAME_REST
        self._flame = FLAME_REST
        self._steps = 0

    @property
    def steps(self) -> int:
        return self._steps

    def update(self) -> None:
        """Advance the flame by one step."""
        target = self._target + self._rng.normal(0.0, self.jitter)
        target += (FLAME_REST - target) * REST_PULL

        if self._rng.random() < self.gutter_chance:
            target *= 1.0 - self._rng.uniform(*GUTTER_DEPTH)

        self._target = float(np.clip(target, FLAME_MIN, FLAME_MAX))
        flame = self._flame + (self._target - self._flame) * self.smoothing
        self._flame = float(np.clip(flame, FLAME_MIN, FLAME_MAX))
        self._steps += 1

    def current_intensity(self) -> float:
        """Current flame intensity in [0, 255]."""
        return self._flame

    def normalized(self) -> float:
        """Current flame intensity in [0, 1]."""
        return self._flame / FLAME_MAX
