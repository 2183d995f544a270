from __future__ import annotations

import pytest

from luxstream.effects.candle import CandleFlicker


def _run(candle: CandleFlicker, steps: int) -> list[float]:
    values = []
    for _ in range(steps):
        candle.update()
        values.append(candle.current_intensity())
    return values


def test_intensity_stays_in_byte_range() -> None:
    candle = CandleFlicker(jitter=400.0, gutter_chance=0.5, seed=3)

    values = _run(candle, 2000)

    assert all(0.0 <= v <= 255.0 for v in values)
    assert 0.0 <= candle.normalized() <= 1.0


def test_flame_advances_every_update() -> None:
    candle = CandleFlicker(seed=11)

    values = _run(candle, 100)

    assert candle.steps == 100
    assert len(set(values)) > 10


def test_simulators_do_not_share_state() -> None:
    first = CandleFlicker(seed=5)
    second = CandleFlicker(seed=5)
    reference = CandleFlicker(seed=5)

    _run(first, 50)

    assert _run(second, 20) == _run(reference, 20)


def test_unseeded_simulators_diverge() -> None:
    assert _run(CandleFlicker(), 30) != _run(CandleFlicker(), 30)


def test_smoothing_must_be_positive() -> None:
    with pytest.raises(ValueError):
        CandleFlicker(smoothing=0.0)
