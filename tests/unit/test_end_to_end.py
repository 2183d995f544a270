"""Full update-then-send cycles through a real rig to a loopback receiver."""

from __future__ import annotations

import asyncio

from luxstream.core.config import CandleConfig, ChannelConfig, Settings, UniverseConfig
from luxstream.dmx.e131 import OPTIONS_OFFSET, SLOTS_OFFSET
from luxstream.engine.rig import build_rig
from luxstream.engine.scheduler import FrameScheduler


def test_single_red_channel_cycle(udp_receiver) -> None:
    settings = Settings(
        universes=[
            UniverseConfig(name="stage", address="127.0.0.1", port=udp_receiver.port, channels=3)
        ],
        channels=[ChannelConfig(universe="stage", channel=0, type="rgb", hue="rgb(255,0,0)")],
    )
    rig = build_rig(settings)
    rig.open()
    try:
        rig.channels[0].update()
        asyncio.run(rig.universes[0].send())
    finally:
        rig.close()

    assert list(rig.universes[0].data) == [255, 0, 0]
    (packet,) = udp_receiver.receive(1)
    assert packet[SLOTS_OFFSET:] == b"\xff\x00\x00"


def test_candle_brightness_over_100_ticks(udp_receiver) -> None:
    settings = Settings(
        universes=[
            UniverseConfig(name="stage", address="127.0.0.1", port=udp_receiver.port, channels=3)
        ],
        channels=[
            ChannelConfig(
                universe="stage",
                channel=0,
                type="hsv",
                hue="red",
                effect="candle",
                candle=CandleConfig(level=(50, 100)),
            )
        ],
    )
    rig = build_rig(settings)
    brightness: list[int] = []

    async def sleep(seconds: float) -> None:
        brightness.append(rig.universes[0].data[2])
        if scheduler.frame >= 100:
            scheduler.request_stop()

    scheduler = FrameScheduler(rig.channels, rig.universes, rate=30, sleep=sleep)
    rig.open()
    try:
        asyncio.run(scheduler.run())
    finally:
        rig.close()

    assert scheduler.frame == 100
    assert scheduler.get_stats()["send_errors"] == 0
    assert all(50 <= b <= 150 for b in brightness)
    assert len(set(brightness)) > 1
    packets = udp_receiver.receive(100)
    assert [p[SLOTS_OFFSET + 2] for p in packets] == brightness


def test_terminate_blacks_out_every_universe(udp_receiver) -> None:
    settings = Settings(
        universes=[
            UniverseConfig(name="stage", address="127.0.0.1", port=udp_receiver.port, channels=3),
            UniverseConfig(
                name="house", address="127.0.0.1", port=udp_receiver.port, channels=3, universe=2
            ),
        ],
        channels=[ChannelConfig(universe="house", channel=0, type="rgb", hue="white")],
    )
    rig = build_rig(settings)
    rig.open()
    try:
        rig.channels[0].update()
        asyncio.run(rig.terminate())
    finally:
        rig.close()

    packets = udp_receiver.receive(6)
    assert all(p[OPTIONS_OFFSET] == 0xC0 for p in packets)
    assert all(p[SLOTS_OFFSET:] == bytes(3) for p in packets)
    assert list(rig.universes[1].data) == [0, 0, 0]
