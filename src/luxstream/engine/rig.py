"""Wiring of configured universes and channels into a runnable rig."""

from __future__ import annotations

from typing import Dict, List

import structlog

from luxstream.core.config import ChannelConfig, Settings
from luxstream.core.exceptions import (
    ChannelBoundsError,
    ConfigReferenceError,
    DuplicateUniverseError,
    TransportError,
)
from luxstream.dmx.universe import Universe
from luxstream.engine.channel import COLOR_COMPONENTS, Channel

logger = structlog.get_logger()


def validate_startup_config(settings: Settings) -> None:
    """
    Check universe/channel wiring before any transport is opened.

    Raises:
        DuplicateUniverseError: two universes share a name.
        ConfigReferenceError: a channel names an unknown universe.
        ChannelBoundsError: a channel's three slots overrun its universe.
    """
    sizes: Dict[str, int] = {}
    for u in settings.universes:
        if u.name in sizes:
            raise DuplicateUniverseError(u.name)
        sizes[u.name] = u.channels

    claimed: Dict[str, Dict[int, ChannelConfig]] = {name: {} for name in sizes}
    for c in settings.channels:
        if c.universe not in sizes:
            raise ConfigReferenceError(c.channel, c.universe)
        if c.channel + COLOR_COMPONENTS > sizes[c.universe]:
            raise ChannelBoundsError(c.channel, COLOR_COMPONENTS, sizes[c.universe])

        slots = claimed[c.universe]
        for slot in range(c.channel, c.channel + COLOR_COMPONENTS):
            if slot in slots:
                logger.warning(
                    "Overlapping channel windows",
                    universe=c.universe,
                    slot=slot,
                    first=slots[slot].channel,
                    second=c.channel,
                )
            slots[slot] = c


class Rig:
    """The fixed set of universes and channels driven by the scheduler."""

    def __init__(self, universes: List[Universe], channels: List[Channel]):
        self.universes = universes
        self.channels = channels

    def open(self) -> None:
        """Open every universe transport, closing any already opened on failure."""
        opened: List[Universe] = []
        try:
            for universe in self.universes:
                universe.open()
                opened.append(universe)
        except TransportError:
            for universe in opened:
                universe.close()
            raise

    def close(self) -> None:
        for universe in self.universes:
            universe.close()

    async def terminate(self) -> None:
        """Send stream-terminated packets on every universe, logging failures."""
        for universe in self.universes:
            try:
                await universe.terminate()
            except TransportError as e:
                logger.error("Stream termination failed", name=universe.name, error=e.message)


def build_rig(settings: Settings) -> Rig:
    """
    Construct universes and channels from settings.

    Transports are not opened here; call ``Rig.open()`` before running.
    """
    validate_startup_config(settings)

    universes = [
        Universe(
            name=u.name,
            address=u.address,
            channel_count=u.channels,
            universe=u.universe,
            port=u.port,
            priority=u.priority,
            preview=settings.preview,
            source_name=settings.source_name,
        )
        for u in settings.universes
    ]
    by_name = {u.name: u for u in universes}

    channels = []
    for c in settings.channels:
        universe = by_name.get(c.universe)
        if universe is None:
            raise ConfigReferenceError(c.channel, c.universe)
        channels.append(Channel(c, universe))

    logger.info("Rig built", universes=len(universes), channels=len(channels))
    return Rig(universes, channels)
