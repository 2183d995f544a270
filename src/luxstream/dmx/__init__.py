"""E1.31 transport and universe buffers."""

from luxstream.dmx.e131 import (
    E131_PORT,
    E131Transmitter,
    build_data_packet,
    multicast_address,
)
from luxstream.dmx.slots import DMX_CHANNEL_COUNT, DMX_START_CODE, clamp_slot
from luxstream.dmx.universe import Universe

__all__ = [
    "E131_PORT",
    "E131Transmitter",
    "build_data_packet",
    "multicast_address",
    "DMX_CHANNEL_COUNT",
    "DMX_START_CODE",
    "clamp_slot",
    "Universe",
]
