"""
Universe: one E1.31 output stream and its frame buffer.

The packet for a universe is built once. ``Universe.data`` is a view onto
the slot region of that packet, so channel writes land directly in the
bytes handed to the socket and ``send()`` never copies the frame.
"""

from __future__ import annotations

import uuid
from typing import Optional

import structlog

from luxstream.core.exceptions import ChannelBoundsError, TransportError
from luxstream.dmx.e131 import (
    E131_DEFAULT_PRIORITY,
    E131_PORT,
    OPTION_STREAM_TERMINATED,
    OPTIONS_OFFSET,
    SEQUENCE_OFFSET,
    SLOTS_OFFSET,
    E131Transmitter,
    build_data_packet,
    multicast_address,
)
from luxstream.dmx.slots import DMX_CHANNEL_COUNT

logger = structlog.get_logger()

# E1.31 6.2.6: a source sends three terminated packets when it stops.
TERMINATION_PACKET_COUNT = 3


class Universe:
    """
    Owns a fixed-length frame buffer and the transport it is sent on.

    Channels borrow write windows via ``window()``; only the universe
    allocates the buffer and only ``send()`` reads it.
    """

    def __init__(
        self,
        name: str,
        address: Optional[str],
        channel_count: int,
        universe: int = 1,
        port: int = E131_PORT,
        priority: int = E131_DEFAULT_PRIORITY,
        preview: bool = True,
        source_name: str = "luxstream",
        cid: Optional[bytes] = None,
        transmitter: Optional[E131Transmitter] = None,
    ):
        if not 1 <= channel_count <= DMX_CHANNEL_COUNT:
            raise ValueError(f"Channel count must be 1-{DMX_CHANNEL_COUNT}, got {channel_count}")

        self.name = name
        self.number = universe
        self.channel_count = channel_count
        self.address = address or multicast_address(universe)
        self.preview = preview

        self._packet = build_data_packet(
            universe=universe,
            slots=bytes(channel_count),
            cid=cid or uuid.uuid4().bytes,
            source_name=source_name,
            priority=priority,
            preview=preview,
        )
        self._data = memoryview(self._packet)[SLOTS_OFFSET:SLOTS_OFFSET + channel_count]
        self._transmitter = transmitter or E131Transmitter(self.address, port)
        self._sequence = 0

        # Stats
        self._frames_sent = 0
        self._errors = 0

    @property
    def data(self) -> memoryview:
        """The live frame buffer; one byte per output channel."""
        return self._data

    @property
    def packet(self) -> bytearray:
        return self._packet

    @property
    def destination(self) -> str:
        return self._transmitter.destination

    def window(self, offset: int, length: int) -> memoryview:
        """Return a bounds-checked writable view of ``[offset, offset + length)``."""
        if offset < 0 or length < 1 or offset + length > self.channel_count:
            raise ChannelBoundsError(offset, length, self.channel_count)
        return self._data[offset:offset + length]

    def open(self) -> None:
        """Open the transport; failures are fatal at startup."""
        try:
            self._transmitter.open()
        except OSError as e:
            raise TransportError(self.destination, str(e)) from e
        logger.info(
            "Universe opened",
            name=self.name,
            universe=self.number,
            destination=self.destination,
            channels=self.channel_count,
            preview=self.preview,
        )

    def close(self) -> None:
        self._transmitter.close()
        logger.info(
            "Universe closed",
            name=self.name,
            frames_sent=self._frames_sent,
            errors=self._errors,
        )

    async def send(self) -> None:
        """
        Transmit the current buffer.

        Returns once the local UDP stack accepted the datagram. A failure
        raises TransportError; the frame is not retried.
        """
        self._sequence = (self._sequence + 1) & 0xFF
        self._packet[SEQUENCE_OFFSET] = self._sequence
        logger.debug("Sending", name=self.name, sequence=self._sequence)
        try:
            self._transmitter.send(self._packet)
        except (OSError, RuntimeError) as e:
            self._errors += 1
            raise TransportError(self.destination, str(e)) from e
        self._frames_sent += 1

    async def terminate(self) -> None:
        """Blackout and announce end of stream to receivers."""
        self._data[:] = bytes(self.channel_count)
        self._packet[OPTIONS_OFFSET] |= OPTION_STREAM_TERMINATED
        try:
            for _ in range(TERMINATION_PACKET_COUNT):
                await self.send()
        finally:
            self._packet[OPTIONS_OFFSET] &= ~OPTION_STREAM_TERMINATED & 0xFF

    def get_stats(self) -> dict:
        """Get transmission statistics."""
        return {
            "name": self.name,
            "frames_sent": self._frames_sent,
            "errors": self._errors,
            "error_rate": self._errors / max(1, self._frames_sent),
        }
