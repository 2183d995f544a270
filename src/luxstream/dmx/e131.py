"""E1.31 (streaming ACN) packet helpers and transmitter."""

from __future__ import annotations

import socket
import struct
import uuid

from luxstream.dmx.slots import DMX_CHANNEL_COUNT, DMX_START_CODE

E131_PORT = 5568
E131_UNIVERSE_MIN = 1
E131_UNIVERSE_MAX = 63999
E131_DEFAULT_PRIORITY = 100

ACN_PACKET_IDENTIFIER = b"ASC-E1.17\x00\x00\x00"
VECTOR_ROOT_E131_DATA = 0x00000004
VECTOR_E131_DATA_PACKET = 0x00000002
VECTOR_DMP_SET_PROPERTY = 0x02
DMP_ADDRESS_DATA_TYPE = 0xA1
SOURCE_NAME_LENGTH = 64

OPTION_PREVIEW_DATA = 0x80
OPTION_STREAM_TERMINATED = 0x40

# Layer start offsets within a data packet.
ROOT_LAYER_OFFSET = 0
FRAMING_LAYER_OFFSET = 38
DMP_LAYER_OFFSET = 115

# Fields patched in place on every send.
SEQUENCE_OFFSET = 111
OPTIONS_OFFSET = 112
UNIVERSE_OFFSET = 113
START_CODE_OFFSET = 125
SLOTS_OFFSET = 126


def _flags_and_length(length: int) -> bytes:
    # High nibble 0x7, low 12 bits PDU length.
    return struct.pack(">H", 0x7000 | (length & 0x0FFF))


def multicast_address(universe: int) -> str:
    """Return the standard multicast group for an E1.31 universe."""
    if not E131_UNIVERSE_MIN <= universe <= E131_UNIVERSE_MAX:
        raise ValueError(f"E1.31 universe out of range: {universe}")
    return f"239.255.{(universe >> 8) & 0xFF}.{universe & 0xFF}"


def build_data_packet(
    universe: int,
    slots: bytes,
    sequence: int = 0,
    cid: bytes | None = None,
    source_name: str = "luxstream",
    priority: int = E131_DEFAULT_PRIORITY,
    preview: bool = False,
    terminated: bool = False,
) -> bytearray:
    """
    Build an E1.31 data packet.

    Expects up to 512 slots of channel data without the DMX start code.
    Returns a mutable buffer so callers can patch sequence, options and
    slots in place.
    """
    if len(slots) > DMX_CHANNEL_COUNT:
        raise ValueError(f"E1.31 payload too large: {len(slots)} bytes")
    if cid is None:
        cid = uuid.uuid4().bytes
    if len(cid) != 16:
        raise ValueError(f"CID must be 16 bytes, got {len(cid)}")

    total = SLOTS_OFFSET + len(slots)
    options = 0
    if preview:
        options |= OPTION_PREVIEW_DATA
    if terminated:
        options |= OPTION_STREAM_TERMINATED

    name = source_name.encode("utf-8")[: SOURCE_NAME_LENGTH - 1]

    packet = bytearray()
    # Root layer
    packet.extend(struct.pack(">HH", 0x0010, 0x0000))
    packet.extend(ACN_PACKET_IDENTIFIER)
    packet.extend(_flags_and_length(total - 16))
    packet.extend(struct.pack(">I", VECTOR_ROOT_E131_DATA))
    packet.extend(cid)
    # Framing layer
    packet.extend(_flags_and_length(total - FRAMING_LAYER_OFFSET))
    packet.extend(struct.pack(">I", VECTOR_E131_DATA_PACKET))
    packet.extend(name.ljust(SOURCE_NAME_LENGTH, b"\x00"))
    packet.extend(bytes([priority & 0xFF]))
    packet.extend(struct.pack(">H", 0))  # synchronization address
    packet.extend(bytes([sequence & 0xFF, options]))
    packet.extend(struct.pack(">H", universe))
    # DMP layer
    packet.extend(_flags_and_length(total - DMP_LAYER_OFFSET))
    packet.extend(bytes([VECTOR_DMP_SET_PROPERTY, DMP_ADDRESS_DATA_TYPE]))
    packet.extend(struct.pack(">HHH", 0x0000, 0x0001, len(slots) + 1))
    packet.extend(bytes([DMX_START_CODE]))
    packet.extend(slots)
    return packet


class E131Transmitter:
    """Non-blocking UDP sender for E1.31 packets."""

    def __init__(self, host: str, port: int = E131_PORT):
        self.host = host
        self.port = port
        self._socket: socket.socket | None = None
        self._sockaddr: tuple | None = None

    @property
    def destination(self) -> str:
        return f"{self.host}:{self.port}"

    @property
    def is_open(self) -> bool:
        return self._socket is not None

    def open(self) -> None:
        """Resolve the destination once and create the socket; raises OSError."""
        if self._socket is not None:
            return
        # Sends reuse this sockaddr; no name lookup per frame.
        infos = socket.getaddrinfo(self.host, self.port, socket.AF_INET, socket.SOCK_DGRAM)
        if not infos:
            raise OSError(f"No IPv4 address for {self.host}")
        self._sockaddr = infos[0][4]
        sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
        sock.setblocking(False)
        self._socket = sock

    def close(self) -> None:
        if self._socket is not None:
            self._socket.close()
            self._socket = None
            self._sockaddr = None

    def send(self, packet: bytes | bytearray) -> None:
        """Hand a packet to the local UDP stack without waiting on the network."""
        if self._socket is None:
            raise RuntimeError("E131Transmitter is not open")
        self._socket.sendto(packet, self._sockaddr)
