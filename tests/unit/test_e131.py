from __future__ import annotations

import socket
import unittest.mock as mock

import pytest

from luxstream.core.exceptions import TransportError
from luxstream.dmx.e131 import (
    E131_PORT,
    E131Transmitter,
    build_data_packet,
    multicast_address,
)
from luxstream.dmx.universe import Universe


def test_build_data_packet_layout() -> None:
    data = bytes([7] * 512)
    cid = bytes(range(16))
    packet = build_data_packet(
        universe=0x0123,
        slots=data,
        sequence=5,
        cid=cid,
        source_name="test",
        priority=100,
        preview=True,
    )

    assert len(packet) == 638
    # Root layer
    assert packet[0:2] == b"\x00\x10"  # preamble size
    assert packet[2:4] == b"\x00\x00"  # postamble size
    assert packet[4:16] == b"ASC-E1.17\x00\x00\x00"
    assert packet[16:18] == b"\x72\x6e"  # flags + 622 bytes
    assert packet[18:22] == b"\x00\x00\x00\x04"
    assert packet[22:38] == cid
    # Framing layer
    assert packet[38:40] == b"\x72\x58"  # flags + 600 bytes
    assert packet[40:44] == b"\x00\x00\x00\x02"
    assert packet[44:48] == b"test"
    assert packet[48:108] == bytes(60)
    assert packet[108] == 100
    assert packet[109:111] == b"\x00\x00"  # sync address
    assert packet[111] == 5
    assert packet[112] == 0x80  # preview data
    assert packet[113:115] == b"\x01\x23"  # big-endian universe
    # DMP layer
    assert packet[115:117] == b"\x72\x0b"  # flags + 523 bytes
    assert packet[117] == 0x02
    assert packet[118] == 0xA1
    assert packet[119:121] == b"\x00\x00"
    assert packet[121:123] == b"\x00\x01"
    assert packet[123:125] == b"\x02\x01"  # start code + 512 slots
    assert packet[125] == 0x00
    assert packet[126:] == data


def test_build_data_packet_short_universe_lengths() -> None:
    packet = build_data_packet(universe=1, slots=bytes(3), cid=bytes(16))

    assert len(packet) == 129
    assert packet[123:125] == b"\x00\x04"
    assert packet[112] == 0x00


def test_build_data_packet_terminated_option() -> None:
    packet = build_data_packet(universe=1, slots=bytes(3), cid=bytes(16), preview=True, terminated=True)

    assert packet[112] == 0xC0


def test_build_data_packet_rejects_oversized_payload() -> None:
    with pytest.raises(ValueError):
        build_data_packet(universe=1, slots=bytes(513))


def test_build_data_packet_truncates_long_source_name() -> None:
    packet = build_data_packet(universe=1, slots=bytes(1), cid=bytes(16), source_name="x" * 100)

    assert packet[44:107] == b"x" * 63
    assert packet[107] == 0  # null terminated


def test_multicast_address_mapping() -> None:
    assert multicast_address(1) == "239.255.0.1"
    assert multicast_address(0x0123) == "239.255.1.35"
    with pytest.raises(ValueError):
        multicast_address(0)


def test_transmitter_sends_to_destination() -> None:
    with mock.patch("luxstream.dmx.e131.socket.socket") as socket_cls:
        transmitter = E131Transmitter("10.0.0.5")
        transmitter.open()
        transmitter.send(b"payload")

    sock = socket_cls.return_value
    sock.setblocking.assert_called_once_with(False)
    sock.sendto.assert_called_once_with(b"payload", ("10.0.0.5", E131_PORT))
    assert transmitter.destination == f"10.0.0.5:{E131_PORT}"


def test_transmitter_requires_open() -> None:
    transmitter = E131Transmitter("10.0.0.5")

    with pytest.raises(RuntimeError):
        transmitter.send(b"payload")


def test_transmitter_resolves_hostname_once_on_open() -> None:
    resolved = [(socket.AF_INET, socket.SOCK_DGRAM, 17, "", ("192.0.2.7", E131_PORT))]
    with mock.patch("luxstream.dmx.e131.socket.getaddrinfo", return_value=resolved) as lookup, \
            mock.patch("luxstream.dmx.e131.socket.socket") as socket_cls:
        transmitter = E131Transmitter("controller.local")
        transmitter.open()
        for _ in range(3):
            transmitter.send(b"payload")

    lookup.assert_called_once_with("controller.local", E131_PORT, socket.AF_INET, socket.SOCK_DGRAM)
    sock = socket_cls.return_value
    assert [c.args[1] for c in sock.sendto.call_args_list] == [("192.0.2.7", E131_PORT)] * 3
    assert transmitter.destination == f"controller.local:{E131_PORT}"


def test_unresolvable_address_fails_universe_open() -> None:
    universe = Universe(name="stage", address="controller.invalid", channel_count=3)
    failure = socket.gaierror(socket.EAI_NONAME, "Name or service not known")

    with mock.patch("luxstream.dmx.e131.socket.getaddrinfo", side_effect=failure):
        with pytest.raises(TransportError) as excinfo:
            universe.open()

    assert "controller.invalid" in excinfo.value.destination
