"""Shared fixtures: universes backed by an in-memory transmitter, and a loopback receiver."""

from __future__ import annotations

import socket
from typing import Callable, Iterator

import pytest

from luxstream.dmx.universe import Universe


class RecordingTransmitter:
    """Stands in for the UDP transmitter and records every packet sent."""

    destination = "recorder:5568"

    def __init__(self, fail: bool = False) -> None:
        self.fail = fail
        self.opened = False
        self.packets: list[bytes] = []
        self.sent_objects: list[object] = []

    def open(self) -> None:
        self.opened = True

    def close(self) -> None:
        self.opened = False

    def send(self, packet: bytearray) -> None:
        if self.fail:
            raise OSError("Network is unreachable")
        self.sent_objects.append(packet)
        self.packets.append(bytes(packet))


@pytest.fixture
def make_universe() -> Callable[..., tuple[Universe, RecordingTransmitter]]:
    def _make(
        channel_count: int = 3,
        name: str = "stage",
        fail: bool = False,
        **kwargs,
    ) -> tuple[Universe, RecordingTransmitter]:
        transmitter = RecordingTransmitter(fail=fail)
        universe = Universe(
            name=name,
            address="127.0.0.1",
            channel_count=channel_count,
            transmitter=transmitter,
            **kwargs,
        )
        return universe, transmitter

    return _make


class LoopbackReceiver:
    """UDP socket bound to an ephemeral port on 127.0.0.1."""

    def __init__(self) -> None:
        self.sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
        self.sock.bind(("127.0.0.1", 0))
        self.sock.settimeout(2.0)
        self.port = self.sock.getsockname()[1]

    def receive(self, count: int) -> list[bytes]:
        return [self.sock.recvfrom(2048)[0] for _ in range(count)]

    def close(self) -> None:
        self.sock.close()


@pytest.fixture
def udp_receiver() -> Iterator[LoopbackReceiver]:
    receiver = LoopbackReceiver()
    yield receiver
    receiver.close()
