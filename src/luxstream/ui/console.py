"""
Minimal control console.

Reads commands from a text stream on a daemon thread. The only command
the frame loop listens to is a stop request, delivered on the event loop
thread so the scheduler never sees cross-thread mutation.
"""

from __future__ import annotations

import asyncio
import sys
import threading
from typing import Callable, Optional, TextIO

import structlog

logger = structlog.get_logger()

STOP_COMMANDS = frozenset({"quit", "exit", "stop"})


class StdinConsole:
    """Requests a stop on ``quit``/``exit``/``stop`` or end of input."""

    def __init__(
        self,
        request_stop: Callable[[], None],
        loop: asyncio.AbstractEventLoop,
        stream: Optional[TextIO] = None,
    ):
        self._request_stop = request_stop
        self._loop = loop
        self._stream = stream if stream is not None else sys.stdin
        self._thread: Optional[threading.Thread] = None

    def start(self) -> None:
        if self._thread is not None:
            return
        self._thread = threading.Thread(
            target=self._read_loop,
            name="Control-Console",
            daemon=True,
        )
        self._thread.start()
        logger.info("Console ready", commands=sorted(STOP_COMMANDS))

    def join(self, timeout: Optional[float] = None) -> None:
        if self._thread is not None:
            self._thread.join(timeout=timeout)

    def _read_loop(self) -> None:
        for line in self._stream:
            command = line.strip().lower()
            if not command:
                continue
            if command in STOP_COMMANDS:
                logger.info("Stop requested from console", command=command)
                break
            logger.warning("Unknown console command", command=command)
        self._stop()

    def _stop(self) -> None:
        try:
            self._loop.call_soon_threadsafe(self._request_stop)
        except RuntimeError:
            # Event loop already closed; the run is over.
            pass
