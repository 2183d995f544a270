"""
Frame Scheduler: drives ticks at a fixed rate against absolute deadlines.

Frame k is due at ``reference + k / rate``. A tick that overruns its
budget is logged and the next tick starts immediately; frames are never
skipped, the schedule simply compresses later waits until it catches up.
"""

from __future__ import annotations

import asyncio
import time
from enum import Enum
from typing import Awaitable, Callable, Optional, Sequence

import structlog

from luxstream.core.exceptions import TransportError
from luxstream.dmx.universe import Universe
from luxstream.engine.channel import Channel

logger = structlog.get_logger()

DEFAULT_RATE_HZ = 30.0


class SchedulerState(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    STOPPED = "stopped"


class FrameScheduler:
    """
    Runs update-then-send ticks until ``request_stop()`` is called.

    ``clock`` must be monotonic and return seconds; ``sleep`` is awaited
    between ticks. Both are injectable for tests.
    """

    def __init__(
        self,
        channels: Sequence[Channel],
        universes: Sequence[Universe],
        rate: float = DEFAULT_RATE_HZ,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        if rate <= 0:
            raise ValueError(f"Frame rate must be positive, got {rate}")
        self.channels = list(channels)
        self.universes = list(universes)
        self.rate = rate
        self.frame_time = 1.0 / rate
        self._clock = clock
        self._sleep = sleep

        self._state = SchedulerState.IDLE
        self._stop_requested = False
        self._reference: Optional[float] = None
        self._frame = 0

        # Stats
        self._overruns = 0
        self._send_errors = 0

    @property
    def state(self) -> SchedulerState:
        return self._state

    @property
    def frame(self) -> int:
        return self._frame

    @property
    def stop_requested(self) -> bool:
        return self._stop_requested

    def request_stop(self) -> None:
        """Ask the loop to exit before its next tick."""
        self._stop_requested = True

    def deadline(self, frame: int) -> float:
        """Absolute clock time at which ``frame`` is due to finish."""
        if self._reference is None:
            raise RuntimeError("Scheduler has not started")
        return self._reference + frame * self.frame_time

    def next_wait(self) -> float:
        """
        Seconds to sleep before the next tick.

        Returns 0 and records an overrun when the current frame finished
        at or after its deadline.
        """
        wait = self.deadline(self._frame) - self._clock()
        if wait <= 0:
            self._overruns += 1
            logger.warning(
                "Frame overrun",
                frame=self._frame,
                overrun_ms=-wait * 1000,
                target_ms=self.frame_time * 1000,
            )
            return 0.0
        return wait

    async def tick(self) -> None:
        """Update every channel, then send every universe."""
        self._frame += 1

        for channel in self.channels:
            channel.update()

        results = await asyncio.gather(
            *(universe.send() for universe in self.universes),
            return_exceptions=True,
        )
        for universe, result in zip(self.universes, results):
            if isinstance(result, TransportError):
                self._send_errors += 1
                logger.error("Send failed", name=universe.name, error=result.message)
            elif isinstance(result, BaseException):
                raise result

    async def run(self) -> None:
        """Tick until a stop is requested. A scheduler runs at most once."""
        if self._state is not SchedulerState.IDLE:
            raise RuntimeError(f"Scheduler cannot run from state '{self._state.value}'")

        self._state = SchedulerState.RUNNING
        self._reference = self._clock()
        logger.info("Scheduler started", rate_hz=self.rate)

        try:
            while not self._stop_requested:
                await self.tick()
                await self._sleep(self.next_wait())
        finally:
            self._state = SchedulerState.STOPPED
            logger.info("Scheduler stopped", **self.get_stats())

    def get_stats(self) -> dict:
        """Get scheduling statistics."""
        return {
            "frames": self._frame,
            "overruns": self._overruns,
            "send_errors": self._send_errors,
        }
