"""Frame pipeline: channels, rig wiring and the fixed-rate scheduler."""

from luxstream.engine.channel import Channel
from luxstream.engine.rig import Rig, build_rig, validate_startup_config
from luxstream.engine.scheduler import FrameScheduler, SchedulerState

__all__ = [
    "Channel",
    "Rig",
    "build_rig",
    "validate_startup_config",
    "FrameScheduler",
    "SchedulerState",
]
