"""
Command-Line Interface for luxstream.

Provides commands for running the frame loop, checking a configuration
and rendering a single frame without touching the network.
"""

from __future__ import annotations

import asyncio
import logging
import signal
import sys
from pathlib import Path
from typing import Optional

import click
import structlog
import yaml
from pydantic import ValidationError

from luxstream import __version__
from luxstream.core.config import Settings
from luxstream.core.exceptions import ConfigError, TransportError
from luxstream.engine.rig import Rig, build_rig, validate_startup_config
from luxstream.engine.scheduler import FrameScheduler
from luxstream.ui.console import StdinConsole

logger = structlog.get_logger()


def _configure_logging(level_name: str) -> None:
    level = getattr(logging, level_name.upper(), logging.INFO)
    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(level),
    )


def _load_settings(ctx: click.Context) -> Settings:
    """Load settings from --config (or the environment), exiting 1 on failure."""
    config_path = ctx.obj["config_path"]
    try:
        settings = Settings.from_yaml(config_path) if config_path else Settings()
    except (OSError, yaml.YAMLError, ValidationError) as e:
        logger.error("Configuration could not be loaded", path=str(config_path), error=str(e))
        sys.exit(1)

    if ctx.obj["debug"]:
        settings.debug = True
    _configure_logging("DEBUG" if settings.debug else settings.log_level)
    return settings


@click.group()
@click.version_option(version=__version__)
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.option(
    "--config",
    type=click.Path(exists=True),
    help="Path to configuration file",
)
@click.pass_context
def cli(ctx: click.Context, debug: bool, config: Optional[str]) -> None:
    """
    luxstream - real-time E1.31 lighting streamer

    Renders per-channel colors and candle effects into universe buffers
    and streams them to lighting controllers at a fixed frame rate.
    """
    ctx.ensure_object(dict)
    _configure_logging("DEBUG" if debug else "INFO")

    ctx.obj["debug"] = debug
    ctx.obj["config_path"] = Path(config) if config else None


async def _run_frames(rig: Rig, scheduler: FrameScheduler, console: bool) -> None:
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, scheduler.request_stop)
        except (NotImplementedError, RuntimeError):
            logger.debug("Signal handler unavailable", signal=sig.name)

    if console:
        StdinConsole(scheduler.request_stop, loop).start()

    try:
        await scheduler.run()
    finally:
        await rig.terminate()


@cli.command()
@click.option("--rate", type=float, default=None, help="Frames per second (default from config)")
@click.option(
    "--console/--no-console",
    default=None,
    help="Read 'quit' from stdin (default: when stdin is a terminal)",
)
@click.pass_context
def run(ctx: click.Context, rate: Optional[float], console: Optional[bool]) -> None:
    """Stream frames until stopped."""
    settings = _load_settings(ctx)
    if console is None:
        console = sys.stdin.isatty()

    try:
        rig = build_rig(settings)
        rig.open()
    except (ConfigError, TransportError) as e:
        logger.error("Startup failed", error=e.message)
        sys.exit(1)

    scheduler = FrameScheduler(
        rig.channels,
        rig.universes,
        rate=rate or settings.frame_rate,
    )
    logger.info("Starting server", rate_hz=scheduler.rate)

    try:
        asyncio.run(_run_frames(rig, scheduler, console))
    except Exception:
        logger.exception("Frame loop crashed")
        sys.exit(1)
    finally:
        rig.close()

    logger.info("Exiting")


@cli.command()
@click.pass_context
def check(ctx: click.Context) -> None:
    """Validate the configuration and list the resolved wiring."""
    settings = _load_settings(ctx)

    try:
        validate_startup_config(settings)
    except ConfigError as e:
        click.echo(f"Error: {e.message}", err=True)
        sys.exit(1)

    click.echo(f"Universes: {len(settings.universes)}")
    for u in settings.universes:
        address = u.address or "multicast"
        click.echo(f"  {u.name}: universe {u.universe}, {u.channels} channels -> {address}:{u.port}")

    click.echo(f"Channels: {len(settings.channels)}")
    for c in settings.channels:
        effect = f" [{c.effect}]" if c.effect else ""
        click.echo(f"  {c.universe}@{c.channel} {c.type} {c.hue}{effect}")


@cli.command()
@click.pass_context
def frame(ctx: click.Context) -> None:
    """Render one frame and print each universe buffer without sending."""
    settings = _load_settings(ctx)

    try:
        rig = build_rig(settings)
    except ConfigError as e:
        click.echo(f"Error: {e.message}", err=True)
        sys.exit(1)

    for channel in rig.channels:
        channel.update()

    for universe in rig.universes:
        click.echo(f"{universe.name}: {list(universe.data)}")


def main() -> None:
    """Entry point for the CLI."""
    cli(obj={})


if __name__ == "__main__":
    main()
