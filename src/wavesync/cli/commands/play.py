"""Play command implementation."""

import asyncio
import logging
from typing import Optional

import click

from wavesync.models import WaveformOptions
from wavesync.orchestration import Orchestrator
from wavesync.protocols import WaveEvent
from wavesync.renderer import TextRenderer

from .common import format_time, run_async

logger = logging.getLogger(__name__)


@click.command(name="play")
@click.argument("source")
@click.option("--device", "-d", type=int, default=None, help="Output device ID (default: system default)")
@click.option("--rate", "-r", type=click.FloatRange(min=0, min_open=True), default=1.0, show_default=True, help="Playback rate")
@click.option("--width", "-w", type=click.IntRange(min=10), default=60, show_default=True, help="Progress line width")
@click.pass_context
def play(ctx, source: str, device: Optional[int], rate: float, width: int):
    """Play SOURCE with a live waveform progress line."""
    # Lazy import: loads PortAudio
    from wavesync.media.device import SoundDeviceMediaPlayer

    async def run():
        media = SoundDeviceMediaPlayer(device=device, playback_rate=rate)
        options = WaveformOptions.build(auto_center=True)
        renderer = TextRenderer(options, width=width)
        player = Orchestrator(options, renderer=renderer, media=media)

        finished = asyncio.get_running_loop().create_future()

        def on_progress(current_time: float) -> None:
            total = format_time(player.get_duration())
            click.echo(f"\r{renderer.get_frame()} {format_time(current_time)} / {total}", nl=False)

        def on_finish() -> None:
            if not finished.done():
                finished.set_result(None)

        player.on(WaveEvent.TIMEUPDATE, on_progress)
        player.once(WaveEvent.FINISH, on_finish)

        try:
            await player.load(source)
            logger.info(f"Playing {source!r} on device {device} at rate {rate}")
            player.play()
            await finished
        finally:
            player.destroy()
            click.echo()

    run_async(ctx, run())
