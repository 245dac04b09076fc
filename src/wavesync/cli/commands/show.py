"""Show command implementation."""

from typing import Optional

import click

from wavesync.media import HeadlessMediaPlayer
from wavesync.models import WaveformOptions
from wavesync.orchestration import Orchestrator
from wavesync.renderer import TextRenderer

from .common import format_time, run_async


@click.command(name="show")
@click.argument("source")
@click.option("--width", "-w", type=click.IntRange(min=1), default=80, show_default=True, help="Width in columns")
@click.option("--zoom", "-z", type=click.FloatRange(min=0), default=None, help="Minimum columns per second")
@click.option("--split-channels", is_flag=True, help="Draw one row per channel")
@click.option("--normalize", is_flag=True, help="Stretch the waveform to the full height")
@click.pass_context
def show(ctx, source: str, width: int, zoom: Optional[float], split_channels: bool, normalize: bool):
    """Draw the waveform of SOURCE."""
    options = WaveformOptions.build(
        normalize=normalize,
        split_channels=[{}] if split_channels else None,
        cursor_width=0,
    )

    async def run():
        renderer = TextRenderer(options, width=width)
        player = Orchestrator(options, renderer=renderer, media=HeadlessMediaPlayer())
        try:
            await player.load(source)
            if zoom is not None:
                player.zoom(zoom)
            return player.get_duration(), renderer.get_frame()
        finally:
            player.destroy()

    duration, frame = run_async(ctx, run())

    click.echo(frame)
    click.echo(f"{source} ({format_time(duration)})")
