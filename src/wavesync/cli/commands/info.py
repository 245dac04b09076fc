"""Info command implementation."""

import click

from wavesync.media import HeadlessMediaPlayer
from wavesync.orchestration import Orchestrator

from .common import format_time, run_async


@click.command(name="info")
@click.argument("source")
@click.option(
    "--sample-rate",
    type=click.IntRange(min=1),
    default=8000,
    show_default=True,
    help="Rate the waveform data is decoded at",
)
@click.pass_context
def info(ctx, source: str, sample_rate: int):
    """Show duration, channels and sample rate of SOURCE."""

    async def run():
        player = Orchestrator(media=HeadlessMediaPlayer(), sample_rate=sample_rate)
        try:
            await player.load(source)
            return player.get_duration(), player.get_decoded_data()
        finally:
            player.destroy()

    duration, decoded = run_async(ctx, run())

    click.echo(f"Source:      {source}")
    click.echo(f"Duration:    {format_time(duration)} ({duration:.3f}s)")
    if decoded is not None:
        details = decoded.get_info()
        click.echo(f"Channels:    {details['num_channels']}")
        click.echo(f"Sample Rate: {details['sample_rate']:g} Hz")
        click.echo(f"Peak:        {details['peak']:.3f}")
