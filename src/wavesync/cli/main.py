"""Main CLI entry point."""

import logging
import logging.handlers
from pathlib import Path
from typing import Optional

import click

from .commands import info, play, show

logger = logging.getLogger(__name__)


def default_log_path() -> Path:
    return Path.home() / ".wavesync" / "logs" / "wavesync.log"


def setup_logging(verbose: int, debug: bool, log_file: Optional[Path]) -> Path:
    """
    Configure logging for the application.

    Output goes to a file so it never interleaves with the waveform and
    progress lines printed on stdout.

    Args:
        verbose: Verbosity count (0 = WARNING, 1 = INFO, 2+ = DEBUG)
        debug: If True, log at DEBUG level to ./wavesync-debug.log
        log_file: Custom log file path (optional)

    Returns:
        Path of the log file
    """
    if debug or verbose >= 2:
        level = logging.DEBUG
    elif verbose == 1:
        level = logging.INFO
    else:
        level = logging.WARNING

    if log_file:
        log_path = log_file
    elif debug:
        log_path = Path.cwd() / "wavesync-debug.log"
    else:
        log_path = default_log_path()
    log_path.parent.mkdir(parents=True, exist_ok=True)

    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    # Keeps the last 5 files, 10MB each
    file_handler = logging.handlers.RotatingFileHandler(
        log_path,
        maxBytes=10 * 1024 * 1024,
        backupCount=5
    )
    file_handler.setLevel(level)
    file_handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.addHandler(file_handler)

    logger.info(f"Logging configured: level={logging.getLevelName(level)}, file={log_path}")
    return log_path


@click.group()
@click.pass_context
@click.version_option(version="0.1.0", prog_name="wavesync")
@click.option(
    '-v', '--verbose',
    count=True,
    help='Increase verbosity (-v: INFO, -vv: DEBUG)'
)
@click.option(
    '--debug',
    is_flag=True,
    help='Enable debug mode (DEBUG level, logs to ./wavesync-debug.log)'
)
@click.option(
    '--log-file',
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help='Custom log file path'
)
def cli(ctx, verbose: int, debug: bool, log_file: Optional[Path]):
    """
    wavesync - audio waveforms kept in sync with playback.

    SOURCE arguments accept a local path, a file:// URL or an http(s) URL.

    \b
    Examples:
      # Show duration, channels and sample rate
      wavesync info ./song.wav

      # Draw the waveform 120 columns wide
      wavesync show ./song.wav --width 120

      # Play at 1.5x speed on output device 3
      wavesync play https://example.com/song.ogg --device 3 --rate 1.5
    """
    ctx.ensure_object(dict)
    ctx.obj['log_path'] = setup_logging(verbose, debug, log_file)


cli.add_command(info)
cli.add_command(show)
cli.add_command(play)

if __name__ == "__main__":
    cli()
