"""Helpers shared by the CLI commands."""

import asyncio
import logging
import math
import sys
from collections.abc import Coroutine
from typing import Any

import click

from wavesync.exceptions import format_error_for_display

logger = logging.getLogger(__name__)


def run_async(ctx: click.Context, coro: Coroutine[Any, Any, Any]) -> Any:
    """
    Run a command coroutine, reporting failures without a traceback.

    Exits with status 1 on error and 130 when interrupted.
    """
    try:
        return asyncio.run(coro)
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        click.echo("\nInterrupted.", err=True)
        sys.exit(130)
    except Exception as e:
        logger.exception(f"Command {ctx.command.name!r} failed")

        user_message, recovery_hint = format_error_for_display(e)

        click.echo("\n" + "=" * 70, err=True)
        click.echo(f"ERROR: {user_message}", err=True)
        click.echo("=" * 70, err=True)
        if recovery_hint:
            click.echo(f"\n{recovery_hint}", err=True)

        log_path = (ctx.obj or {}).get('log_path')
        if log_path:
            click.echo(f"\nFor details, check the log file: {log_path}", err=True)
        sys.exit(1)


def format_time(seconds: float) -> str:
    """Format seconds as m:ss.t"""
    if not math.isfinite(seconds):
        return "-:--.-"
    minutes, rest = divmod(max(seconds, 0.0), 60)
    return f"{int(minutes)}:{rest:04.1f}"
