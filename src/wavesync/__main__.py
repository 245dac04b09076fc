"""Main entry point for wavesync."""

from wavesync.cli.main import cli

if __name__ == "__main__":
    cli()
