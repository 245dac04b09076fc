"""Headless example: load a file, attach a plugin and play it through."""

import asyncio
import sys

from wavesync import BasePlugin, Orchestrator, WaveEvent


class ProgressPrinter(BasePlugin):
    """Print the waveform frame with the cursor on every timeupdate."""

    def on_init(self):
        self.subscriptions.append(self.host.on(WaveEvent.TIMEUPDATE, self._print_frame))

    def _print_frame(self, current_time):
        frame = self.host.get_renderer().get_frame()
        print(f"\r{frame} {current_time:5.2f}s", end="", flush=True)


async def main(source: str):
    player = await Orchestrator.create(url=source, audio_rate=2.0, plugins=[ProgressPrinter()])
    finished = asyncio.get_running_loop().create_future()
    player.once(WaveEvent.FINISH, lambda: finished.set_result(None))

    print(f"Loaded {source} ({player.get_duration():.2f}s), playing at 2x")
    player.play()
    await finished
    print()
    player.destroy()


if __name__ == "__main__":
    if len(sys.argv) != 2:
        print("Usage: python headless_playback.py FILE")
        sys.exit(1)
    asyncio.run(main(sys.argv[1]))
