"""CLI for headless playback of a composition.

Starts the clock at 0 and runs it until it reaches the end of the
timeline and rewinds to idle. A line is printed every time the render
set changes, i.e. when an item enters or leaves its time window.

Usage:
    # Real time, ticks driven by the asyncio event loop
    canvascompose play --manifest comp.yaml

    # As fast as possible, ticks driven by a manual scheduler
    canvascompose play --manifest comp.yaml --fast
"""

import argparse
import asyncio
import time

from .clock import ManualScheduler, Phase
from .common import setup_logging
from .manifest import build_editor, load_composition_manifest


class RenderSetLog:
    """Frame observer that records a line whenever the render set changes."""

    def __init__(self, emit=print):
        self.lines = []
        self._emit = emit
        self._last = None

    def __call__(self, frame) -> None:
        key = (tuple(frame.item_ids), frame.phase)
        if key == self._last:
            return
        self._last = key
        shown = ", ".join(frame.item_ids) or "(nothing)"
        line = f"  {frame.current_time:6.1f}s  {frame.phase.value:<7}  {shown}"
        self.lines.append(line)
        self._emit(line)


def play_fast(config: dict, max_ticks: int = 100_000, emit=print) -> list[str]:
    """Run one full playback pass on a ManualScheduler.

    Returns the recorded render set lines.
    """
    scheduler = ManualScheduler()
    editor = build_editor(config, scheduler=scheduler)
    log = RenderSetLog(emit)
    editor.on_frame(log)
    editor.play()
    scheduler.run_until_idle(max_calls=max_ticks)
    return log.lines


async def play_realtime(config: dict, emit=print) -> list[str]:
    """Run one full playback pass on the running asyncio loop."""
    loop = asyncio.get_running_loop()
    finished = loop.create_future()
    editor = build_editor(config, scheduler=loop)
    log = RenderSetLog(emit)

    def on_frame(frame):
        log(frame)
        if frame.phase is Phase.IDLE and not finished.done():
            finished.set_result(frame.current_time)

    editor.on_frame(on_frame)
    editor.play()
    try:
        await finished
    finally:
        editor.stop()
    return log.lines


def main(args=None):
    parser = argparse.ArgumentParser(
        description="Play a composition and print render set changes.",
    )
    parser.add_argument(
        "--manifest", required=True,
        help="Path to composition YAML manifest",
    )
    parser.add_argument(
        "--fast", action="store_true",
        help="Don't wait for wall-clock time between ticks",
    )
    parser.add_argument(
        "--max-ticks", type=int, default=100_000,
        help="Abort --fast playback after this many ticks (default: 100000)",
    )
    parser.add_argument(
        "--verbose", action="store_true",
        help="Enable debug logging",
    )
    args = parser.parse_args(args)
    setup_logging(args.verbose)

    config = load_composition_manifest(args.manifest)
    print(f"Playing {len(config['items'])} items")

    t0 = time.monotonic()
    if args.fast:
        lines = play_fast(config, max_ticks=args.max_ticks)
    else:
        lines = asyncio.run(play_realtime(config))
    elapsed = time.monotonic() - t0
    print(f"\nDone: {len(lines)} render set changes ({elapsed:.1f}s wall)")


if __name__ == "__main__":
    main()
