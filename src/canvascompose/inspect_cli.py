"""CLI for inspecting a composition at one point in time.

Loads a composition manifest, scrubs the clock to --time, and prints the
render set (what the canvas draws) and the timeline bars.

Usage:
    # Edit view: every item is rendered regardless of time
    canvascompose inspect --manifest comp.yaml --time 3.5

    # Playback view: only items whose window contains 3.5s
    canvascompose inspect --manifest comp.yaml --time 3.5 --playing

    # Validate only
    canvascompose inspect --manifest comp.yaml --validate
"""

import argparse

from .common import setup_logging
from .manifest import build_editor, load_composition_manifest, validate_sources
from .visibility import is_visible


def describe(editor) -> list[str]:
    """Human-readable lines for the editor's current frame and timeline."""
    frame = editor.frame()
    view = editor.timeline()

    lines = [
        f"t={frame.current_time:.1f}s  phase={frame.phase.value}  "
        f"timeline={view.max_time:.1f}s",
        f"Render set ({len(frame.items)} of {len(editor.composition)}):",
    ]
    for item in frame.items:
        state = "visible" if is_visible(item, frame.current_time) else "hidden"
        marker = "*" if item.id == frame.selected_id else " "
        lines.append(
            f" {marker}{item.id}  {item.kind.value}  "
            f"pos ({item.x:g}, {item.y:g})  size {item.width:g}x{item.height:g}  "
            f"window {item.start:g}-{item.end:g}s  {state}"
        )

    lines.append(f"Timeline (cursor {view.cursor:.1f}%):")
    for bar in view.bars:
        lines.append(
            f"  row {bar.row}  {bar.item_id}  {bar.label}  "
            f"left {bar.left:.1f}%  width {bar.width:.1f}%"
        )
    return lines


def main(args=None):
    parser = argparse.ArgumentParser(
        description="Print the render set and timeline of a composition.",
    )
    parser.add_argument(
        "--manifest", required=True,
        help="Path to composition YAML manifest",
    )
    parser.add_argument(
        "--time", type=float, default=0.0,
        help="Clock time in seconds (default: 0)",
    )
    parser.add_argument(
        "--playing", action="store_true",
        help="Resolve as during playback (hide items outside their window)",
    )
    parser.add_argument(
        "--select", default=None,
        help="Media id to mark as selected",
    )
    parser.add_argument(
        "--validate", action="store_true",
        help="Validate manifest and media sources only",
    )
    parser.add_argument(
        "--verbose", action="store_true",
        help="Enable debug logging",
    )
    args = parser.parse_args(args)
    setup_logging(args.verbose)

    config = load_composition_manifest(args.manifest)

    if args.validate:
        validate_sources(config)
        print(f"Manifest valid: {len(config['items'])} items")
        for i, item in enumerate(config["items"]):
            start, end = item["time_range"]
            print(f"  {i}: {item['kind']}  {start:g}-{end:g}s  {item['source']}")
        print("All sources verified.")
        return

    if args.time < 0:
        parser.error("--time must be >= 0")

    editor = build_editor(config)
    editor.seek(args.time)
    if args.select is not None and editor.select(args.select) is None:
        parser.error(f"--select: unknown media id '{args.select}'")
    if args.playing:
        # Start without advancing the manual scheduler: no tick fires,
        # the clock just reports PLAYING at the requested time.
        editor.play()

    for line in describe(editor):
        print(line)


if __name__ == "__main__":
    main()
