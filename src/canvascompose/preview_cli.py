"""CLI for drawing a wireframe preview of a composition.

Usage:
    canvascompose preview --manifest comp.yaml --output frame.png
    canvascompose preview --manifest comp.yaml --output frame.png \
        --time 4.5 --playing --select media-2
"""

import argparse
from pathlib import Path

from .common import setup_logging
from .manifest import build_editor, load_composition_manifest
from .preview import render_preview


def write_preview(
    manifest_path: str,
    output_path: str,
    time_s: float = 0.0,
    playing: bool = False,
    select: str | None = None,
) -> Path:
    """Load a manifest, set up the clock and selection, write a PNG."""
    config = load_composition_manifest(manifest_path)
    editor = build_editor(config)
    editor.seek(time_s)
    if select is not None and editor.select(select) is None:
        raise ValueError(f"Unknown media id: '{select}'")
    if playing:
        editor.play()

    canvas = config["canvas"]
    img = render_preview(editor, canvas["size"], background=canvas["background"])

    out = Path(output_path)
    out.parent.mkdir(parents=True, exist_ok=True)
    img.save(out)
    return out


def main(args=None):
    parser = argparse.ArgumentParser(
        description="Draw the canvas and timeline of a composition to PNG.",
    )
    parser.add_argument(
        "--manifest", required=True,
        help="Path to composition YAML manifest",
    )
    parser.add_argument(
        "--output", required=True,
        help="Output PNG path",
    )
    parser.add_argument(
        "--time", type=float, default=0.0,
        help="Clock time in seconds (default: 0)",
    )
    parser.add_argument(
        "--playing", action="store_true",
        help="Draw as during playback (hide items outside their window)",
    )
    parser.add_argument(
        "--select", default=None,
        help="Media id to highlight as selected",
    )
    parser.add_argument(
        "--verbose", action="store_true",
        help="Enable debug logging",
    )
    args = parser.parse_args(args)
    setup_logging(args.verbose)

    if args.time < 0:
        parser.error("--time must be >= 0")

    out = write_preview(
        args.manifest, args.output,
        time_s=args.time, playing=args.playing, select=args.select,
    )
    print(f"Done: {out}")


if __name__ == "__main__":
    main()
