"""Subcommand dispatcher for canvascompose.

Usage:
    canvascompose inspect  --manifest comp.yaml --time 3.5
    canvascompose play     --manifest comp.yaml --fast
    canvascompose preview  --manifest comp.yaml --time 3.5 --output frame.png
"""

import argparse
import sys


COMMANDS = {
    "inspect": "Print the render set and timeline at a given time",
    "play": "Run the playback clock and print render set changes",
    "preview": "Draw a wireframe PNG of the canvas and timeline",
}


def main(args=None):
    parser = argparse.ArgumentParser(
        prog="canvascompose",
        description="Timeline-synchronized canvas composition.",
    )
    subparsers = parser.add_subparsers(dest="command")

    # Register subcommands. Each delegates to its own module's main().
    for name, help_text in COMMANDS.items():
        subparsers.add_parser(name, help=help_text)

    # Parse only the subcommand name, pass the rest to the subcommand's parser.
    parsed, remaining = parser.parse_known_args(args)

    if parsed.command is None:
        parser.print_help()
        sys.exit(1)

    if parsed.command == "inspect":
        from .inspect_cli import main as inspect_main
        inspect_main(remaining)
    elif parsed.command == "play":
        from .play_cli import main as play_main
        play_main(remaining)
    elif parsed.command == "preview":
        from .preview_cli import main as preview_main
        preview_main(remaining)


if __name__ == "__main__":
    main()
