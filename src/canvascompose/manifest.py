"""Composition manifest loader.

Parses YAML manifests that describe playback settings, the preview
canvas, and an initial set of placed media. Follows the same ${var}
path resolution as the other manifests in this package.

Composition manifest schema:
  playback:                   # optional, defaults shown
    interval: 0.1             # wall-clock seconds between ticks
    step: 0.1                 # timeline seconds added per tick
    min_duration: 10          # loop floor in seconds
  canvas:                     # optional, used by the preview
    size: [1280, 720]
    background: "#FFFFFF"
  paths:
    media: "/data/media"
  items:
    - kind: image             # "image" or "video"
      source: "${media}/logo.png"
      position: [50, 50]      # optional, upload default
      size: [320, 240]        # optional, per-kind default
      time_range: [0, 10]     # optional, default [0, 10]
"""

import math
from pathlib import Path

import yaml

from .common import is_local_source, parse_hex_color, resolve_path_vars
from .editor import Editor
from .media import (
    DEFAULT_POSITION,
    DEFAULT_SIZES,
    DEFAULT_TIME_RANGE,
    MediaItem,
    MediaKind,
    check_item,
)


VALID_KINDS = {kind.value for kind in MediaKind}

PLAYBACK_DEFAULTS = {"interval": 0.1, "step": 0.1, "min_duration": 10.0}

CANVAS_DEFAULTS = {"size": (1280, 720), "background": "#FFFFFF"}


# ── Manifest loading ──────────────────────────────────────────────


def load_composition_manifest(manifest_path: str | Path) -> dict:
    """Load, validate, and normalize a composition manifest.

    Processing pipeline:
      1. Parse YAML.
      2. Apply playback and canvas defaults, validate them.
      3. Resolve ${path} variables in item sources.
      4. Apply upload defaults to each item, validate geometry.

    Args:
        manifest_path: Path to the YAML composition manifest.

    Returns:
        Normalized config dict with playback, canvas and items.

    Raises:
        ValueError: Missing/invalid fields.
        FileNotFoundError: Missing manifest file.
    """
    with open(manifest_path) as f:
        raw = yaml.safe_load(f) or {}

    if not isinstance(raw, dict):
        raise ValueError("Composition manifest: top level must be a mapping")

    config = {
        "playback": _load_playback(_section(raw, "playback")),
        "canvas": _load_canvas(_section(raw, "canvas")),
    }

    paths = _section(raw, "paths")

    items = raw.get("items") or []
    if not isinstance(items, list):
        raise ValueError("Composition manifest: 'items' must be a list")
    config["items"] = [_load_item(entry, i, paths) for i, entry in enumerate(items)]

    return config


def _section(raw: dict, name: str) -> dict:
    section = raw.get(name) or {}
    if not isinstance(section, dict):
        raise ValueError(
            f"Composition manifest: '{name}' must be a mapping, got {section!r}"
        )
    return section


def _load_playback(playback: dict) -> dict:
    settings = dict(PLAYBACK_DEFAULTS)
    settings.update(playback)
    for key in ("interval", "step", "min_duration"):
        value = settings[key]
        if not _is_number(value) or value <= 0:
            raise ValueError(
                f"Composition manifest: playback.{key} must be > 0, got {value!r}"
            )
        settings[key] = float(value)
    return settings


def _load_canvas(canvas: dict) -> dict:
    settings = dict(CANVAS_DEFAULTS)
    settings.update(canvas)
    size = _pair(settings["size"], "canvas.size", "Composition manifest")
    if size[0] <= 0 or size[1] <= 0:
        raise ValueError(f"Composition manifest: canvas.size must be positive, got {size}")
    settings["size"] = (int(size[0]), int(size[1]))
    settings["background"] = parse_hex_color(str(settings["background"]))
    return settings


def _load_item(entry: dict, index: int, paths: dict) -> dict:
    """Validate one item entry and fill in upload defaults."""
    if not isinstance(entry, dict):
        raise ValueError(f"Item {index}: must be a mapping")
    if "kind" not in entry:
        raise ValueError(f"Item {index}: missing required field 'kind'")
    kind = str(entry["kind"]).lower()
    if kind not in VALID_KINDS:
        raise ValueError(
            f"Item {index}: invalid kind '{entry['kind']}'. "
            f"Valid: {sorted(VALID_KINDS)}"
        )

    prefix = f"Item {index} ({kind})"
    if "source" not in entry:
        raise ValueError(f"{prefix}: missing required field 'source'")
    source = entry["source"]
    if isinstance(source, str):
        source = resolve_path_vars(source, paths)

    position = _pair(entry.get("position", DEFAULT_POSITION), "position", prefix)
    size = _pair(entry.get("size", DEFAULT_SIZES[MediaKind(kind)]), "size", prefix)
    start, end = _pair(entry.get("time_range", DEFAULT_TIME_RANGE), "time_range", prefix)

    # Same geometry rules as the store; the item prefix stands in for the id.
    check_item(MediaItem(
        id=prefix, kind=MediaKind(kind), source=source,
        x=position[0], y=position[1],
        width=size[0], height=size[1],
        start=start, end=end,
    ))

    return {
        "kind": kind,
        "source": source,
        "position": position,
        "size": size,
        "time_range": (start, end),
    }


def _pair(value, name: str, prefix: str) -> tuple[float, float]:
    if not isinstance(value, (list, tuple)) or len(value) != 2:
        raise ValueError(f"{prefix}: '{name}' must be a list of 2 numbers, got {value!r}")
    if not all(_is_number(v) for v in value):
        raise ValueError(f"{prefix}: '{name}' must contain finite numbers, got {value!r}")
    return (float(value[0]), float(value[1]))


def _is_number(value) -> bool:
    return (
        isinstance(value, (int, float))
        and not isinstance(value, bool)
        and math.isfinite(value)
    )


# ── Source validation ─────────────────────────────────────────────


def validate_sources(config: dict) -> None:
    """Check that all local media sources exist on disk.

    URIs and data: URLs are skipped; they belong to the upload side.

    Raises:
        FileNotFoundError: Lists all missing files.
    """
    missing = []
    for item in config["items"]:
        source = item["source"]
        if is_local_source(source) and not Path(source).exists():
            missing.append(str(source))

    if missing:
        msg = f"Missing {len(missing)} media file(s):\n"
        for p in missing:
            msg += f"  - {p}\n"
        raise FileNotFoundError(msg)


# ── Editor construction ───────────────────────────────────────────


def build_editor(config: dict, scheduler=None, notify=None) -> Editor:
    """Create an Editor populated with the manifest's items.

    Items are added in manifest order (first item at the bottom of the
    stack, first timeline row). Nothing is selected.
    """
    playback = config["playback"]
    editor = Editor(
        scheduler=scheduler,
        notify=notify,
        interval=playback["interval"],
        step=playback["step"],
        min_duration=playback["min_duration"],
    )
    for item in config["items"]:
        editor.composition.add(
            item["kind"], item["source"],
            position=item["position"],
            size=item["size"],
            time_range=item["time_range"],
        )
    return editor
