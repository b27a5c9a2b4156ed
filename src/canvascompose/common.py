"""canvascompose.common — helpers shared by the manifest loader, preview and CLIs.

Contains: hex colors, ${var} source paths, media source classification,
label fonts and text fitting, CLI logging setup.
"""

import logging
import re
from pathlib import Path

from PIL import ImageDraw, ImageFont


# ── Palette ────────────────────────────────────────────────────────

# Image/video bars match the editor's green/purple.
DEFAULT_PALETTE = {
    "background": (255, 255, 255),
    "canvas_border": (209, 213, 219),
    "image": (34, 197, 94),
    "video": (168, 85, 247),
    "selection": (59, 130, 246),
    "cursor": (239, 68, 68),
    "timeline_bg": (249, 250, 251),
    "text": (107, 114, 128),
    "label": (255, 255, 255),
}

_HEX_DIGITS = set("0123456789abcdefABCDEF")


def parse_hex_color(value: str) -> tuple[int, int, int]:
    """'#RRGGBB' (leading '#' optional) -> (R, G, B)."""
    digits = value[1:] if value.startswith("#") else value
    if len(digits) != 6 or not set(digits) <= _HEX_DIGITS:
        raise ValueError(f"Invalid hex color: '{value}'. Expected #RRGGBB.")
    red, green, blue = bytes.fromhex(digits)
    return (red, green, blue)


# ── Media sources ──────────────────────────────────────────────────

_PATH_VAR = re.compile(r"\$\{(\w+)\}")
_URI_PREFIXES = ("data:", "blob:")


def resolve_path_vars(text: str, paths: dict[str, str]) -> str:
    """Expand ${name} references from the manifest's paths table."""
    missing = [name for name in _PATH_VAR.findall(text) if name not in paths]
    if missing:
        raise ValueError(f"Unknown path variable: ${{{missing[0]}}}")
    return _PATH_VAR.sub(lambda m: str(paths[m.group(1)]), text)


def is_local_source(source) -> bool:
    """True if a media source looks like a filesystem path.

    URIs (http://, file://, blob:) and data: URLs are left to the
    upload collaborator and never checked on disk.
    """
    if not isinstance(source, (str, Path)):
        return False
    text = str(source)
    return "://" not in text and not text.startswith(_URI_PREFIXES)


# ── Fonts and labels ───────────────────────────────────────────────

# Inter preferred for preview labels, DejaVu Sans as fallback.
FONT_PATHS = [
    Path.home() / ".local/share/fonts/Inter.ttc",
    Path("/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf"),
]


def load_font(size: int) -> ImageFont.FreeTypeFont | ImageFont.ImageFont:
    """First installed font from FONT_PATHS, else Pillow's bitmap default."""
    for font_path in filter(Path.exists, FONT_PATHS):
        try:
            return ImageFont.truetype(str(font_path), size=size, index=0)
        except (OSError, IndexError):
            logging.getLogger(__name__).debug("Skipping unreadable font %s", font_path)
    return ImageFont.load_default()


def text_size(draw: ImageDraw.ImageDraw, text: str, font) -> tuple[int, int, int]:
    """(width, height, top offset) of *text* as drawn with *font*."""
    left, top, right, bottom = draw.textbbox((0, 0), text, font=font)
    return right - left, bottom - top, top


def fit_text(draw: ImageDraw.ImageDraw, text: str, font, max_width: int) -> str:
    """Shorten *text* with a trailing '...' until it fits *max_width* pixels."""
    while len(text) > 5 and text_size(draw, text, font)[0] > max_width:
        text = text[:-4] + "..."
    return text


def draw_label(
    draw: ImageDraw.ImageDraw,
    text: str,
    position: tuple[int, int],
    font,
    color: tuple[int, int, int],
    max_width: int | None = None,
) -> str:
    """Draw *text* with its top edge at *position*; returns the text drawn."""
    if max_width is not None:
        text = fit_text(draw, text, font, max_width)
    x, y = position
    draw.text((x, y - text_size(draw, text, font)[2]), text, fill=color, font=font)
    return text


# ── Logging ────────────────────────────────────────────────────────

def setup_logging(verbose: bool = False) -> None:
    """Configure root logging for the CLIs (DEBUG with --verbose)."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s: %(message)s",
    )
