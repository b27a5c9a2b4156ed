"""Wireframe preview of the canvas and timeline.

A stand-in render collaborator: draws what an Editor would show at its
current time without decoding any media. Each rendered item becomes an
outlined box labelled with its kind and id (green for images, purple for
videos, blue ring when selected). Below the canvas, a timeline strip
shows second markers, one bar per item, and the red current-time cursor.
"""

from PIL import Image, ImageDraw

from .common import DEFAULT_PALETTE, draw_label, load_font, text_size
from .editor import RenderFrame, TimelineView


# ── Layout constants ─────────────────────────────────────────────

OUTLINE_WIDTH = 3
SELECTION_RING = 2              # extra px around the selected item
LABEL_PADDING = 4
LABEL_FONT_SIZE = 14

TIMELINE_MARGIN_X = 16          # left/right inset so edge markers fit
TIMELINE_MARKER_BAND = 20       # height of the marker label band
TIMELINE_ROW_PITCH = 22         # vertical distance between bar rows
TIMELINE_BAR_HEIGHT = 18
TIMELINE_PADDING_BOTTOM = 8
MARKER_FONT_SIZE = 11


# ── Canvas ───────────────────────────────────────────────────────


def render_canvas(
    frame: RenderFrame,
    size: tuple[int, int],
    palette: dict = DEFAULT_PALETTE,
    background: tuple[int, int, int] | None = None,
) -> Image.Image:
    """Draw the render set of *frame* as outlined boxes.

    Items are drawn in render order, so later items overlap earlier
    ones. Items partly outside the canvas are clipped by Pillow.
    """
    bg = background if background is not None else palette["background"]
    img = Image.new("RGB", size, bg)
    draw = ImageDraw.Draw(img)
    font = load_font(LABEL_FONT_SIZE)

    for item in frame.items:
        color = palette[item.kind.value]
        x0, y0 = round(item.x), round(item.y)
        x1, y1 = round(item.x + item.width), round(item.y + item.height)

        draw.rectangle([(x0, y0), (x1, y1)], fill=bg, outline=color, width=OUTLINE_WIDTH)
        if item.id == frame.selected_id:
            ring = OUTLINE_WIDTH + SELECTION_RING
            draw.rectangle(
                [(x0 - ring, y0 - ring), (x1 + ring, y1 + ring)],
                outline=palette["selection"], width=SELECTION_RING,
            )

        # Label chip in the top-left corner of the box.
        text = f"{item.label} {item.id}"
        text_w, text_h, _ = text_size(draw, text, font)
        chip_w = min(text_w + 2 * LABEL_PADDING, max(1, x1 - x0))
        chip_h = text_h + 2 * LABEL_PADDING
        draw.rectangle([(x0, y0), (x0 + chip_w, y0 + chip_h)], fill=color)
        draw_label(
            draw, text, (x0 + LABEL_PADDING, y0 + LABEL_PADDING),
            font, palette["label"], max_width=chip_w - 2 * LABEL_PADDING,
        )

    draw.rectangle([(0, 0), (size[0] - 1, size[1] - 1)], outline=palette["canvas_border"])
    return img


# ── Timeline ─────────────────────────────────────────────────────


def timeline_height(row_count: int) -> int:
    rows = max(row_count, 1)
    return TIMELINE_MARKER_BAND + rows * TIMELINE_ROW_PITCH + TIMELINE_PADDING_BOTTOM


def render_timeline(
    view: TimelineView,
    width: int,
    palette: dict = DEFAULT_PALETTE,
) -> Image.Image:
    """Draw markers, item bars and the cursor of a TimelineView."""
    height = timeline_height(len(view.bars))
    img = Image.new("RGB", (width, height), palette["timeline_bg"])
    draw = ImageDraw.Draw(img)
    marker_font = bar_font = load_font(MARKER_FONT_SIZE)
    usable = width - 2 * TIMELINE_MARGIN_X

    def to_px(percent: float) -> int:
        return TIMELINE_MARGIN_X + round(percent / 100 * usable)

    # Second markers: tick line plus centered label.
    for marker in view.markers:
        x = to_px(marker.percent)
        label_w = text_size(draw, marker.label, marker_font)[0]
        draw_label(draw, marker.label, (x - label_w // 2, 2), marker_font, palette["text"])
        draw.line([(x, TIMELINE_MARKER_BAND - 4), (x, TIMELINE_MARKER_BAND)], fill=palette["text"])

    for bar in view.bars:
        x0 = to_px(bar.left)
        x1 = max(x0 + 1, to_px(bar.right))
        y0 = TIMELINE_MARKER_BAND + bar.row * TIMELINE_ROW_PITCH
        y1 = y0 + TIMELINE_BAR_HEIGHT
        draw.rectangle([(x0, y0), (x1, y1)], fill=palette[bar.kind.value])
        if bar.selected:
            draw.rectangle(
                [(x0 - 2, y0 - 2), (x1 + 2, y1 + 2)],
                outline=palette["selection"], width=2,
            )
        draw_label(
            draw, bar.label, (x0 + LABEL_PADDING, y0 + 3),
            bar_font, palette["label"], max_width=max(1, x1 - x0 - 2 * LABEL_PADDING),
        )

    cursor_x = to_px(view.cursor)
    draw.line([(cursor_x, TIMELINE_MARKER_BAND - 4), (cursor_x, height)], fill=palette["cursor"], width=2)
    return img


# ── Combined preview ─────────────────────────────────────────────


def render_preview(
    editor,
    canvas_size: tuple[int, int],
    palette: dict = DEFAULT_PALETTE,
    background: tuple[int, int, int] | None = None,
) -> Image.Image:
    """Canvas wireframe stacked above the timeline strip."""
    canvas = render_canvas(editor.frame(), canvas_size, palette, background)
    strip = render_timeline(editor.timeline(), canvas_size[0], palette)

    img = Image.new("RGB", (canvas_size[0], canvas.height + strip.height), palette["background"])
    img.paste(canvas, (0, 0))
    img.paste(strip, (0, canvas.height))
    return img
