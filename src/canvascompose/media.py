"""Media item data model.

A MediaItem is one placed image or video: where it sits on the canvas,
how big it is, and the time window in which it is shown. Items are
immutable values; the Composition replaces them wholesale on every edit
so a rejected edit can never leave a half-applied item behind.
"""

import math
from dataclasses import dataclass
from enum import Enum

from .errors import ValidationError


class MediaKind(str, Enum):
    IMAGE = "image"
    VIDEO = "video"

    @property
    def label(self) -> str:
        return self.value.capitalize()


# ── Upload defaults ────────────────────────────────────────────────

DEFAULT_POSITION = (50.0, 50.0)

DEFAULT_SIZES = {
    MediaKind.IMAGE: (320.0, 240.0),
    MediaKind.VIDEO: (320.0, 180.0),
}

DEFAULT_TIME_RANGE = (0.0, 10.0)

# Fields an edit may touch. id, kind and source are fixed at creation.
MUTABLE_FIELDS = ("x", "y", "width", "height", "start", "end")

IMMUTABLE_FIELDS = ("id", "kind", "source")


@dataclass(frozen=True)
class MediaItem:
    id: str
    kind: MediaKind
    source: object
    x: float
    y: float
    width: float
    height: float
    start: float
    end: float

    @property
    def position(self) -> tuple[float, float]:
        return (self.x, self.y)

    @property
    def size(self) -> tuple[float, float]:
        return (self.width, self.height)

    @property
    def time_range(self) -> tuple[float, float]:
        return (self.start, self.end)

    @property
    def duration(self) -> float:
        return self.end - self.start

    @property
    def label(self) -> str:
        return self.kind.label


def parse_kind(value) -> MediaKind:
    """Convert 'image' / 'video' (any case) or a MediaKind to a MediaKind."""
    if isinstance(value, MediaKind):
        return value
    try:
        return MediaKind(str(value).strip().lower())
    except ValueError:
        raise ValidationError(
            f"Unknown media kind: '{value}'. "
            f"Valid: {sorted(k.value for k in MediaKind)}"
        ) from None


def check_item(item: MediaItem) -> None:
    """Validate an item's geometry and time range.

    Raises:
        ValidationError: non-finite values, non-positive size,
            negative start, or end not after start.
    """
    prefix = item.id or "media"
    for name in MUTABLE_FIELDS:
        value = getattr(item, name)
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ValidationError(f"{prefix}: {name} must be a number, got {value!r}")
        if not math.isfinite(value):
            raise ValidationError(f"{prefix}: {name} must be finite, got {value!r}")

    if item.width <= 0:
        raise ValidationError(f"{prefix}: width must be > 0, got {item.width}")
    if item.height <= 0:
        raise ValidationError(f"{prefix}: height must be > 0, got {item.height}")
    if item.start < 0:
        raise ValidationError(f"{prefix}: start must be >= 0, got {item.start}")
    if item.end <= item.start:
        raise ValidationError(
            f"{prefix}: end ({item.end}) must be > start ({item.start})"
        )
