"""Geometry mutation interface.

Entry points for direct manipulation (drag end, resize) and for the
property form. Every edit is routed through Composition.update, which
validates the resulting item as a whole, so a rejected edit keeps the
prior state.

Selection is not touched here. Callers that want update-and-select
compose the two themselves (see editor.Editor).
"""

import math

from .errors import ValidationError
from .media import MediaItem

# Form field name → item field. Accepts the form's camelCase names too.
FIELD_ALIASES = {
    "x": "x",
    "y": "y",
    "width": "width",
    "height": "height",
    "start": "start",
    "end": "end",
    "start_time": "start",
    "end_time": "end",
    "startTime": "start",
    "endTime": "end",
}

# Smallest gap the form offers between start and end.
END_TIME_STEP = 0.1


def coerce_number(raw, field: str = "value") -> float:
    """Coerce a raw form value ('12.5', 12, ' 3 ') to a finite float.

    Raises:
        ValidationError: Blank, non-numeric, boolean or non-finite input.
    """
    if isinstance(raw, bool):
        raise ValidationError(f"{field}: expected a number, got {raw!r}")
    if isinstance(raw, (int, float)):
        value = float(raw)
    elif isinstance(raw, str):
        text = raw.strip()
        if not text:
            raise ValidationError(f"{field}: value is empty")
        try:
            value = float(text)
        except ValueError:
            raise ValidationError(f"{field}: '{raw}' is not a number") from None
    else:
        raise ValidationError(f"{field}: expected a number, got {raw!r}")

    if not math.isfinite(value):
        raise ValidationError(f"{field}: value must be finite, got {raw!r}")
    return value


class GeometryEditor:
    def __init__(self, composition):
        self._composition = composition

    def move_to(self, item_id: str, x, y) -> MediaItem:
        return self._composition.update(item_id, {
            "x": coerce_number(x, "x"),
            "y": coerce_number(y, "y"),
        })

    def resize_to(self, item_id: str, width, height) -> MediaItem:
        """Set width and height; both must be > 0."""
        width = coerce_number(width, "width")
        height = coerce_number(height, "height")
        if width <= 0 or height <= 0:
            raise ValidationError(
                f"{item_id}: size must be positive, got {width} x {height}"
            )
        return self._composition.update(item_id, {"width": width, "height": height})

    def set_time_range(self, item_id: str, start, end) -> MediaItem:
        """Set both ends of the time window, validated as one pair."""
        return self._composition.update(item_id, {
            "start": coerce_number(start, "start"),
            "end": coerce_number(end, "end"),
        })

    def set_field(self, item_id: str, field: str, raw_value) -> MediaItem:
        """Apply one property-form edit.

        Time fields are written as a pair with the other, unchanged end so
        the start < end check sees the final window.

        Raises:
            ValidationError: Unknown field, bad value, or invalid result.
            NotFound: Unknown id.
        """
        if field not in FIELD_ALIASES:
            raise ValidationError(
                f"{item_id}: unknown field '{field}'. "
                f"Valid: {sorted(FIELD_ALIASES)}"
            )
        target = FIELD_ALIASES[field]
        value = coerce_number(raw_value, field)

        if target in ("start", "end"):
            item = self._composition.get(item_id)
            start = value if target == "start" else item.start
            end = value if target == "end" else item.end
            return self.set_time_range(item_id, start, end)

        if target in ("width", "height"):
            item = self._composition.get(item_id)
            width = value if target == "width" else item.width
            height = value if target == "height" else item.height
            return self.resize_to(item_id, width, height)

        return self._composition.update(item_id, {target: value})

    def end_time_lower_bound(self, item_id: str) -> float:
        """Smallest end time the form should offer for this item."""
        return self._composition.get(item_id).start + END_TIME_STEP
