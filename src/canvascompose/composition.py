"""MediaItem store — the authoritative, ordered list of placed media.

Insertion order is z-order (later items draw on top) and timeline row
order. Ids come from a monotonic counter that is never rewound, so an id
is never handed out twice in the lifetime of a Composition, even after
items are removed.
"""

import itertools
import logging
from dataclasses import replace

from .errors import NotFound, ValidationError
from .media import (
    DEFAULT_POSITION,
    DEFAULT_SIZES,
    DEFAULT_TIME_RANGE,
    IMMUTABLE_FIELDS,
    MUTABLE_FIELDS,
    MediaItem,
    check_item,
    parse_kind,
)

logger = logging.getLogger(__name__)


# Loop floor: the timeline is never shorter than this many seconds.
MIN_TIMELINE_SECONDS = 10.0


class Composition:
    """Ordered collection of MediaItem keyed by id."""

    def __init__(self, id_prefix: str = "media"):
        self._items: dict[str, MediaItem] = {}
        self._counter = itertools.count(1)
        self._id_prefix = id_prefix

    # ── Reads ──────────────────────────────────────────────────────

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self):
        return iter(list(self._items.values()))

    def __contains__(self, item_id) -> bool:
        return item_id in self._items

    def items(self) -> list[MediaItem]:
        """Snapshot of all items in insertion (z) order."""
        return list(self._items.values())

    def get(self, item_id: str) -> MediaItem:
        try:
            return self._items[item_id]
        except KeyError:
            raise NotFound(item_id) from None

    def index_of(self, item_id: str) -> int:
        """Row / z-order index of an item (0 = bottom, first row)."""
        for i, key in enumerate(self._items):
            if key == item_id:
                return i
        raise NotFound(item_id)

    def max_end(self, floor: float = MIN_TIMELINE_SECONDS) -> float:
        """Latest end time of any item, never less than *floor*."""
        return max([item.end for item in self._items.values()] + [floor])

    # ── Mutations ──────────────────────────────────────────────────

    def add(
        self,
        kind,
        source,
        position: tuple[float, float] | None = None,
        size: tuple[float, float] | None = None,
        time_range: tuple[float, float] | None = None,
    ) -> MediaItem:
        """Append a new item with a fresh id.

        Geometry not given falls back to the upload defaults for the
        item's kind. Nothing is added if the geometry is invalid.

        Raises:
            ValidationError: Unknown kind or invalid geometry.
        """
        kind = parse_kind(kind)
        x, y = _pair(kind, "position", "(x, y)", position, DEFAULT_POSITION)
        width, height = _pair(kind, "size", "(width, height)", size, DEFAULT_SIZES[kind])
        start, end = _pair(kind, "time_range", "(start, end)", time_range, DEFAULT_TIME_RANGE)

        item = MediaItem(
            id=self._next_id(),
            kind=kind,
            source=source,
            x=x, y=y,
            width=width, height=height,
            start=start, end=end,
        )
        check_item(item)

        self._items[item.id] = item
        logger.debug("Added %s %s at (%s, %s)", kind.value, item.id, x, y)
        return item

    def update(self, item_id: str, patch: dict) -> MediaItem:
        """Apply a partial change to one item, all or nothing.

        The patched item is validated as a whole before it replaces the
        stored one, so a rejected patch leaves the store untouched.

        Raises:
            NotFound: Unknown id.
            ValidationError: Unknown/immutable field or invalid result.
        """
        current = self.get(item_id)

        for field in patch:
            if field in IMMUTABLE_FIELDS:
                raise ValidationError(f"{item_id}: '{field}' cannot be changed")
            if field not in MUTABLE_FIELDS:
                raise ValidationError(
                    f"{item_id}: unknown field '{field}'. "
                    f"Valid: {list(MUTABLE_FIELDS)}"
                )

        candidate = replace(current, **patch)
        check_item(candidate)

        self._items[item_id] = candidate
        logger.debug("Updated %s: %s", item_id, patch)
        return candidate

    def remove(self, item_id: str) -> MediaItem:
        """Delete an item. Selections holding its id resolve to none."""
        item = self.get(item_id)
        del self._items[item_id]
        logger.debug("Removed %s", item_id)
        return item

    def _next_id(self) -> str:
        item_id = f"{self._id_prefix}-{next(self._counter)}"
        while item_id in self._items:
            item_id = f"{self._id_prefix}-{next(self._counter)}"
        return item_id


def _pair(kind, name: str, shape: str, value, default) -> tuple:
    if value is None:
        return default
    if not isinstance(value, (list, tuple)) or len(value) != 2:
        raise ValidationError(f"{kind.value}: {name} must be {shape}, got {value!r}")
    return tuple(value)
