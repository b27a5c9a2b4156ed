"""Timeline scale mapper — seconds to 0-100 display percentages.

The timeline spans max(latest item end, 10 s). Every position on it is a
percentage of that span, so the view can be laid out at any pixel width:
  - time markers, one per whole second,
  - the current-time cursor,
  - one bar per item (left = start, width = duration), one row per item
    in insertion order.
"""

import math
from dataclasses import dataclass

from .composition import MIN_TIMELINE_SECONDS
from .media import MediaItem, MediaKind

# Vertical offset between consecutive item rows, in pixels.
ROW_OFFSET_PX = 8


@dataclass(frozen=True)
class TimeMarker:
    seconds: int
    percent: float

    @property
    def label(self) -> str:
        return f"{self.seconds}s"


@dataclass(frozen=True)
class TimelineBar:
    item_id: str
    kind: MediaKind
    label: str
    row: int
    left: float
    width: float
    selected: bool = False

    @property
    def right(self) -> float:
        return self.left + self.width

    @property
    def top(self) -> int:
        return self.row * ROW_OFFSET_PX


@dataclass(frozen=True)
class TimelineScale:
    max_time: float

    def __post_init__(self):
        if not self.max_time > 0:
            raise ValueError(f"max_time must be > 0, got {self.max_time}")

    @classmethod
    def for_items(cls, items, floor: float = MIN_TIMELINE_SECONDS) -> "TimelineScale":
        return cls(max([item.end for item in items] + [floor]))

    @property
    def scale(self) -> float:
        """Percent per second."""
        return 100 / self.max_time

    def to_percent(self, seconds: float) -> float:
        return seconds * self.scale

    def from_percent(self, percent: float) -> float:
        return percent / self.scale

    def cursor(self, current_time: float) -> float:
        return self.to_percent(current_time)

    def markers(self) -> list[TimeMarker]:
        """One marker per whole second, 0 through ceil(max_time)."""
        return [
            TimeMarker(i, self.to_percent(i))
            for i in range(math.ceil(self.max_time) + 1)
        ]

    def bar(self, item: MediaItem, row: int, selected: bool = False) -> TimelineBar:
        return TimelineBar(
            item_id=item.id,
            kind=item.kind,
            label=item.label,
            row=row,
            left=self.to_percent(item.start),
            width=self.to_percent(item.end - item.start),
            selected=selected,
        )

    def bars(self, items, selected_id: str | None = None) -> list[TimelineBar]:
        return [
            self.bar(item, row, selected=item.id == selected_id)
            for row, item in enumerate(items)
        ]


def bar_at(bars: list[TimelineBar], percent: float, row: int) -> TimelineBar | None:
    """Bar under a click at (*percent*, *row*), or None."""
    for bar in bars:
        if bar.row == row and bar.left <= percent <= bar.right:
            return bar
    return None
