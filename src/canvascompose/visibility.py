"""Visibility & composition resolver.

Decides which items the canvas renders at a given time. While playing,
only items whose time window contains the current time are rendered.
While idle every item is rendered so the user can position and size
items at any point of the timeline; editing is never gated by the clock.
"""

from .clock import Phase
from .media import MediaItem


def is_visible(item: MediaItem, current_time: float) -> bool:
    """True if *current_time* falls in the item's window, bounds included."""
    return item.start <= current_time <= item.end


def resolve_render_set(
    items, current_time: float, phase: Phase,
) -> list[MediaItem]:
    """Items to render, in insertion order (later items on top)."""
    if phase is not Phase.PLAYING:
        return list(items)
    return [item for item in items if is_visible(item, current_time)]
