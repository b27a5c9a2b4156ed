"""Editor session — thin orchestration over the composition core.

The core operations (store, clock, selection, geometry) are independent.
This layer composes them the way the editing UI uses them:
  - adding media also selects it and posts a notification,
  - a canvas/form edit also selects the edited item,
  - a rejected edit is reported to the notifier and the prior state kept,
  - an edit or selection naming a removed id clears the stale selection.

Render collaborators read RenderFrame / TimelineView snapshots, either
on demand or by subscribing with on_frame().
"""

import logging
from dataclasses import dataclass

from .clock import ManualScheduler, Phase, PlaybackClock, TICK_INTERVAL, TICK_STEP
from .composition import MIN_TIMELINE_SECONDS, Composition
from .errors import NotFound, ValidationError
from .geometry import GeometryEditor
from .media import MediaItem, parse_kind
from .selection import Selection
from .timeline import TimeMarker, TimelineBar, TimelineScale, bar_at
from .visibility import resolve_render_set

logger = logging.getLogger(__name__)


NOTIFY_LEVELS = {
    "success": logging.INFO,
    "info": logging.INFO,
    "error": logging.WARNING,
}


def log_notification(level: str, message: str) -> None:
    """Default notifier: route user-facing messages to the log."""
    logger.log(NOTIFY_LEVELS.get(level, logging.INFO), message)


@dataclass(frozen=True)
class RenderFrame:
    """What the canvas shows right now."""
    items: tuple[MediaItem, ...]
    selected_id: str | None
    current_time: float
    phase: Phase

    @property
    def item_ids(self) -> list[str]:
        return [item.id for item in self.items]


@dataclass(frozen=True)
class TimelineView:
    """What the timeline strip shows right now."""
    max_time: float
    markers: tuple[TimeMarker, ...]
    bars: tuple[TimelineBar, ...]
    cursor: float


class Editor:
    def __init__(
        self,
        composition: Composition | None = None,
        scheduler=None,
        notify=None,
        interval: float = TICK_INTERVAL,
        step: float = TICK_STEP,
        min_duration: float = MIN_TIMELINE_SECONDS,
    ):
        self.composition = composition if composition is not None else Composition()
        self.scheduler = scheduler if scheduler is not None else ManualScheduler()
        self.clock = PlaybackClock(
            self.composition, self.scheduler,
            interval=interval, step=step, min_duration=min_duration,
        )
        self.selection = Selection()
        self.geometry = GeometryEditor(self.composition)
        self._notify = notify or log_notification
        self._frame_observers = []
        self.clock.subscribe(lambda state: self._emit())

    # ── Media ──────────────────────────────────────────────────────

    def add_media(self, kind, source, **geometry) -> MediaItem | None:
        """Place uploaded media with default geometry and select it."""
        try:
            item = self.composition.add(parse_kind(kind), source, **geometry)
        except ValidationError as exc:
            self._reject(exc)
            return None
        self.selection.select(item.id)
        self._notify("success", f"{item.label} added to canvas")
        self._emit()
        return item

    def remove_media(self, item_id: str) -> MediaItem | None:
        try:
            item = self.composition.remove(item_id)
        except NotFound:
            self._forget(item_id)
            return None
        self.selection.resolve(self.composition)
        self._emit()
        return item

    def select(self, item_id: str | None) -> MediaItem | None:
        """Select an item by id, or clear the selection with None."""
        if item_id is None:
            self.selection.clear()
            self._emit()
            return None
        try:
            item = self.composition.get(item_id)
        except NotFound:
            self._forget(item_id)
            return None
        self.selection.select(item.id)
        self._emit()
        return item

    def select_on_timeline(self, percent: float, row: int) -> MediaItem | None:
        """Select the item whose timeline bar is under a click, if any."""
        bar = bar_at(list(self.timeline().bars), percent, row)
        if bar is None:
            return None
        return self.select(bar.item_id)

    @property
    def selected(self) -> MediaItem | None:
        return self.selection.resolve(self.composition)

    # ── Edits (update + select) ────────────────────────────────────

    def move_to(self, item_id: str, x, y) -> MediaItem | None:
        return self._edit(self.geometry.move_to, item_id, x, y)

    def resize_to(self, item_id: str, width, height) -> MediaItem | None:
        return self._edit(self.geometry.resize_to, item_id, width, height)

    def set_time_range(self, item_id: str, start, end) -> MediaItem | None:
        return self._edit(self.geometry.set_time_range, item_id, start, end)

    def set_field(self, item_id: str, field: str, raw_value) -> MediaItem | None:
        return self._edit(self.geometry.set_field, item_id, field, raw_value)

    def _edit(self, operation, item_id: str, *args) -> MediaItem | None:
        try:
            item = operation(item_id, *args)
        except ValidationError as exc:
            self._reject(exc)
            return None
        except NotFound:
            self._forget(item_id)
            return None
        self.selection.select(item.id)
        self._emit()
        return item

    def _reject(self, exc: ValidationError) -> None:
        logger.info("Rejected edit: %s", exc)
        self._notify("error", str(exc))

    def _forget(self, item_id: str) -> None:
        logger.debug("Ignoring stale media id %s", item_id)
        if self.selection.is_selected(item_id):
            self.selection.clear()
            self._emit()

    # ── Playback ───────────────────────────────────────────────────

    def play(self) -> None:
        self.clock.start()

    def stop(self) -> None:
        self.clock.stop()

    def reset(self) -> None:
        self.clock.reset()

    def seek(self, seconds) -> bool:
        """Scrub to *seconds*. Returns False if the time was rejected."""
        try:
            self.clock.seek(seconds)
        except ValidationError as exc:
            self._reject(exc)
            return False
        return True

    # ── Views ──────────────────────────────────────────────────────

    def frame(self) -> RenderFrame:
        state = self.clock.state
        items = resolve_render_set(
            self.composition.items(), state.current_time, state.phase,
        )
        selected = self.selection.resolve(self.composition)
        return RenderFrame(
            items=tuple(items),
            selected_id=selected.id if selected else None,
            current_time=state.current_time,
            phase=state.phase,
        )

    def timeline(self) -> TimelineView:
        items = self.composition.items()
        scale = TimelineScale.for_items(items, floor=self.clock.min_duration)
        selected = self.selection.resolve(self.composition)
        return TimelineView(
            max_time=scale.max_time,
            markers=tuple(scale.markers()),
            bars=tuple(scale.bars(items, selected.id if selected else None)),
            cursor=scale.cursor(self.clock.current_time),
        )

    def on_frame(self, callback):
        """Call *callback(RenderFrame)* after every clock change or edit.

        Returns a function that removes the subscription.
        """
        self._frame_observers.append(callback)

        def unsubscribe():
            if callback in self._frame_observers:
                self._frame_observers.remove(callback)

        return unsubscribe

    def _emit(self) -> None:
        if not self._frame_observers:
            return
        frame = self.frame()
        for callback in list(self._frame_observers):
            callback(frame)
