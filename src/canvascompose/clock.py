"""Playback clock — the play/pause/time-cursor state machine.

States:
  - IDLE (initial): time only moves through seek/reset.
  - PLAYING: a tick fires every `interval` seconds of wall time and adds
    `step` seconds to the current time.

When a tick would reach the end of the timeline (the latest item end,
floored at `min_duration`), the clock stops and rewinds to 0 in the same
step: loop-to-start-and-pause, not loop-and-continue.

The clock publishes PlaybackState to observers and never touches render
handles. Whether a given video element plays or pauses is the render
collaborator's decision.

Ticks are cooperative callbacks on a scheduler: anything with
`call_later(delay, callback, *args)` returning a cancellable handle. An
asyncio event loop fits as-is; ManualScheduler drives the clock by hand
for headless runs and tests.

Each scheduled tick carries the generation it was scheduled under.
start/stop/reset bump the generation, so a tick that is already queued
when stop() runs finds a stale generation and does nothing.
"""

import heapq
import itertools
import logging
import math
from dataclasses import dataclass
from enum import Enum

from .composition import MIN_TIMELINE_SECONDS
from .errors import ValidationError

logger = logging.getLogger(__name__)


# ── Constants ────────────────────────────────────────────────────

TICK_INTERVAL = 0.1     # wall-clock seconds between ticks
TICK_STEP = 0.1         # timeline seconds added per tick


class Phase(str, Enum):
    IDLE = "idle"
    PLAYING = "playing"


@dataclass(frozen=True)
class PlaybackState:
    current_time: float
    phase: Phase

    @property
    def is_playing(self) -> bool:
        return self.phase is Phase.PLAYING


# ── Manual scheduler ─────────────────────────────────────────────


class ScheduledCall:
    """Handle for a callback queued on a ManualScheduler."""

    def __init__(self, when: float, callback, args: tuple):
        self.when = when
        self.callback = callback
        self.args = args
        self._cancelled = False

    def cancel(self) -> None:
        self._cancelled = True

    def cancelled(self) -> bool:
        return self._cancelled


class ManualScheduler:
    """Deterministic scheduler whose time only moves when told to.

    Mirrors the slice of the asyncio loop API the clock uses
    (call_later + handle.cancel) so the two are interchangeable.
    """

    def __init__(self):
        self.now = 0.0
        self._queue = []
        self._seq = itertools.count()

    def call_later(self, delay: float, callback, *args) -> ScheduledCall:
        call = ScheduledCall(self.now + delay, callback, args)
        heapq.heappush(self._queue, (call.when, next(self._seq), call))
        return call

    @property
    def pending(self) -> int:
        """Number of queued calls that have not been cancelled."""
        return sum(1 for _, _, call in self._queue if not call.cancelled())

    def advance(self, seconds: float) -> int:
        """Move time forward, firing every call that falls due.

        Returns the number of callbacks fired.
        """
        target = self.now + seconds
        fired = 0
        while self._queue and self._queue[0][0] <= target:
            when, _, call = heapq.heappop(self._queue)
            if call.cancelled():
                continue
            self.now = when
            call.callback(*call.args)
            fired += 1
        self.now = target
        return fired

    def run_until_idle(self, max_calls: int = 1_000_000) -> int:
        """Fire queued calls in order until none are left.

        Raises:
            RuntimeError: More than *max_calls* callbacks fired.
        """
        fired = 0
        while self._queue:
            when, _, call = heapq.heappop(self._queue)
            if call.cancelled():
                continue
            if fired >= max_calls:
                raise RuntimeError(f"Scheduler still busy after {max_calls} calls")
            self.now = when
            call.callback(*call.args)
            fired += 1
        return fired


# ── Clock ────────────────────────────────────────────────────────


class PlaybackClock:
    def __init__(
        self,
        composition,
        scheduler,
        interval: float = TICK_INTERVAL,
        step: float = TICK_STEP,
        min_duration: float = MIN_TIMELINE_SECONDS,
    ):
        if interval <= 0 or step <= 0:
            raise ValueError(
                f"interval and step must be > 0, got interval={interval}, step={step}"
            )
        self._composition = composition
        self._scheduler = scheduler
        self.interval = interval
        self.step = step
        self.min_duration = min_duration

        self._current_time = 0.0
        self._phase = Phase.IDLE
        self._generation = 0
        self._handle = None
        self._observers = []

    @property
    def current_time(self) -> float:
        return self._current_time

    @property
    def phase(self) -> Phase:
        return self._phase

    @property
    def is_playing(self) -> bool:
        return self._phase is Phase.PLAYING

    @property
    def state(self) -> PlaybackState:
        return PlaybackState(self._current_time, self._phase)

    @property
    def duration(self) -> float:
        """Time at which playback loops back to the start."""
        return self._composition.max_end(self.min_duration)

    # ── Observers ──────────────────────────────────────────────────

    def subscribe(self, callback):
        """Call *callback(PlaybackState)* after every state change.

        Returns a function that removes the subscription.
        """
        self._observers.append(callback)

        def unsubscribe():
            if callback in self._observers:
                self._observers.remove(callback)

        return unsubscribe

    def _publish(self) -> None:
        state = self.state
        for callback in list(self._observers):
            callback(state)

    # ── Transitions ────────────────────────────────────────────────

    def start(self) -> None:
        """Enter PLAYING and begin ticking. No-op while already playing."""
        if self._phase is Phase.PLAYING:
            return
        self._phase = Phase.PLAYING
        self._generation += 1
        self._schedule()
        logger.debug("Clock started at %.2fs", self._current_time)
        self._publish()

    def stop(self) -> None:
        """Cancel the pending tick and enter IDLE. No-op while idle."""
        if self._halt():
            logger.debug("Clock stopped at %.2fs", self._current_time)
            self._publish()

    def reset(self) -> None:
        """Stop and rewind to 0."""
        self._halt()
        self._current_time = 0.0
        self._publish()

    def seek(self, seconds: float) -> None:
        """Move the time cursor without changing phase (scrubbing).

        Raises:
            ValidationError: Negative or non-finite time.
        """
        if isinstance(seconds, bool) or not isinstance(seconds, (int, float)):
            raise ValidationError(f"Seek time must be a number, got {seconds!r}")
        if not math.isfinite(seconds) or seconds < 0:
            raise ValidationError(f"Seek time must be finite and >= 0, got {seconds}")
        self._current_time = float(seconds)
        self._publish()

    def tick(self) -> None:
        """Advance one step. Normally only called by the scheduler.

        Does nothing while idle.
        """
        if self._phase is not Phase.PLAYING:
            return
        self._advance()
        self._publish()

    # ── Internals ──────────────────────────────────────────────────

    def _advance(self) -> None:
        new_time = self._current_time + self.step
        if new_time >= self.duration:
            self._halt()
            self._current_time = 0.0
            logger.debug("Clock reached end of timeline, rewound to 0")
        else:
            self._current_time = new_time

    def _halt(self) -> bool:
        """Invalidate pending ticks and go idle. Returns True if it was playing."""
        self._generation += 1
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
        was_playing = self._phase is Phase.PLAYING
        self._phase = Phase.IDLE
        return was_playing

    def _schedule(self) -> None:
        self._handle = self._scheduler.call_later(
            self.interval, self._on_timer, self._generation,
        )

    def _on_timer(self, generation: int) -> None:
        # Stale tick: stop/reset/start happened after it was queued.
        if generation != self._generation or self._phase is not Phase.PLAYING:
            return
        self._handle = None
        self._advance()
        # Queue the next tick before observers run so one that raises
        # cannot end the tick chain.
        if self._phase is Phase.PLAYING:
            self._schedule()
        self._publish()
