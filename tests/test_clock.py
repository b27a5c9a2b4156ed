"""Tests for the playback clock state machine.

Ticks are driven with ManualScheduler.advance(TICK), so every tick fires
at an exact, reproducible scheduler time.
"""

import asyncio

import pytest

from canvascompose.clock import ManualScheduler, Phase, PlaybackClock, PlaybackState
from canvascompose.errors import ValidationError


TICK = 0.1


class LeakyScheduler(ManualScheduler):
    """Scheduler whose handles ignore cancel(), like a tick already queued."""

    def call_later(self, delay, callback, *args):
        call = super().call_later(delay, callback, *args)
        call.cancel = lambda: None
        return call


def _run_ticks(scheduler, n):
    for _ in range(n):
        scheduler.advance(TICK)


class TestInitialState:
    def test_starts_idle_at_zero(self, clock):
        assert clock.phase is Phase.IDLE
        assert clock.current_time == 0.0
        assert clock.state == PlaybackState(0.0, Phase.IDLE)

    def test_duration_has_ten_second_floor(self, clock):
        assert clock.duration == 10.0

    def test_invalid_interval_raises(self, composition, scheduler):
        with pytest.raises(ValueError, match="interval"):
            PlaybackClock(composition, scheduler, interval=0)


class TestStartStop:
    def test_start_enters_playing_and_schedules(self, clock, scheduler):
        clock.start()
        assert clock.phase is Phase.PLAYING
        assert scheduler.pending == 1

    def test_start_twice_is_same_as_once(self, clock, scheduler):
        clock.start()
        clock.start()
        assert clock.phase is Phase.PLAYING
        assert scheduler.pending == 1
        scheduler.advance(TICK)
        assert clock.current_time == pytest.approx(0.1)

    def test_stop_from_idle_is_noop(self, clock):
        states = []
        clock.subscribe(states.append)
        clock.stop()
        assert clock.phase is Phase.IDLE
        assert states == []

    def test_stop_cancels_pending_tick(self, clock, scheduler):
        clock.start()
        scheduler.advance(TICK)
        clock.stop()
        assert scheduler.pending == 0
        scheduler.advance(1.0)
        assert clock.current_time == pytest.approx(0.1)
        assert clock.phase is Phase.IDLE

    def test_stop_keeps_time(self, clock, scheduler):
        clock.start()
        _run_ticks(scheduler, 3)
        clock.stop()
        assert clock.current_time == pytest.approx(0.3)

    def test_reset_stops_and_rewinds(self, clock, scheduler):
        clock.start()
        _run_ticks(scheduler, 3)
        clock.reset()
        assert clock.phase is Phase.IDLE
        assert clock.current_time == 0.0
        assert scheduler.pending == 0

    def test_reset_from_idle_rewinds(self, clock):
        clock.seek(4.0)
        clock.reset()
        assert clock.current_time == 0.0


class TestStaleTicks:
    def test_queued_tick_after_stop_has_no_effect(self, composition):
        scheduler = LeakyScheduler()
        clock = PlaybackClock(composition, scheduler)
        clock.start()
        clock.stop()
        scheduler.advance(TICK)
        assert clock.current_time == 0.0
        assert clock.phase is Phase.IDLE

    def test_queued_tick_after_reset_has_no_effect(self, composition):
        scheduler = LeakyScheduler()
        clock = PlaybackClock(composition, scheduler)
        clock.start()
        scheduler.advance(TICK)
        clock.reset()
        scheduler.advance(TICK)
        assert clock.current_time == 0.0

    def test_restart_leaves_one_active_tick_chain(self, composition):
        scheduler = LeakyScheduler()
        clock = PlaybackClock(composition, scheduler)
        clock.start()
        clock.stop()
        clock.start()
        scheduler.advance(TICK)
        # Both queued callbacks fired; only the current one advanced time.
        assert clock.current_time == pytest.approx(0.1)
        scheduler.advance(TICK)
        assert clock.current_time == pytest.approx(0.2)


class TestTick:
    def test_tick_advances_by_step(self, clock, scheduler):
        clock.start()
        _run_ticks(scheduler, 5)
        assert clock.current_time == pytest.approx(0.5)

    def test_tick_while_idle_does_nothing(self, clock):
        clock.tick()
        assert clock.current_time == 0.0

    def test_short_item_does_not_loop_early(self, composition, clock, scheduler):
        composition.add("image", "a.png", time_range=(0, 5))
        clock.seek(4.95)
        clock.start()
        scheduler.advance(TICK)
        assert clock.current_time == pytest.approx(5.05)
        assert clock.phase is Phase.PLAYING

    def test_loops_to_start_and_pauses_at_floor(self, composition, clock, scheduler):
        composition.add("image", "a.png", time_range=(0, 5))
        clock.seek(9.95)
        clock.start()
        scheduler.advance(TICK)
        assert clock.current_time == 0.0
        assert clock.phase is Phase.IDLE
        assert scheduler.pending == 0

    def test_long_item_extends_timeline(self, composition, clock, scheduler):
        composition.add("video", "b.mp4", time_range=(0, 20))
        clock.seek(9.95)
        clock.start()
        scheduler.advance(TICK)
        assert clock.phase is Phase.PLAYING
        clock.seek(19.95)
        scheduler.advance(TICK)
        assert clock.current_time == 0.0
        assert clock.phase is Phase.IDLE

    def test_full_pass_from_zero(self, clock, scheduler):
        clock.start()
        ticks = scheduler.run_until_idle()
        # 100 steps of 0.1 land just short of 10.0 in floating point.
        assert ticks in (100, 101)
        assert clock.phase is Phase.IDLE
        assert clock.current_time == 0.0

    def test_start_after_loop_plays_again(self, clock, scheduler):
        clock.seek(9.95)
        clock.start()
        scheduler.advance(TICK)
        clock.start()
        scheduler.advance(TICK)
        assert clock.current_time == pytest.approx(0.1)


class TestSeek:
    def test_seek_sets_time_without_changing_phase(self, clock):
        clock.seek(3.5)
        assert clock.current_time == 3.5
        assert clock.phase is Phase.IDLE

    def test_seek_while_playing(self, clock, scheduler):
        clock.start()
        clock.seek(2.0)
        scheduler.advance(TICK)
        assert clock.current_time == pytest.approx(2.1)

    @pytest.mark.parametrize("value", [-0.1, float("nan"), float("inf"), "3", True])
    def test_invalid_seek_rejected(self, clock, value):
        with pytest.raises(ValidationError):
            clock.seek(value)
        assert clock.current_time == 0.0


class TestObservers:
    def test_observer_sees_every_change(self, clock, scheduler):
        states = []
        clock.subscribe(states.append)
        clock.start()
        scheduler.advance(TICK)
        clock.stop()
        assert [s.phase for s in states] == [Phase.PLAYING, Phase.PLAYING, Phase.IDLE]
        assert states[1].current_time == pytest.approx(0.1)

    def test_unsubscribe(self, clock):
        states = []
        unsubscribe = clock.subscribe(states.append)
        unsubscribe()
        clock.seek(1.0)
        assert states == []

    def test_loop_publishes_single_state(self, clock, scheduler):
        states = []
        clock.seek(9.95)
        clock.start()
        clock.subscribe(states.append)
        scheduler.advance(TICK)
        assert states == [PlaybackState(0.0, Phase.IDLE)]

    def test_observer_may_stop_the_clock(self, clock, scheduler):
        def stop_after_two(state):
            if state.current_time >= 0.15:
                clock.stop()

        clock.subscribe(stop_after_two)
        clock.start()
        _run_ticks(scheduler, 5)
        assert clock.phase is Phase.IDLE
        assert clock.current_time == pytest.approx(0.2)
        assert scheduler.pending == 0

    def test_failing_observer_does_not_freeze_playback(self, clock, scheduler):
        calls = []

        def fail_on_first_tick(state):
            calls.append(state)
            if len(calls) == 2:
                raise RuntimeError("render failed")

        clock.subscribe(fail_on_first_tick)
        clock.start()
        with pytest.raises(RuntimeError, match="render failed"):
            scheduler.advance(TICK)
        assert clock.phase is Phase.PLAYING
        assert scheduler.pending == 1

        scheduler.advance(TICK)
        assert clock.current_time == pytest.approx(0.2)
        assert scheduler.pending == 1


class TestManualScheduler:
    def test_advance_fires_due_calls_in_order(self):
        scheduler = ManualScheduler()
        fired = []
        scheduler.call_later(0.2, fired.append, "b")
        scheduler.call_later(0.1, fired.append, "a")
        assert scheduler.advance(0.15) == 1
        assert scheduler.advance(0.1) == 1
        assert fired == ["a", "b"]

    def test_cancelled_calls_do_not_fire(self):
        scheduler = ManualScheduler()
        fired = []
        handle = scheduler.call_later(0.1, fired.append, "x")
        handle.cancel()
        assert handle.cancelled()
        scheduler.advance(1.0)
        assert fired == []
        assert scheduler.pending == 0

    def test_run_until_idle_guard(self):
        scheduler = ManualScheduler()

        def forever():
            scheduler.call_later(1.0, forever)

        scheduler.call_later(1.0, forever)
        with pytest.raises(RuntimeError, match="still busy"):
            scheduler.run_until_idle(max_calls=10)


class TestAsyncioScheduler:
    def test_clock_runs_on_event_loop(self, composition):
        async def play():
            loop = asyncio.get_running_loop()
            done = loop.create_future()
            clock = PlaybackClock(
                composition, loop, interval=0.001, step=1.0, min_duration=3.0,
            )
            times = []

            def on_state(state):
                times.append(state.current_time)
                if state.phase is Phase.IDLE and not done.done():
                    done.set_result(None)

            clock.subscribe(on_state)
            clock.start()
            await asyncio.wait_for(done, timeout=5)
            return times

        times = asyncio.run(play())
        assert times == [0.0, 1.0, 2.0, 0.0]
