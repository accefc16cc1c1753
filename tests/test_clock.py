"""Unit tests for Clock: injected time, no sleeping."""

import pytest

from pomo_tui.clock import Clock, ClockExpired, ClockTick


def ticks(events) -> list[int]:
    return [e.remaining_ms for e in events if isinstance(e, ClockTick)]


def expiries(events) -> list[ClockExpired]:
    return [e for e in events if isinstance(e, ClockExpired)]


class TestArm:
    def test_initial_state_is_stopped(self):
        clock = Clock(5000)
        assert clock.remaining_ms == 5000
        assert not clock.running
        assert clock.next_deadline_ms is None

    def test_arm_bumps_generation(self):
        clock = Clock(5000)
        first = clock.generation
        clock.arm(3000)
        assert clock.generation == first + 1
        assert clock.remaining_ms == 3000

    def test_arm_stops_a_running_clock(self):
        clock = Clock(5000)
        clock.start(0)
        clock.arm(5000)
        assert not clock.running
        assert clock.poll(10_000) == []

    def test_negative_duration_clamped(self):
        assert Clock(-10).remaining_ms == 0

    def test_rejects_non_positive_interval(self):
        with pytest.raises(ValueError):
            Clock(1000, interval_ms=0)


class TestTicking:
    def test_no_events_before_first_interval(self):
        clock = Clock(3000)
        clock.start(0)
        assert clock.poll(999) == []

    def test_one_tick_per_interval(self):
        clock = Clock(3000)
        clock.start(0)
        assert ticks(clock.poll(1000)) == [2000]
        assert ticks(clock.poll(2000)) == [1000]

    def test_catches_up_missed_ticks(self):
        clock = Clock(5000)
        clock.start(0)
        assert ticks(clock.poll(3500)) == [4000, 3000, 2000]
        assert clock.next_deadline_ms == 4000

    def test_stopped_clock_emits_nothing(self):
        clock = Clock(3000)
        assert clock.poll(10_000) == []

    def test_tick_carries_generation(self):
        clock = Clock(3000)
        clock.start(0)
        (tick,) = clock.poll(1000)
        assert tick.generation == clock.generation


class TestExpiry:
    def test_expires_once_at_zero(self):
        clock = Clock(2000)
        clock.start(0)
        clock.poll(1000)
        events = clock.poll(2000)
        assert ticks(events) == [0]
        assert len(expiries(events)) == 1
        assert not clock.running

    def test_no_second_expiry_without_rearm(self):
        clock = Clock(1000)
        clock.start(0)
        clock.poll(1000)
        clock.start(1000)
        assert not clock.running
        assert clock.poll(5000) == []

    def test_long_gap_yields_single_expiry(self):
        clock = Clock(3000)
        clock.start(0)
        events = clock.poll(60_000)
        assert ticks(events) == [2000, 1000, 0]
        assert len(expiries(events)) == 1

    def test_partial_final_interval_floors_at_zero(self):
        clock = Clock(1500)
        clock.start(0)
        assert ticks(clock.poll(1000)) == [500]
        events = clock.poll(2000)
        assert ticks(events) == [0]
        assert len(expiries(events)) == 1

    def test_rearm_allows_new_expiry(self):
        clock = Clock(1000)
        clock.start(0)
        clock.poll(1000)
        clock.arm(1000)
        clock.start(1000)
        assert len(expiries(clock.poll(2000))) == 1


class TestPauseResume:
    def test_stop_preserves_remaining(self):
        clock = Clock(5000)
        clock.start(0)
        clock.poll(2000)
        clock.stop()
        assert clock.remaining_ms == 3000
        assert clock.poll(10_000) == []

    def test_resume_continues_from_remaining(self):
        clock = Clock(5000)
        clock.start(0)
        clock.poll(2000)
        clock.stop()
        clock.start(10_000)
        assert ticks(clock.poll(11_000)) == [2000]

    def test_immediate_start_stop_is_lossless(self):
        clock = Clock(5000)
        for _ in range(10):
            clock.start(0)
            clock.stop()
        assert clock.remaining_ms == 5000

    def test_toggle(self):
        clock = Clock(5000)
        clock.toggle(0)
        assert clock.running
        clock.toggle(100)
        assert not clock.running
        assert clock.next_deadline_ms is None
