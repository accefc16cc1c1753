"""Countdown clock: pure logic, no I/O.

All time values are integer milliseconds. The caller injects the current
monotonic time through ``now_ms`` parameters, which keeps the clock
deterministic under test.
"""

from __future__ import annotations

from dataclasses import dataclass

TICK_INTERVAL_MS = 1000


@dataclass(frozen=True)
class ClockTick:
    remaining_ms: int
    generation: int


@dataclass(frozen=True)
class ClockExpired:
    generation: int


ClockEvent = ClockTick | ClockExpired


class Clock:
    """Ticks every ``interval_ms`` while running and expires once at zero.

    Each ``arm()`` bumps ``generation``; events carry the generation they
    were produced under so consumers can drop stale ones.
    """

    def __init__(self, duration_ms: int, interval_ms: int = TICK_INTERVAL_MS):
        if interval_ms <= 0:
            raise ValueError("interval_ms must be positive")
        self._interval_ms = interval_ms
        self._generation = 0
        self._remaining_ms = 0
        self._running = False
        self._expired = False
        self._next_tick_ms: int | None = None
        self.arm(duration_ms)

    # ---- Read-only properties ----

    @property
    def remaining_ms(self) -> int:
        return self._remaining_ms

    @property
    def running(self) -> bool:
        return self._running

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def interval_ms(self) -> int:
        return self._interval_ms

    @property
    def next_deadline_ms(self) -> int | None:
        """Monotonic time of the next tick, or None while stopped."""
        return self._next_tick_ms

    # ---- Control ----

    def arm(self, duration_ms: int) -> None:
        """Reset the countdown to ``duration_ms``, stopped."""
        self._generation += 1
        self._remaining_ms = max(0, int(duration_ms))
        self._running = False
        self._expired = False
        self._next_tick_ms = None

    def start(self, now_ms: int) -> None:
        if self._running or self._expired:
            return
        self._running = True
        self._next_tick_ms = now_ms + self._interval_ms

    def stop(self) -> None:
        # Remaining time only moves on whole ticks, so a partial interval is
        # not lost; the next start waits a full interval again.
        self._running = False
        self._next_tick_ms = None

    def toggle(self, now_ms: int) -> None:
        if self._running:
            self.stop()
        else:
            self.start(now_ms)

    def poll(self, now_ms: int) -> list[ClockEvent]:
        """Return every event due at ``now_ms``.

        Catches up on missed ticks. Emits at most one ``ClockExpired`` per
        arm, after which the clock stays stopped until re-armed.
        """
        events: list[ClockEvent] = []
        while self._running and self._next_tick_ms is not None and now_ms >= self._next_tick_ms:
            self._remaining_ms = max(0, self._remaining_ms - self._interval_ms)
            events.append(ClockTick(remaining_ms=self._remaining_ms, generation=self._generation))
            if self._remaining_ms == 0:
                self._running = False
                self._expired = True
                self._next_tick_ms = None
                events.append(ClockExpired(generation=self._generation))
                break
            self._next_tick_ms += self._interval_ms
        return events
