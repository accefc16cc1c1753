"""Phase controller: the work/break state machine.

Pure computation. Commands and clock events go in through ``handle()``,
and side effects come back out as values for the host to run. Nothing here
touches the terminal, the OS or the wall clock.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

from .clock import TICK_INTERVAL_MS, Clock, ClockEvent, ClockExpired, ClockTick

logger = logging.getLogger(__name__)

DEFAULT_WORK_MS = 25 * 60 * 1000
DEFAULT_BREAK_MS = 5 * 60 * 1000


class Phase(str, Enum):
    WORK = "work"
    BREAK = "break"

    @property
    def label(self) -> str:
        return self.value.title()

    @property
    def next(self) -> Phase:
        return Phase.BREAK if self is Phase.WORK else Phase.WORK


class ControllerState(str, Enum):
    WORK_IDLE = "work_idle"
    WORK_RUNNING = "work_running"
    BREAK_IDLE = "break_idle"
    BREAK_RUNNING = "break_running"
    QUITTING = "quitting"


class Command(str, Enum):
    START = "start"
    STOP = "stop"
    RESET = "reset"
    QUIT = "quit"


class Sound(str, Enum):
    WORK_CHIME = "work_chime"
    BREAK_CHIME = "break_chime"


@dataclass(frozen=True)
class Notify:
    title: str
    body: str


@dataclass(frozen=True)
class PlaySound:
    sound: Sound


Effect = Notify | PlaySound
Event = Command | ClockEvent

# Fired once on entering the keyed phase through a timeout.
PHASE_ENTRY_EFFECTS: dict[Phase, tuple[Effect, ...]] = {
    Phase.BREAK: (Notify("Break time!", "Time to stretch and relax"), PlaySound(Sound.BREAK_CHIME)),
    Phase.WORK: (Notify("Back to work!", "Sorry!"), PlaySound(Sound.WORK_CHIME)),
}


@dataclass(frozen=True)
class TimerState:
    """Read-only snapshot of the controller, used for rendering."""

    phase: Phase
    remaining_ms: int
    running: bool
    quitting: bool = False

    @property
    def state(self) -> ControllerState:
        if self.quitting:
            return ControllerState.QUITTING
        if self.phase is Phase.WORK:
            return ControllerState.WORK_RUNNING if self.running else ControllerState.WORK_IDLE
        return ControllerState.BREAK_RUNNING if self.running else ControllerState.BREAK_IDLE

    @property
    def start_enabled(self) -> bool:
        return not self.quitting and not self.running

    @property
    def stop_enabled(self) -> bool:
        return not self.quitting and self.running


class PhaseController:
    """Owns phase, remaining time and the running flag.

    Every transition happens in ``handle()``, one event at a time. The
    return value lists the effects the transition requests; they are
    one-shot and the controller never learns whether they succeeded.
    """

    def __init__(
        self,
        work_ms: int = DEFAULT_WORK_MS,
        break_ms: int = DEFAULT_BREAK_MS,
        interval_ms: int = TICK_INTERVAL_MS,
    ):
        if work_ms <= 0 or break_ms <= 0:
            raise ValueError("phase durations must be positive")
        self._durations: dict[Phase, int] = {Phase.WORK: int(work_ms), Phase.BREAK: int(break_ms)}
        self._phase = Phase.WORK
        self._clock = Clock(self._durations[Phase.WORK], interval_ms=interval_ms)
        self._remaining_ms = self._clock.remaining_ms
        self._running = False
        self._quitting = False

    # ---- Read-only properties ----

    @property
    def phase(self) -> Phase:
        return self._phase

    @property
    def remaining_ms(self) -> int:
        return self._remaining_ms

    @property
    def running(self) -> bool:
        return self._running

    @property
    def quitting(self) -> bool:
        return self._quitting

    @property
    def generation(self) -> int:
        return self._clock.generation

    @property
    def next_deadline_ms(self) -> int | None:
        return None if self._quitting else self._clock.next_deadline_ms

    def duration_ms(self, phase: Phase) -> int:
        return self._durations[phase]

    @property
    def state(self) -> TimerState:
        return TimerState(
            phase=self._phase,
            remaining_ms=self._remaining_ms,
            running=self.running,
            quitting=self._quitting,
        )

    # ---- Core methods ----

    def handle(self, event: Event, now_ms: int) -> list[Effect]:
        """Apply one command or clock event. Returns the requested effects."""
        if self._quitting:
            return []

        if isinstance(event, Command):
            return self._handle_command(event, now_ms)
        if isinstance(event, ClockTick):
            self._handle_tick(event)
            return []
        if isinstance(event, ClockExpired):
            return self._handle_expiry(event, now_ms)
        raise TypeError(f"unsupported event: {event!r}")

    def poll(self, now_ms: int) -> list[Effect]:
        """Drain due clock events through ``handle()``."""
        effects: list[Effect] = []
        for event in self._clock.poll(now_ms):
            effects.extend(self.handle(event, now_ms))
        return effects

    # ---- Internal ----

    def _handle_command(self, command: Command, now_ms: int) -> list[Effect]:
        logger.debug("command %s in %s", command.value, self.state.state.value)

        if command is Command.QUIT:
            self._clock.stop()
            self._running = False
            self._quitting = True
        elif command is Command.START:
            if not self._running:
                self._clock.start(now_ms)
                self._running = True
        elif command is Command.STOP:
            if self._running:
                self._clock.stop()
                self._running = False
        elif command is Command.RESET:
            self._arm(self._phase)
            if self._running:
                self._clock.start(now_ms)
        return []

    def _handle_tick(self, tick: ClockTick) -> None:
        if not self._running or tick.generation != self._clock.generation:
            logger.debug("dropping stale tick from generation %d", tick.generation)
            return
        # Remaining only ever counts down, and never below zero.
        self._remaining_ms = min(self._remaining_ms, max(0, tick.remaining_ms))

    def _handle_expiry(self, expired: ClockExpired, now_ms: int) -> list[Effect]:
        if not self._running or expired.generation != self._clock.generation or self._remaining_ms != 0:
            logger.debug("dropping stale expiry from generation %d", expired.generation)
            return []

        new_phase = self._phase.next
        logger.info("%s phase over, entering %s", self._phase.label, new_phase.label.lower())
        self._phase = new_phase
        self._arm(new_phase)
        self._clock.start(now_ms)
        return list(PHASE_ENTRY_EFFECTS[new_phase])

    def _arm(self, phase: Phase) -> None:
        self._clock.arm(self._durations[phase])
        self._remaining_ms = self._clock.remaining_ms
