"""Terminal Pomodoro timer alternating work and break phases."""

from .clock import Clock, ClockExpired, ClockTick
from .engine import (
    Command,
    ControllerState,
    Notify,
    Phase,
    PhaseController,
    PlaySound,
    Sound,
    TimerState,
)

__all__ = [
    "Clock",
    "ClockExpired",
    "ClockTick",
    "Command",
    "ControllerState",
    "Notify",
    "Phase",
    "PhaseController",
    "PlaySound",
    "Sound",
    "TimerState",
]
