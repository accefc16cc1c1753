"""Key bindings: raw keypresses to controller commands."""

from __future__ import annotations

from dataclasses import dataclass

from .engine import Command, TimerState

CTRL_C = "\x03"


@dataclass(frozen=True)
class KeyBinding:
    keys: tuple[str, ...]
    help_key: str
    help_desc: str


START = KeyBinding(keys=("s",), help_key="s", help_desc="start")
STOP = KeyBinding(keys=("s",), help_key="s", help_desc="stop")
RESET = KeyBinding(keys=("r",), help_key="r", help_desc="reset")
QUIT = KeyBinding(keys=("q", CTRL_C), help_key="q", help_desc="quit")


def command_for_key(key: str, running: bool) -> Command | None:
    """Map a keypress to a command.

    ``s`` is a single toggle; whether it means start or stop depends on
    ``running``. Unbound keys return None.
    """
    if key != CTRL_C:
        key = key.lower()
    if key in QUIT.keys:
        return Command.QUIT
    if key in RESET.keys:
        return Command.RESET
    if key in START.keys:
        return Command.STOP if running else Command.START
    return None


def enabled_bindings(state: TimerState) -> list[KeyBinding]:
    """Bindings that apply to ``state``, in help order."""
    bindings = []
    if state.start_enabled:
        bindings.append(START)
    if state.stop_enabled:
        bindings.append(STOP)
    if not state.quitting:
        bindings.extend([RESET, QUIT])
    return bindings
