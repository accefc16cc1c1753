"""Terminal view of the timer, built with rich."""

from __future__ import annotations

from rich.console import Group, RenderableType
from rich.panel import Panel
from rich.spinner import Spinner
from rich.text import Text

from .engine import Phase, TimerState
from .keys import enabled_bindings
from .log_buffer import LogBufferHandler

PHASE_SPINNERS = {
    Phase.WORK: "dots11",
    Phase.BREAK: "dots2",
}
SPINNER_STYLE = "color(205)"
HELP_SEPARATOR = " • "
LOG_LINES = 5

LEVEL_STYLES = {
    "ERROR": "bold red",
    "WARNING": "yellow",
    "INFO": "green",
    "DEBUG": "dim",
}


def format_remaining(ms: int) -> str:
    """Format milliseconds compactly: 1h2m3s, 24m59s, 5m0s, 59s, 0s."""
    total = max(0, ms) // 1000
    hours, rest = divmod(total, 3600)
    minutes, seconds = divmod(rest, 60)
    if hours:
        return f"{hours}h{minutes}m{seconds}s"
    if minutes:
        return f"{minutes}m{seconds}s"
    return f"{seconds}s"


def describe(state: TimerState) -> str:
    """The status line, e.g. ``Work ends in 24m59s``."""
    return f"{state.phase.label} ends in {format_remaining(state.remaining_ms)}"


def help_text(state: TimerState) -> Text:
    text = Text()
    for i, binding in enumerate(enabled_bindings(state)):
        if i:
            text.append(HELP_SEPARATOR, style="dim")
        text.append(binding.help_key, style="bold")
        text.append(f" {binding.help_desc}", style="dim")
    return text


def log_text(handler: LogBufferHandler, limit: int = LOG_LINES) -> Text:
    text = Text()
    for i, entry in enumerate(handler.recent(limit)):
        if i:
            text.append("\n")
        text.append(f"{entry['timestamp']} ", style="dim")
        text.append(entry["message"], style=LEVEL_STYLES.get(entry["level"], "white"))
    return text


class TimerView:
    """Holds one spinner per phase so the animation survives re-renders."""

    def __init__(self, log_handler: LogBufferHandler | None = None):
        self._log_handler = log_handler
        self._spinners = {
            phase: Spinner(name, style=SPINNER_STYLE)
            for phase, name in PHASE_SPINNERS.items()
        }

    def render(self, state: TimerState) -> RenderableType:
        spinner = self._spinners[state.phase]
        spinner.update(text=Text("  " + describe(state)))

        parts: list[RenderableType] = [spinner, Text(), help_text(state)]
        if self._log_handler is not None:
            parts.extend([Text(), log_text(self._log_handler)])
        return Panel(Group(*parts), padding=(1, 2), border_style="dim", expand=False)
