import io
import logging

import pytest
from rich.console import Console

from pomo_tui.engine import Phase, TimerState
from pomo_tui.log_buffer import LogBufferHandler
from pomo_tui.render import TimerView, describe, format_remaining, help_text, log_text


@pytest.mark.parametrize(
    ("ms", "expected"),
    [
        (0, "0s"),
        (999, "0s"),
        (59_000, "59s"),
        (5 * 60_000, "5m0s"),
        (24 * 60_000 + 59_000, "24m59s"),
        (3_723_000, "1h2m3s"),
        (-5000, "0s"),
    ],
)
def test_format_remaining(ms: int, expected: str) -> None:
    assert format_remaining(ms) == expected


def test_describe_work() -> None:
    assert describe(TimerState(Phase.WORK, 25 * 60_000, running=False)) == "Work ends in 25m0s"


def test_describe_break() -> None:
    assert describe(TimerState(Phase.BREAK, 4 * 60_000 + 59_000, running=True)) == "Break ends in 4m59s"


def test_help_text_idle() -> None:
    text = help_text(TimerState(Phase.WORK, 1000, running=False))
    assert text.plain == "s start • r reset • q quit"


def test_help_text_running() -> None:
    text = help_text(TimerState(Phase.WORK, 1000, running=True))
    assert text.plain == "s stop • r reset • q quit"


def _render_plain(renderable) -> str:
    console = Console(file=io.StringIO(), width=80, record=True, color_system=None)
    console.print(renderable)
    return console.export_text()


def test_view_contains_status_and_help() -> None:
    output = _render_plain(TimerView().render(TimerState(Phase.BREAK, 60_000, running=True)))
    assert "Break ends in 1m0s" in output
    assert "s stop" in output


def test_view_shows_recent_logs() -> None:
    handler = LogBufferHandler()
    handler.setFormatter(logging.Formatter("%(message)s"))
    handler.emit(logging.LogRecord("pomo_tui", logging.INFO, __file__, 1, "Work phase over", None, None))

    output = _render_plain(TimerView(handler).render(TimerState(Phase.WORK, 60_000, running=False)))
    assert "Work phase over" in output


def test_log_text_limits_lines() -> None:
    handler = LogBufferHandler()
    for i in range(10):
        handler.emit(logging.LogRecord("pomo_tui", logging.DEBUG, __file__, 1, f"line {i}", None, None))
    assert log_text(handler, limit=3).plain.count("\n") == 2
    assert "line 9" in log_text(handler, limit=3).plain


def test_view_is_framed_in_a_panel() -> None:
    lines = _render_plain(TimerView().render(TimerState(Phase.WORK, 60_000, running=False))).splitlines()
    assert lines[0].startswith("╭")
    assert lines[-1].startswith("╰")
