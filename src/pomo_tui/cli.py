"""Command-line entry point for the Pomodoro timer.

Usage:
    pomo                        # 25 minutes work / 5 minutes break
    pomo --work 50 --break 10   # custom phase lengths
    pomo --no-sound -v          # silent, with a live log tail

Keys: s start/stop, r reset, q quit.
"""

from __future__ import annotations

import sys
from pathlib import Path

import click
from rich.console import Console

from . import app
from .config import load_config
from .log_buffer import configure_logging

console = Console()


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.option(
    "--work",
    "work_minutes",
    type=click.FloatRange(min=0, min_open=True),
    help="Work phase length in minutes (env POMO_WORK_MINUTES, default 25).",
)
@click.option(
    "--break",
    "break_minutes",
    type=click.FloatRange(min=0, min_open=True),
    help="Break phase length in minutes (env POMO_BREAK_MINUTES, default 5).",
)
@click.option("--no-notify", is_flag=True, help="Disable desktop notifications.")
@click.option("--no-sound", is_flag=True, help="Disable phase chimes.")
@click.option(
    "--log-file",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Also write logs to this file (env POMO_LOG_FILE).",
)
@click.option("--verbose", "-v", is_flag=True, help="Show debug logs under the timer.")
def main(
    work_minutes: float | None,
    break_minutes: float | None,
    no_notify: bool,
    no_sound: bool,
    log_file: Path | None,
    verbose: bool,
) -> None:
    """Alternate work and break countdowns in the terminal."""

    config = load_config().with_overrides(
        work_minutes=work_minutes,
        break_minutes=break_minutes,
        notify=False if no_notify else None,
        sound=False if no_sound else None,
        log_file=log_file,
        verbose=verbose or None,
    )
    config.validate()

    log_handler = configure_logging(verbose=config.verbose, log_file=config.log_file)

    try:
        app.run(config, console=console, log_handler=log_handler)
    except app.HostInitError as exc:
        console.print(f"[red]Uh oh, we encountered an error:[/red] {exc}")
        sys.exit(1)


if __name__ == "__main__":  # pragma: no cover
    main()
