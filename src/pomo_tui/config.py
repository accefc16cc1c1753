"""Configuration management for the timer."""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Mapping

import click
from dotenv import load_dotenv

from .clock import TICK_INTERVAL_MS

DEFAULT_WORK_MINUTES = 25.0
DEFAULT_BREAK_MINUTES = 5.0

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


@dataclass(frozen=True)
class TimerConfig:
    """Settings fixed for the lifetime of the process."""

    work_minutes: float = DEFAULT_WORK_MINUTES
    break_minutes: float = DEFAULT_BREAK_MINUTES
    notify: bool = True
    sound: bool = True
    log_file: Path | None = None
    verbose: bool = False
    interval_ms: int = TICK_INTERVAL_MS

    @property
    def work_ms(self) -> int:
        return round(self.work_minutes * 60_000)

    @property
    def break_ms(self) -> int:
        return round(self.break_minutes * 60_000)

    def with_overrides(self, **overrides) -> TimerConfig:
        """Return a copy with every non-None override applied."""
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})

    def validate(self) -> None:
        """Validate configuration."""
        if self.work_ms <= 0:
            raise click.ClickException(f"Work duration must be positive, got {self.work_minutes} minutes.")
        if self.break_ms <= 0:
            raise click.ClickException(f"Break duration must be positive, got {self.break_minutes} minutes.")


def _env_float(env: Mapping[str, str], name: str, default: float) -> float:
    raw = env.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError:
        raise click.ClickException(f"{name} must be a number of minutes, got {raw!r}.") from None


def _env_bool(env: Mapping[str, str], name: str, default: bool) -> bool:
    raw = env.get(name)
    if raw is None or not raw.strip():
        return default
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise click.ClickException(f"{name} must be true or false, got {raw!r}.")


def load_config(env: Mapping[str, str] | None = None, dotenv_path: Path | None = None) -> TimerConfig:
    """Build a config from ``.env`` and the environment.

    When ``env`` is given it is used as-is and no ``.env`` file is read.
    """
    if env is None:
        load_dotenv(dotenv_path or Path.cwd() / ".env")
        env = os.environ

    log_file = env.get("POMO_LOG_FILE")
    return TimerConfig(
        work_minutes=_env_float(env, "POMO_WORK_MINUTES", DEFAULT_WORK_MINUTES),
        break_minutes=_env_float(env, "POMO_BREAK_MINUTES", DEFAULT_BREAK_MINUTES),
        notify=_env_bool(env, "POMO_NOTIFY", True),
        sound=_env_bool(env, "POMO_SOUND", True),
        log_file=Path(log_file).expanduser() if log_file else None,
    )
