"""Platform-aware desktop notifications and chimes.

Everything here is best effort: commands are spawned detached and never
waited on, and a missing binary or spawn failure is logged and dropped.
"""

from __future__ import annotations

import logging
import platform
import shutil
import subprocess
from typing import Callable, Iterable, Sequence

from .engine import Effect, Notify, PlaySound, Sound

logger = logging.getLogger(__name__)

MACOS_SOUNDS: dict[Sound, str] = {
    Sound.BREAK_CHIME: "/System/Library/Sounds/Glass.aiff",
    Sound.WORK_CHIME: "/System/Library/Sounds/Submarine.aiff",
}

FREEDESKTOP_SOUNDS: dict[Sound, str] = {
    Sound.BREAK_CHIME: "/usr/share/sounds/freedesktop/stereo/complete.oga",
    Sound.WORK_CHIME: "/usr/share/sounds/freedesktop/stereo/bell.oga",
}


def _applescript_quote(value: str) -> str:
    return '"' + value.replace("\\", "\\\\").replace('"', '\\"') + '"'


def build_notify_command(title: str, body: str, system: str | None = None) -> list[str] | None:
    """Return the argv that shows a desktop notification, or None if unsupported."""

    system = system or platform.system()
    if system == "Darwin":
        script = f"display notification {_applescript_quote(body)} with title {_applescript_quote(title)}"
        return ["osascript", "-e", script]
    if system == "Linux":
        return ["notify-send", title, body]
    return None


def build_sound_command(sound: Sound, system: str | None = None) -> list[str] | None:
    """Return the argv that plays ``sound``, or None if unsupported."""

    system = system or platform.system()
    if system == "Darwin":
        return ["afplay", MACOS_SOUNDS[sound]]
    if system == "Linux":
        return ["paplay", FREEDESKTOP_SOUNDS[sound]]
    return None


def spawn_detached(command: Sequence[str]) -> bool:
    """Start ``command`` without waiting for it. Returns False if it could not start."""

    if shutil.which(command[0]) is None:
        logger.debug("%s not found, skipping", command[0])
        return False
    try:
        subprocess.Popen(
            list(command),
            stdin=subprocess.DEVNULL,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            start_new_session=True,
        )
    except OSError as exc:
        logger.debug("failed to spawn %s: %s", command[0], exc)
        return False
    logger.debug("spawned %s", command[0])
    return True


class EffectRunner:
    """Executes effect requests from the phase controller."""

    def __init__(
        self,
        notify_enabled: bool = True,
        sound_enabled: bool = True,
        bell: Callable[[], None] | None = None,
        system: str | None = None,
    ):
        self.notify_enabled = notify_enabled
        self.sound_enabled = sound_enabled
        self._bell = bell
        self._system = system or platform.system()

    def run(self, effects: Iterable[Effect]) -> None:
        for effect in effects:
            if isinstance(effect, Notify):
                self.notify(effect.title, effect.body)
            elif isinstance(effect, PlaySound):
                self.play_sound(effect.sound)

    def notify(self, title: str, body: str) -> None:
        if not self.notify_enabled:
            return
        logger.info("notify: %s", title)
        command = build_notify_command(title, body, self._system)
        if command is None or not spawn_detached(command):
            self._ring()

    def play_sound(self, sound: Sound) -> None:
        if not self.sound_enabled:
            return
        command = build_sound_command(sound, self._system)
        if command is not None:
            spawn_detached(command)

    def _ring(self) -> None:
        if self._bell is None:
            return
        try:
            self._bell()
        except OSError as exc:
            logger.debug("terminal bell failed: %s", exc)
