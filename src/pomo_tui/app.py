"""Host shell: terminal input, live display and the serial event loop."""

from __future__ import annotations

import logging
import queue
import select
import sys
import termios
import threading
import time
import tty
from typing import IO

from rich.console import Console
from rich.live import Live

from .config import TimerConfig
from .effects import EffectRunner
from .engine import Command, Effect, PhaseController
from .keys import command_for_key
from .log_buffer import LogBufferHandler
from .render import TimerView

logger = logging.getLogger(__name__)

# Upper bound on how long the loop blocks waiting for a key.
MAX_WAIT_S = 0.25


class HostInitError(RuntimeError):
    """The terminal or display could not be set up."""


def now_ms() -> int:
    return time.monotonic_ns() // 1_000_000


class KeyReader:
    """Puts the terminal in cbreak mode and feeds keypresses into a queue.

    Reading happens on a daemon thread; the thread only ever touches the
    queue, never controller state.
    """

    def __init__(self, sink: queue.Queue, stream: IO[str] | None = None):
        self._sink = sink
        self._stream = stream if stream is not None else sys.stdin
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None
        self._fd: int | None = None
        self._saved_settings = None

    def __enter__(self) -> KeyReader:
        try:
            self._fd = self._stream.fileno()
            self._saved_settings = termios.tcgetattr(self._fd)
            tty.setcbreak(self._fd)
        except (OSError, ValueError, termios.error) as exc:
            raise HostInitError(f"cannot read keys from the terminal ({exc})") from exc

        self._thread = threading.Thread(target=self._listen, name="key-reader", daemon=True)
        self._thread.start()
        return self

    def __exit__(self, *exc_info) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout=0.5)
        if self._saved_settings is not None:
            try:
                termios.tcsetattr(self._fd, termios.TCSADRAIN, self._saved_settings)
            except termios.error as exc:
                logger.warning("could not restore terminal settings: %s", exc)

    def _listen(self) -> None:
        while not self._stop.is_set():
            if select.select([self._stream], [], [], 0.05)[0]:
                key = self._stream.read(1)
                if not key:
                    break
                if key == "\x1b":
                    # Swallow the rest of an escape sequence (arrow keys etc).
                    if select.select([self._stream], [], [], 0.05)[0]:
                        self._stream.read(2)
                    continue
                self._sink.put(key)


class HostLoop:
    """Feeds keys and clock events to the controller, one at a time."""

    def __init__(self, controller: PhaseController, runner: EffectRunner):
        self.controller = controller
        self.runner = runner

    def step(self, key: str | None, now: int) -> list[Effect]:
        """Process at most one key plus every due clock event, then run effects."""
        effects: list[Effect] = []
        if key is not None:
            command = command_for_key(key, self.controller.running)
            if command is not None:
                effects.extend(self.controller.handle(command, now))
        effects.extend(self.controller.poll(now))
        self.runner.run(effects)
        return effects

    def wait_timeout(self, now: int) -> float:
        """Seconds to block for a key before the next clock deadline."""
        deadline = self.controller.next_deadline_ms
        if deadline is None:
            return MAX_WAIT_S
        return min(MAX_WAIT_S, max(0.0, (deadline - now) / 1000))


def run(config: TimerConfig, console: Console | None = None, log_handler: LogBufferHandler | None = None) -> None:
    """Run the interactive timer until the user quits.

    Raises HostInitError if the terminal cannot be prepared.
    """
    console = console or Console()
    if not console.is_terminal:
        raise HostInitError("output is not a terminal")

    controller = PhaseController(
        work_ms=config.work_ms,
        break_ms=config.break_ms,
        interval_ms=config.interval_ms,
    )
    runner = EffectRunner(notify_enabled=config.notify, sound_enabled=config.sound, bell=console.bell)
    view = TimerView(log_handler if config.verbose else None)
    loop = HostLoop(controller, runner)
    keys: queue.Queue[str] = queue.Queue()

    logger.info("starting: work %dms, break %dms", config.work_ms, config.break_ms)

    with KeyReader(keys):
        with Live(view.render(controller.state), console=console, refresh_per_second=10, screen=True) as live:
            try:
                while not controller.quitting:
                    try:
                        key = keys.get(timeout=loop.wait_timeout(now_ms()))
                    except queue.Empty:
                        key = None
                    loop.step(key, now_ms())
                    live.update(view.render(controller.state))
            except KeyboardInterrupt:
                controller.handle(Command.QUIT, now_ms())

    logger.info("quit")
