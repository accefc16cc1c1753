"""In-memory log capture for the live display."""

from __future__ import annotations

import logging
from collections import deque
from datetime import datetime
from pathlib import Path
from typing import Deque

LOGGER_NAME = "pomo_tui"


class LogBufferHandler(logging.Handler):
    """Custom logging handler that captures logs to a circular buffer."""

    def __init__(self, maxlen: int = 100):
        super().__init__()
        self.buffer: Deque[dict] = deque(maxlen=maxlen)

    def emit(self, record: logging.LogRecord) -> None:
        """Capture log record to buffer with timestamp, level, and message."""
        try:
            self.buffer.append({
                "timestamp": datetime.fromtimestamp(record.created).strftime("%H:%M:%S"),
                "level": record.levelname,
                "message": self.format(record),
            })
        except Exception:
            self.handleError(record)

    def recent(self, limit: int) -> list[dict]:
        if limit <= 0:
            return []
        return list(self.buffer)[-limit:]


def configure_logging(verbose: bool = False, log_file: Path | None = None) -> LogBufferHandler:
    """Attach the buffer handler (and optional file handler) to the package logger.

    Nothing is written to the console; the live display owns the terminal.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    logger.propagate = False

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    buffer_handler = LogBufferHandler()
    buffer_handler.setLevel(logging.DEBUG)
    buffer_handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(buffer_handler)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
        logger.addHandler(file_handler)

    return buffer_handler
