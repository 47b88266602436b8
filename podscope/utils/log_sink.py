"""File logging for a TUI session.

The terminal belongs to Textual, so diagnostics go to a dated file under
``~/.podscope/logs``.
"""

from __future__ import annotations

import logging
from datetime import date
from pathlib import Path

from podscope.constants.values import APP_DIR_NAME, LOGGER_NAME

LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"


class LogSinkError(Exception):
    """Raised when the log directory or file cannot be created."""


class LogSink:
    """Attaches a file handler to the ``podscope`` logger between open and close."""

    def __init__(self, directory: Path | None = None, level: str = "INFO") -> None:
        self.directory = directory or Path.home() / APP_DIR_NAME / "logs"
        self.level = level.upper()
        self.path: Path | None = None
        self._handler: logging.FileHandler | None = None

    @property
    def logger(self) -> logging.Logger:
        return logging.getLogger(LOGGER_NAME)

    def open(self) -> logging.Logger:
        if self._handler is not None:
            return self.logger
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            path = self.directory / f"{LOGGER_NAME}-{date.today().isoformat()}.log"
            handler = logging.FileHandler(path, encoding="utf-8")
        except OSError as exc:
            raise LogSinkError(f"cannot create log file in {self.directory}: {exc}") from exc
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger = self.logger
        logger.setLevel(getattr(logging, self.level, logging.INFO))
        logger.addHandler(handler)
        self._handler = handler
        self.path = path
        logger.info("Logging to %s", path)
        return logger

    def close(self) -> None:
        if self._handler is None:
            return
        self.logger.removeHandler(self._handler)
        self._handler.close()
        self._handler = None

    def __enter__(self) -> logging.Logger:
        return self.open()

    def __exit__(self, *exc_info: object) -> None:
        self.close()
