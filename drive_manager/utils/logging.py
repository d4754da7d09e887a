"""Run log helpers: coloured console output plus an append-only log file."""

from __future__ import annotations

import logging
from datetime import datetime
from enum import IntEnum
from pathlib import Path
from typing import Any

from rich.console import Console

LOGGER_NAME = "drive_manager"
LOG_FILE_PREFIX = "google_drive_uninstall"
TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"

SUCCESS = 25
logging.addLevelName(SUCCESS, "SUCCESS")


class LogLevel(IntEnum):
    INFO = logging.INFO
    SUCCESS = SUCCESS
    WARNING = logging.WARNING
    ERROR = logging.ERROR


LEVEL_STYLES: dict[int, str] = {
    LogLevel.SUCCESS: "green",
    LogLevel.WARNING: "yellow",
    LogLevel.ERROR: "red",
}


class RunLogFormatter(logging.Formatter):
    """Format records as ``<timestamp> - <message>`` lines."""

    def __init__(self) -> None:
        super().__init__(fmt="%(asctime)s - %(message)s", datefmt=TIMESTAMP_FORMAT)


class RichConsoleHandler(logging.Handler):
    """Write formatted records to a rich console, styled by level."""

    def __init__(self, console: Console | None = None) -> None:
        super().__init__()
        self.console = console or Console()

    def emit(self, record: logging.LogRecord) -> None:
        try:
            message = self.format(record)
            style = LEVEL_STYLES.get(record.levelno, "")
            if getattr(record, "section", False):
                style = f"bold {style}".strip()
            self.console.print(message, style=style or None, markup=False, highlight=False, soft_wrap=True)
        except Exception:
            self.handleError(record)


def build_log_path(started_at: datetime, log_dir: str | Path = "/tmp") -> Path:
    return Path(log_dir) / f"{LOG_FILE_PREFIX}_{started_at.strftime('%Y%m%d_%H%M%S')}.log"


def configure_run_logger(
    *,
    log_path: Path | None = None,
    console: Console | None = None,
    name: str = LOGGER_NAME,
) -> logging.Logger:
    """Return the run logger, replacing handlers left over from an earlier run."""
    logger = logging.getLogger(name)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    logger.setLevel(logging.INFO)
    formatter = RunLogFormatter()

    console_handler = RichConsoleHandler(console)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_path is not None:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, mode="a", encoding="utf-8")
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger.propagate = False
    return logger


def log_event(
    logger: logging.Logger,
    level: LogLevel,
    message: str,
    **extra: Any,
) -> None:
    logger.log(int(level), message, extra=extra or None)


def log_section(logger: logging.Logger, title: str) -> None:
    log_event(logger, LogLevel.INFO, title, section=True)
