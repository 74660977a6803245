"""StudyFinder logging.

Console output carries an abbreviated level and the emitting thread, since
fan-out queries log from worker threads. Each CLI action can mirror its log
to ``<log_dir>/<action>/studyfinder_<YYYYmmdd_HHMMSS>.log``.
"""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path
from typing import Final

LOG_FORMAT: Final[str] = "%(asctime)s [%(levelabbr)s] %(threadName)s: %(message)s"
LOG_DATE_FORMAT: Final[str] = "%Y-%m-%d %H:%M:%S"

_LEVEL_ABBREV: Final[dict[int, str]] = {
    logging.DEBUG: "DEBG",
    logging.INFO: "INFO",
    logging.WARNING: "WARN",
    logging.ERROR: "ERRO",
    logging.CRITICAL: "CRIT",
}


class _AbbrevLevelFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:  # noqa: A003 - record is stdlib name
        record.levelabbr = _LEVEL_ABBREV.get(record.levelno, record.levelname[:4])
        return super().format(record)


log = logging.getLogger("StudyFinder")


def log_file_path(log_dir: str | Path, action: str, now: datetime | None = None) -> Path:
    """Return the per-run log file path for a CLI action."""
    stamp = (now or datetime.now()).strftime("%Y%m%d_%H%M%S")
    return Path(log_dir or "log") / action / f"studyfinder_{stamp}.log"


def configure_logging(
    *,
    level: str = "INFO",
    action: str | None = None,
    log_to_file: bool = False,
    log_dir: str = "log",
) -> Path | None:
    """Install console (and optionally file) handlers on the package logger.

    Args:
        level: Console logging level name.
        action: CLI action name; required for the file mirror.
        log_to_file: Whether to mirror DEBUG-and-above records to a file.
        log_dir: Base directory for log files.

    Returns:
        Path of the log file, or None when no file handler was installed.
    """
    resolved_level = getattr(logging, (level or "INFO").upper(), logging.INFO)
    formatter = _AbbrevLevelFormatter(fmt=LOG_FORMAT, datefmt=LOG_DATE_FORMAT)

    for handler in list(log.handlers):
        log.removeHandler(handler)
        handler.close()

    stream_handler = logging.StreamHandler()
    stream_handler.setLevel(resolved_level)
    stream_handler.setFormatter(formatter)
    log.addHandler(stream_handler)

    path: Path | None = None
    if log_to_file and action:
        path = log_file_path(log_dir, action)
        path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(path, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(formatter)
        log.addHandler(file_handler)

    log.setLevel(min(logging.DEBUG, resolved_level))
    log.propagate = False
    return path
