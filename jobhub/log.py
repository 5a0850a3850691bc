"""Logging for the dashboard, the CLI and the tests.

Console output always; a ``logs/jobhub.log`` file rotated at midnight
unless ``JOBHUB_LOG_FILE`` is false. ``JOBHUB_LOG_LEVEL`` (or the older
``LOG_LEVEL``) picks the level.
"""
from __future__ import annotations

import logging
import os
import sys
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path

_LOG_DIR = Path(os.environ.get("JOBHUB_LOG_DIR", Path(__file__).resolve().parent.parent / "logs"))
_LOG_FILE = "jobhub.log"
_FORMAT = "%(asctime)s  %(levelname)-7s  [%(name)s:%(lineno)d]  %(message)s"
_DATE_FMT = "%H:%M:%S"
_FILE_DATE_FMT = "%Y-%m-%d %H:%M:%S"
_BACKUP_DAYS = 7

# Chatty third-party loggers kept at WARNING so jobhub output stays readable.
_NOISY = ("urllib3", "watchdog", "fsevents")

_configured = False


def log_level() -> int:
    name = os.environ.get("JOBHUB_LOG_LEVEL") or os.environ.get("LOG_LEVEL") or "INFO"
    level = logging.getLevelName(name.strip().upper())
    return level if isinstance(level, int) else logging.INFO


def file_logging_enabled() -> bool:
    return os.environ.get("JOBHUB_LOG_FILE", "true").strip().lower() in ("1", "true", "yes", "on")


def get_logger(name: str) -> logging.Logger:
    """Return a named logger, installing the jobhub handlers on first use."""
    global _configured
    if not _configured:
        _configure()
        _configured = True
    return logging.getLogger(name)


def _configure() -> None:
    level = log_level()
    root = logging.getLogger()
    root.setLevel(min(level, logging.DEBUG) if file_logging_enabled() else level)

    console = logging.StreamHandler(sys.stdout)
    console.setLevel(level)
    console.setFormatter(logging.Formatter(_FORMAT, datefmt=_DATE_FMT))
    root.addHandler(console)

    for name in _NOISY:
        logging.getLogger(name).setLevel(logging.WARNING)

    if not file_logging_enabled():
        return
    try:
        _LOG_DIR.mkdir(parents=True, exist_ok=True)
        fh = TimedRotatingFileHandler(
            _LOG_DIR / _LOG_FILE, when="midnight", backupCount=_BACKUP_DAYS, encoding="utf-8"
        )
    except OSError as exc:
        root.warning("File logging disabled, cannot write to %s: %s", _LOG_DIR, exc)
        return
    fh.setLevel(logging.DEBUG)
    fh.setFormatter(logging.Formatter(_FORMAT, datefmt=_FILE_DATE_FMT))
    root.addHandler(fh)
