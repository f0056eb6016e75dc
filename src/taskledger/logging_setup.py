# src/taskledger/logging_setup.py

"""
Logging for the console app.

Three handlers:
- console (stderr): taskledger logs; third-party and py.warnings only at ERROR+
- taskledger.log:   everything at DEBUG, including task events
- events.log:       the task-event audit trail only, one line per committed mutation
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

AUDIT_LOGGER = "taskledger.tasks.events"

_LOG_FORMAT = "%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s"
_AUDIT_FORMAT = "%(asctime)s %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _is_audit(name: str) -> bool:
    return name == AUDIT_LOGGER or name.startswith(AUDIT_LOGGER + ".")


class _ConsoleFilter(logging.Filter):
    """Keep the interactive console readable; events are shown by command replies."""

    def filter(self, record: logging.LogRecord) -> bool:
        if _is_audit(record.name):
            return record.levelno >= logging.WARNING
        if record.name.startswith("taskledger."):
            return True
        return record.levelno >= logging.ERROR


def _file_handler(path: Path, level: int, fmt: str) -> logging.FileHandler:
    handler = logging.FileHandler(str(path), encoding="utf-8")
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt=fmt, datefmt=_DATE_FORMAT))
    return handler


def _replace_handlers(logger: logging.Logger, *handlers: logging.Handler) -> None:
    for h in list(logger.handlers):
        logger.removeHandler(h)
    for h in handlers:
        logger.addHandler(h)


def setup_logging(
    *,
    log_dir: str | Path = ".local/taskledger",
    console_level: int = logging.INFO,
    file_level: int = logging.DEBUG,
) -> None:
    """Configure root + audit logging. Safe to call again (handlers are replaced)."""
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(console_level)
    console.setFormatter(logging.Formatter(fmt=_LOG_FORMAT, datefmt=_DATE_FORMAT))
    console.addFilter(_ConsoleFilter())

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    _replace_handlers(root, console, _file_handler(log_dir / "taskledger.log", file_level, _LOG_FORMAT))

    # Audit records still propagate to root, so taskledger.log stays complete.
    audit = logging.getLogger(AUDIT_LOGGER)
    audit.setLevel(logging.INFO)
    _replace_handlers(audit, _file_handler(log_dir / "events.log", logging.INFO, _AUDIT_FORMAT))

    logging.captureWarnings(True)
