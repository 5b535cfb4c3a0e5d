# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Structured JSON logger for fcstage.

Every log entry is a single JSON line carrying a UTC timestamp, the level,
the logger name and the message, plus whatever the caller passed in `extra`.

Log lines go to stderr. Stdout is reserved for the completion banner and the
--override_repository flag, which users copy straight into their Bazel
invocation, so nothing else may be written there.

The JSON structure looks like:
  {"ts": "2026-...", "level": "INFO", "module": "fcstage.build.runner", "msg": "Build finished", ...}
"""

import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

# Attributes every LogRecord carries. Anything else on the record came from
# the caller's `extra` mapping.
_RECORD_ATTRS: frozenset[str] = frozenset(
    {
        "name",
        "msg",
        "args",
        "created",
        "relativeCreated",
        "exc_info",
        "exc_text",
        "stack_info",
        "lineno",
        "funcName",
        "pathname",
        "filename",
        "module",
        "levelno",
        "levelname",
        "processName",
        "process",
        "threadName",
        "thread",
        "message",
        "msecs",
        "taskName",
    }
)

_VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


class JsonFormatter(logging.Formatter):
    """
    Formats log records as single-line JSON objects.

    Mandatory fields:
      ts     : ISO 8601 UTC timestamp
      level  : log level name
      module : the logger name
      msg    : the formatted message

    Exceptions attached with exc_info are rendered into an `exc` field so a
    failing copy or build still produces exactly one line.
    """

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, object] = {
            "ts": datetime.now(tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "module": record.name,
            "msg": record.getMessage(),
        }

        for key, value in record.__dict__.items():
            if key not in _RECORD_ATTRS and not key.startswith("_"):
                entry[key] = value

        if record.exc_info:
            entry["exc"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str)


def _resolve_log_level(level_name: str) -> int:
    """Turn a level name string into the corresponding logging constant."""
    upper = level_name.upper()
    if upper not in _VALID_LOG_LEVELS:
        raise ValueError(
            f"Invalid log level '{level_name}'. Must be one of: {', '.join(sorted(_VALID_LOG_LEVELS))}"
        )
    return getattr(logging, upper)


class StderrHandler(logging.StreamHandler):
    """StreamHandler that writes to whatever sys.stderr is when a record is emitted."""

    def __init__(self) -> None:
        super().__init__()

    @property
    def stream(self):  # type: ignore[override]
        return sys.stderr

    @stream.setter
    def stream(self, value: object) -> None:
        pass


# Set once the CLI knows the configured level and log file. Loggers created
# after that (lazily imported modules) pick both up from get_logger.
_package_level: Optional[int] = None
_package_file_handler: Optional[logging.FileHandler] = None


def _is_package_logger(name: str) -> bool:
    return name == "fcstage" or name.startswith("fcstage.")


def _package_loggers() -> list[logging.Logger]:
    return [
        logging.getLogger(name)
        for name in list(logging.Logger.manager.loggerDict)
        if _is_package_logger(name)
    ]


def get_logger(
    name: str,
    log_level: Optional[str] = None,
    log_file: Optional[Path] = None,
) -> logging.Logger:
    """
    Create a structured JSON logger.

    Modules call this once at import time with __name__. The CLI calls it
    again per command with the user's chosen level, which re-levels the
    existing handlers instead of stacking new ones.

    Args:
        name: Logger name, typically __name__ of the calling module.
        log_level: One of DEBUG, INFO, WARNING, ERROR, CRITICAL. Defaults to
                   the level last given to set_package_level, else INFO.
        log_file: Optional path to a log file. If provided, logs go to both
                  stderr and the file.

    Returns:
        A configured logging.Logger that outputs structured JSON.
    """
    logger = logging.getLogger(name)
    if log_level is not None:
        level = _resolve_log_level(log_level)
    elif _package_level is not None:
        level = _package_level
    else:
        level = logging.INFO
    logger.setLevel(level)

    if (
        _package_file_handler is not None
        and _is_package_logger(name)
        and _package_file_handler not in logger.handlers
    ):
        logger.addHandler(_package_file_handler)

    if any(not isinstance(handler, logging.FileHandler) for handler in logger.handlers):
        for handler in logger.handlers:
            if handler is not _package_file_handler:
                handler.setLevel(level)
        return logger

    formatter = JsonFormatter()

    stream_handler = StderrHandler()
    stream_handler.setLevel(level)
    stream_handler.setFormatter(formatter)
    logger.addHandler(stream_handler)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(str(log_file), encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger.propagate = False

    return logger


def set_package_level(log_level: str) -> None:
    """
    Re-level every fcstage logger that already exists.

    Module loggers are created at import time with the default level; the
    CLI calls this once the user's --log-level is known.
    """
    global _package_level
    level = _resolve_log_level(log_level)
    _package_level = level
    for logger in _package_loggers():
        logger.setLevel(level)
        for handler in logger.handlers:
            handler.setLevel(level)


def set_package_file(log_file: Optional[Path]) -> None:
    """
    Mirror every fcstage logger into one log file, or stop doing so.

    The handler is shared, so the file gets the build, staging and CLI lines
    in the order they happened. Passing None detaches and closes it.
    """
    global _package_file_handler
    loggers = _package_loggers()

    if _package_file_handler is not None:
        for logger in loggers:
            logger.removeHandler(_package_file_handler)
        _package_file_handler.close()
        _package_file_handler = None

    if log_file is None:
        return

    log_file.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(str(log_file), encoding="utf-8")
    handler.setFormatter(JsonFormatter())
    if _package_level is not None:
        handler.setLevel(_package_level)
    for logger in loggers:
        logger.addHandler(handler)
    _package_file_handler = handler
