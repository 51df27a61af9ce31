"""
Log output for applications embedding xrpl_core.

The library only creates ``xrpl_core.*`` module loggers and never logs
entropy, seeds or private key bytes; nothing is printed until an
application calls ``setup_logging``.  Console output is either:

  - ``human``: ``12:00:01 INFO    xrpl_core.keys | derived ed25519 key``,
    level names coloured when stderr is a terminal
  - ``json``: one object per line with sorted keys
    ``error`` (only with a traceback), ``level``, ``logger``, ``message``,
    ``time``

A log file, when given, always receives the JSON form.

    from xrpl_core.logging_config import setup_logging
    setup_logging(level="DEBUG", fmt="json", log_file="logs/xrpl_core.log")
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from xrpl_core.config import LoggingConfig

LIBRARY_LOGGER = "xrpl_core"
FORMATS = ("human", "json")

_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


class _JSONFormatter(logging.Formatter):
    """Newline-delimited JSON for log shippers."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "time": datetime.fromtimestamp(record.created, tz=timezone.utc)
                            .isoformat(timespec="milliseconds"),
            "level": record.levelname.lower(),
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info and record.exc_info[0] is not None:
            entry["error"] = self.formatException(record.exc_info)
        return json.dumps(entry, sort_keys=True, default=str)


class _HumanFormatter(logging.Formatter):
    """``asctime level logger | message`` with optional ANSI level colours."""

    LEVEL_COLOURS = {
        logging.DEBUG: "\033[2m",
        logging.INFO: "\033[34m",
        logging.WARNING: "\033[33m",
        logging.ERROR: "\033[31m",
        logging.CRITICAL: "\033[41;97m",
    }

    def __init__(self, colour: bool = False):
        super().__init__("%(asctime)s %(levelname)-7s %(name)s | %(message)s", "%H:%M:%S")
        self.colour = colour

    def formatMessage(self, record: logging.LogRecord) -> str:
        line = super().formatMessage(record)
        if not self.colour:
            return line
        padded = f"{record.levelname:<7}"
        colour = self.LEVEL_COLOURS.get(record.levelno, "")
        return line.replace(padded, f"{colour}{padded}\033[0m", 1)


def _resolve_level(level: str | int) -> int:
    if isinstance(level, int):
        return level
    try:
        return _LEVELS[level.upper()]
    except KeyError:
        raise ValueError(
            f"Unknown log level {level!r}; expected one of {', '.join(_LEVELS)}"
        ) from None


def setup_logging(
    level: str | int = "INFO",
    fmt: str = "human",
    log_file: Optional[str] = None,
) -> logging.Logger:
    """
    Route the ``xrpl_core`` logger to stderr (and optionally a file).

    Calling it again replaces the handlers of the previous call.  Raises
    ``ValueError`` for an unknown level name or format.
    """
    if fmt not in FORMATS:
        raise ValueError(f"Unknown log format {fmt!r}; expected one of {', '.join(FORMATS)}")
    resolved = _resolve_level(level)

    logger = logging.getLogger(LIBRARY_LOGGER)
    for old in list(logger.handlers):
        logger.removeHandler(old)
        old.close()
    logger.setLevel(resolved)

    console = logging.StreamHandler(sys.stderr)
    if fmt == "json":
        console.setFormatter(_JSONFormatter())
    else:
        console.setFormatter(_HumanFormatter(colour=sys.stderr.isatty()))
    logger.addHandler(console)

    if log_file:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(path, encoding="utf-8")
        file_handler.setFormatter(_JSONFormatter())
        logger.addHandler(file_handler)

    logger.debug("logging configured: level=%s format=%s file=%s",
                 logging.getLevelName(resolved), fmt, log_file)
    return logger


def setup_logging_from_config(cfg: LoggingConfig) -> logging.Logger:
    return setup_logging(level=cfg.level, fmt=cfg.format, log_file=cfg.file)
