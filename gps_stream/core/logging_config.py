"""Root logger setup for gps-stream processes.

Log lines always go to stderr (stdout carries JSON records) and, when asked,
to a size-capped rotating file next to a capture.
"""

from __future__ import annotations

import contextlib
import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Iterable, List, Optional, Union

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"

# A receiver at 1 Hz with debug logging on writes roughly 1 KB/s.
ROTATE_BYTES = 1024 * 1024
ROTATE_KEEP = 3

# pyserial-asyncio and asyncio log every reconnect attempt at DEBUG.
NOISY_LOGGERS = ("asyncio", "serial_asyncio")

_configured = False


def _coerce_level(level: Union[int, str]) -> int:
    if isinstance(level, int):
        return level
    value = logging.getLevelName(str(level).upper())
    if not isinstance(value, int):
        raise ValueError(f"Unknown log level '{level}'")
    return value


def _build_handlers(
    level: int,
    console: bool,
    log_file: Optional[Path],
    max_bytes: int,
    backup_count: int,
) -> List[logging.Handler]:
    handlers: List[logging.Handler] = []
    if console:
        handlers.append(logging.StreamHandler(sys.stderr))
    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(
            RotatingFileHandler(log_file, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8")
        )

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATEFMT)
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
    return handlers


def _quiet(names: Iterable[str]) -> None:
    for name in names:
        logging.getLogger(name).setLevel(logging.WARNING)


def configure_logging(
    level: Union[int, str] = logging.INFO,
    *,
    force: bool = False,
    console: bool = True,
    log_file: Optional[Union[str, Path]] = None,
    max_bytes: int = ROTATE_BYTES,
    backup_count: int = ROTATE_KEEP,
    quiet_loggers: Iterable[str] = NOISY_LOGGERS,
) -> None:
    """Install stderr and optional rotating file handlers on the root logger.

    Calling again without ``force`` only adjusts the level, so library code
    can call this more than once without duplicating handlers.

    Args:
        level: Logging level as an int or a name such as "info".
        force: Replace existing root handlers even if already configured.
        console: Emit log lines to stderr.
        log_file: Path of a rotating log file, created with its parent.
        max_bytes: Size at which the log file rotates.
        backup_count: Rotated files kept alongside the live one.
        quiet_loggers: Logger names capped at WARNING.

    Raises:
        ValueError: If ``level`` is not a known logging level name.
    """

    global _configured
    numeric_level = _coerce_level(level)
    root = logging.getLogger()
    root.setLevel(numeric_level)
    _quiet(quiet_loggers)

    if _configured and not force:
        return

    for handler in list(root.handlers):
        root.removeHandler(handler)
        with contextlib.suppress(Exception):
            handler.close()

    path = Path(log_file) if log_file else None
    handlers = _build_handlers(numeric_level, console, path, max_bytes, backup_count)
    for handler in handlers or [logging.NullHandler()]:
        root.addHandler(handler)

    _configured = True


__all__ = ["configure_logging", "LOG_FORMAT", "LOG_DATEFMT", "NOISY_LOGGERS"]
