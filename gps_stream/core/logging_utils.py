"""Component-tagged loggers under the ``gps_stream`` namespace."""

from __future__ import annotations

import logging
from typing import Optional, Union

MODULE_LOGGER_NAMESPACE = "gps_stream"
DEFAULT_COMPONENT = "Core"


def _qualify(name: Optional[str]) -> str:
    if not name:
        return MODULE_LOGGER_NAMESPACE
    if name == MODULE_LOGGER_NAMESPACE or name.startswith(MODULE_LOGGER_NAMESPACE + "."):
        return name
    return f"{MODULE_LOGGER_NAMESPACE}.{name}"


def _component_of(logger_name: str) -> str:
    if logger_name.startswith(MODULE_LOGGER_NAMESPACE):
        logger_name = logger_name[len(MODULE_LOGGER_NAMESPACE):].lstrip(".")
    return logger_name or DEFAULT_COMPONENT


def _render(message: object, args: tuple) -> str:
    text = str(message)
    if not args:
        return text
    try:
        return text % args
    except (TypeError, ValueError):
        # A bad format string in a log call must never take down the read loop
        return f"{text} | args={' '.join(map(str, args))}"


class StructuredLogger(logging.LoggerAdapter):
    """LoggerAdapter that tags every message with ``[Component]``.

    Messages are rendered eagerly, but only when the level is enabled, so
    per-chunk debug calls in the framer cost one level check when filtered.
    """

    def __init__(self, logger: logging.Logger, component: Optional[str] = None) -> None:
        super().__init__(logger, {})
        self.component = component or _component_of(logger.name)

    def log(self, level: int, msg: object, *args, **kwargs) -> None:
        if not self.isEnabledFor(level):
            return
        text = _render(msg, args)
        tag = f"[{self.component}]"
        if not text.startswith(tag):
            text = f"{tag} {text}"
        kwargs.setdefault("stacklevel", 3)
        self.logger.log(level, text, **kwargs)

    def getChild(self, suffix: str) -> "StructuredLogger":
        return StructuredLogger(self.logger.getChild(suffix), f"{self.component}.{suffix}")

    def __repr__(self) -> str:
        return f"<StructuredLogger {self.logger.name} [{self.component}]>"


LoggerLike = Union[StructuredLogger, logging.Logger, logging.LoggerAdapter, None]


def ensure_structured_logger(
    logger: LoggerLike,
    *,
    component: Optional[str] = None,
    fallback_name: Optional[str] = None,
) -> StructuredLogger:
    """Wrap ``logger`` for component tagging, or create one from ``fallback_name``."""
    if isinstance(logger, StructuredLogger):
        return logger
    if isinstance(logger, logging.LoggerAdapter):
        logger = logger.logger
    if isinstance(logger, logging.Logger):
        return StructuredLogger(logger, component)
    return get_module_logger(fallback_name)


def get_module_logger(name: Optional[str] = None) -> StructuredLogger:
    return StructuredLogger(logging.getLogger(_qualify(name)))


__all__ = [
    "StructuredLogger",
    "ensure_structured_logger",
    "get_module_logger",
]
