from __future__ import annotations

import argparse
import logging
import signal
from pathlib import Path
from typing import Callable

from gps_stream.core.logging_config import configure_logging
from gps_stream.core.logging_utils import get_module_logger


LOG_LEVELS: dict[str, int] = {
    name.lower(): getattr(logging, name)
    for name in ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")
}

logger = get_module_logger("CLI")


def add_common_cli_arguments(parser: argparse.ArgumentParser) -> None:
    """Add --config and the logging flags shared by every gps-stream entry point."""
    # None means "not given" so config.txt values survive
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        metavar="PATH",
        help="config.txt to load instead of the packaged defaults",
    )

    group = parser.add_argument_group("logging")
    group.add_argument(
        "--log-level",
        choices=list(LOG_LEVELS),
        default=None,
        type=str.lower,
        help="Logging verbosity (default: config file, else info)",
    )
    group.add_argument(
        "--log-file",
        type=Path,
        default=None,
        metavar="PATH",
        help="Also write log lines to this rotating file",
    )


def _positive(cast: Callable[[str], float], label: str) -> Callable[[str], float]:
    def check(value: str):
        try:
            parsed = cast(value)
        except ValueError:
            raise argparse.ArgumentTypeError(f"expected a {label}, got {value!r}") from None
        if parsed <= 0:
            raise argparse.ArgumentTypeError(f"expected a positive {label}, got {value!r}")
        return parsed

    check.__name__ = f"positive_{label}"
    return check


positive_int = _positive(int, "integer")
positive_float = _positive(float, "number")


def setup_cli_logging(level: str, log_file: Path | str | None = None) -> None:
    configure_logging(LOG_LEVELS.get(level.lower(), logging.INFO), force=True, log_file=log_file or None)


def install_signal_handlers(on_signal: Callable[[], None]) -> None:
    """Route SIGTERM to ``on_signal``; Ctrl-C still raises KeyboardInterrupt."""

    def signal_handler(signum, frame):
        logger.info("Received signal %s, stopping", signum)
        on_signal()

    signal.signal(signal.SIGTERM, signal_handler)
