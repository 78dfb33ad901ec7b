"""Command-line entry point: stream GPS records as JSON lines.

Usage:
    python -m gps_stream --port /dev/ttyUSB0 --baud-rate 9600
    python -m gps_stream --replay capture.nmea --summary
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Optional, TextIO

import serial

from gps_stream.cli.common import (
    add_common_cli_arguments,
    install_signal_handlers,
    positive_float,
    positive_int,
    setup_cli_logging,
)
from gps_stream.core.logging_utils import get_module_logger
from gps_stream.gps_core.config import GPSConfig
from gps_stream.gps_core.constants import MIN_SENTENCE_LENGTH
from gps_stream.gps_core.errors import GPSStreamError
from gps_stream.gps_core.fix_state import FixAccumulator
from gps_stream.gps_core.framing import NMEAFramer
from gps_stream.gps_core.parsers import NMEAParser
from gps_stream.gps_core.reader import GPSReader
from gps_stream.gps_core.serialization import record_to_json, snapshot_to_dict
from gps_stream.gps_core.transports import ByteStreamSource, ReplayByteSource, SerialByteSource

logger = get_module_logger("MainGPS")

EXIT_OK = 0
EXIT_PORT_ERROR = 1
EXIT_STREAM_ERROR = 2
EXIT_CONFIG_ERROR = 3
EXIT_INTERRUPTED = 130


def sentence_length(value: str) -> int:
    length = positive_int(value)
    if length < MIN_SENTENCE_LENGTH:
        raise argparse.ArgumentTypeError(f"must be at least {MIN_SENTENCE_LENGTH} bytes")
    return length


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gps-stream",
        description="Read NMEA sentences from a GPS receiver and print them as JSON.",
    )
    add_common_cli_arguments(parser)

    source = parser.add_argument_group("source")
    source.add_argument("--port", dest="serial_port", default=None, help="Serial port path, e.g. /dev/ttyUSB0 or COM3")
    source.add_argument("--baud-rate", dest="baud_rate", type=positive_int, default=None, help="Serial baud rate")
    source.add_argument("--bytesize", type=int, choices=(5, 6, 7, 8), default=None, help="Data bits")
    source.add_argument("--parity", choices=("N", "E", "O", "M", "S"), default=None, help="Parity")
    source.add_argument("--stopbits", type=float, choices=(1.0, 1.5, 2.0), default=None, help="Stop bits")
    source.add_argument("--timeout", dest="read_timeout_s", type=positive_float, default=None, help="Read timeout in seconds")
    source.add_argument("--replay", type=Path, default=None, help="Replay a recorded NMEA capture instead of opening a port")
    source.add_argument("--chunk-size", type=positive_int, default=None, help="Bytes per replay read")

    parsing = parser.add_argument_group("parsing")
    parsing.add_argument(
        "--sentences",
        dest="enabled_sentences",
        default=None,
        help="Comma separated sentence types to keep, e.g. RMC,GGA",
    )
    parsing.add_argument(
        "--no-checksum",
        dest="require_checksum",
        action="store_const",
        const=False,
        default=None,
        help="Accept sentences without a *HH checksum",
    )
    parsing.add_argument(
        "--strict-terminator",
        dest="allow_bare_lf",
        action="store_const",
        const=False,
        default=None,
        help="Only accept CR LF as a sentence terminator",
    )
    parsing.add_argument("--max-sentence-length", type=sentence_length, default=None, help="Framing bound in bytes")
    parsing.add_argument(
        "--fail-fast",
        dest="skip_errors",
        action="store_const",
        const=False,
        default=None,
        help="Stop at the first framing or parse error instead of skipping it",
    )

    output = parser.add_argument_group("output")
    output.add_argument("--summary", action="store_true", help="Print only the accumulated fix at end of stream")
    output.add_argument("--indent", type=int, default=None, help="Indent JSON output")
    return parser


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    return build_parser().parse_args(argv)


def load_config(args: argparse.Namespace) -> GPSConfig:
    """Config file values overlaid with any CLI flags that were given."""
    return GPSConfig.from_file(args.config).apply_args(args)


def open_source(config: GPSConfig, args: argparse.Namespace) -> ByteStreamSource:
    if args.replay is not None:
        logger.info("Replaying %s", args.replay)
        return ReplayByteSource.from_path(args.replay, args.chunk_size)
    source = SerialByteSource(
        config.serial_port,
        config.baud_rate,
        bytesize=config.bytesize,
        parity=config.parity,
        stopbits=config.stopbits,
        timeout=config.read_timeout_s,
    )
    source.open()
    return source


def build_pipeline(config: GPSConfig) -> tuple[NMEAFramer, NMEAParser]:
    """Framer and parser for ``config``. Raises ValueError on out-of-range settings."""
    framer = NMEAFramer(
        max_sentence_length=config.max_sentence_length,
        allow_bare_lf=config.allow_bare_lf,
        read_size=config.read_size,
    )
    parser = NMEAParser(
        require_checksum=config.require_checksum,
        century_pivot=config.century_pivot,
        enabled_sentences=config.sentence_filter(),
    )
    return framer, parser


def run(
    reader: GPSReader,
    *,
    summary: bool = False,
    indent: Optional[int] = None,
    out: Optional[TextIO] = None,
) -> int:
    out = out or sys.stdout
    install_signal_handlers(reader.stop)

    for record in reader.records():
        if not summary:
            print(record_to_json(record, indent=indent), file=out, flush=True)

    if summary and reader.accumulator is not None:
        print(json.dumps(snapshot_to_dict(reader.accumulator.fix), indent=indent), file=out, flush=True)

    stats = reader.stats
    logger.info(
        "Read %d records (%d framing errors, %d parse errors, %d unsupported)",
        stats.records, stats.framing_errors, stats.parse_errors, stats.unsupported,
    )
    return EXIT_OK


def main(argv: Optional[list[str]] = None) -> int:
    args = parse_args(argv)
    config = load_config(args)
    setup_cli_logging(config.log_level, config.log_file)

    try:
        framer, parser = build_pipeline(config)
    except ValueError as exc:
        logger.error("Invalid configuration: %s", exc)
        return EXIT_CONFIG_ERROR

    try:
        source = open_source(config, args)
    except (serial.SerialException, OSError) as exc:
        logger.error("Cannot open GPS source: %s", exc)
        return EXIT_PORT_ERROR

    reader = GPSReader(
        source,
        framer,
        parser,
        skip_errors=config.skip_errors,
        poll_interval=config.poll_interval_s,
        accumulator=FixAccumulator(),
    )
    try:
        return run(reader, summary=args.summary, indent=args.indent)
    except GPSStreamError as exc:
        logger.error("Stopped on %s: %s", type(exc).__name__, exc)
        return EXIT_STREAM_ERROR
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return EXIT_INTERRUPTED
    finally:
        source.close()


if __name__ == "__main__":
    sys.exit(main())
