"""Read loop driving the framer and parser over a byte source.

The framer and parser never retry or stop on their own; this module is the
caller that decides. By default malformed units are logged, counted and
skipped so one corrupted sentence never ends the stream.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import AsyncIterator, Iterator, Optional, Union

from gps_stream.core.logging_utils import get_module_logger

from .constants import DEFAULT_POLL_INTERVAL
from .errors import FramingError, ParseError, UnsupportedSentenceError
from .fix_state import FixAccumulator
from .framing.nmea_framer import END_OF_STREAM, FrameResult, FrameStatus, NMEAFramer
from .parsers.nmea_parser import NMEAParser
from .parsers.nmea_types import GpsRecord
from .transports.base_transport import BaseGPSTransport, ByteStreamSource

logger = get_module_logger("GPSReader")


@dataclass(slots=True)
class ReaderStats:
    """Counters for one reader's lifetime."""

    messages: int = 0
    records: int = 0
    framing_errors: int = 0
    parse_errors: int = 0
    unsupported: int = 0


class GPSReader:
    """Pull-based loop turning a byte source into GPS records.

    Single-threaded: the only place it waits is inside ``source.read`` and
    the ``poll_interval`` sleep after a read that returned no bytes.
    """

    def __init__(
        self,
        source: ByteStreamSource,
        framer: Optional[NMEAFramer] = None,
        parser: Optional[NMEAParser] = None,
        *,
        skip_errors: bool = True,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        accumulator: Optional[FixAccumulator] = None,
    ):
        self.source = source
        self.framer = framer or NMEAFramer()
        self.parser = parser or NMEAParser()
        self.skip_errors = skip_errors
        self.poll_interval = poll_interval
        self.accumulator = accumulator
        self.stats = ReaderStats()
        self._finished = False
        self._stop_requested = False

    @property
    def finished(self) -> bool:
        return self._finished

    def stop(self) -> None:
        """Make records() return before its next poll. Safe to call from a signal handler."""
        self._stop_requested = True

    def poll(self) -> Union[GpsRecord, FrameResult, None]:
        """Run one framing step.

        Returns a record when a sentence was framed and parsed, END_OF_STREAM
        once the source is exhausted, and None otherwise (nothing ready yet,
        or a skipped error).
        """
        if self._finished:
            return END_OF_STREAM
        try:
            result = self.framer.next_message(self.source)
        except FramingError as exc:
            self.stats.framing_errors += 1
            self._handle_error(exc, "Framing error")
            return None

        if result.status is FrameStatus.END_OF_STREAM:
            self._finished = True
            logger.info(
                "Stream ended: %d records from %d messages (%d framing errors, %d parse errors)",
                self.stats.records,
                self.stats.messages,
                self.stats.framing_errors,
                self.stats.parse_errors,
            )
            return END_OF_STREAM
        if result.status is FrameStatus.PENDING:
            return None

        self.stats.messages += 1
        return self._parse(result.message)

    def records(self) -> Iterator[GpsRecord]:
        """Yield records until the source is exhausted or stop() is called."""
        while not self._stop_requested:
            outcome = self.poll()
            if outcome is END_OF_STREAM:
                return
            if isinstance(outcome, GpsRecord):
                yield outcome
            elif self.poll_interval > 0 and self.framer.starved:
                # Source idle, though a partial sentence may be buffered
                time.sleep(self.poll_interval)

    def _parse(self, message: bytes) -> Optional[GpsRecord]:
        try:
            record = self.parser.parse(message)
        except UnsupportedSentenceError as exc:
            self.stats.unsupported += 1
            if not self.skip_errors:
                raise
            logger.debug("Skipping %s", exc)
            return None
        except ParseError as exc:
            self.stats.parse_errors += 1
            self._handle_error(exc, "Parse error")
            return None

        self.stats.records += 1
        if self.accumulator is not None:
            self.accumulator.update(record)
        return record

    def _handle_error(self, exc: Exception, context: str) -> None:
        if not self.skip_errors:
            raise exc
        logger.warning("%s: %s", context, exc)


async def async_records(
    transport: BaseGPSTransport,
    framer: Optional[NMEAFramer] = None,
    parser: Optional[NMEAParser] = None,
    *,
    skip_errors: bool = True,
    read_timeout: float = 1.0,
    stats: Optional[ReaderStats] = None,
) -> AsyncIterator[GpsRecord]:
    """Async counterpart of ``GPSReader.records`` over a connected transport.

    The generator owns ``framer`` for its lifetime and pushes every chunk it
    reads into it. Ends when the transport reports end of stream.
    """
    framer = framer or NMEAFramer()
    parser = parser or NMEAParser()
    stats = stats if stats is not None else ReaderStats()

    while True:
        chunk = await transport.read_chunk(framer.read_size, timeout=read_timeout)
        if chunk is None:
            framer.mark_eof()
        else:
            framer.feed(chunk)

        while True:
            try:
                result = framer.next_message()
            except FramingError as exc:
                stats.framing_errors += 1
                if not skip_errors:
                    raise
                logger.warning("Framing error: %s", exc)
                continue

            if result.status is FrameStatus.END_OF_STREAM:
                return
            if result.status is FrameStatus.PENDING:
                break

            stats.messages += 1
            try:
                record = parser.parse(result.message)
            except UnsupportedSentenceError as exc:
                stats.unsupported += 1
                if not skip_errors:
                    raise
                logger.debug("Skipping %s", exc)
                continue
            except ParseError as exc:
                stats.parse_errors += 1
                if not skip_errors:
                    raise
                logger.warning("Parse error: %s", exc)
                continue

            stats.records += 1
            yield record
