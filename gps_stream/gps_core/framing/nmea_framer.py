"""Sentence framing over an unbounded NMEA byte stream.

The framer buffers bytes pulled from a :class:`ByteStreamSource` and hands
out one complete sentence at a time, from ``$`` through its terminator.
Everything it decides depends only on the buffered bytes, so the same input
produces the same sentences and errors however the source chunks it.

Example:
    framer = NMEAFramer()
    while True:
        try:
            result = framer.next_message(source)
        except FramingError as exc:
            log.warning("resync: %s", exc)
            continue
        if result.status is FrameStatus.END_OF_STREAM:
            break
        if result.status is FrameStatus.MESSAGE:
            handle(result.message)
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Optional

from gps_stream.core.logging_utils import get_module_logger

from ..constants import (
    ALLOW_BARE_LF,
    CR,
    DEFAULT_READ_SIZE,
    LF,
    MAX_SENTENCE_LENGTH,
    MIN_SENTENCE_LENGTH,
    START_MARKER,
)
from ..errors import AbandonedMessageError, OversizedMessageError, TruncatedMessageError
from ..transports.base_transport import ByteStreamSource

logger = get_module_logger("NMEAFramer")


class FrameStatus(Enum):
    MESSAGE = "message"
    PENDING = "pending"
    END_OF_STREAM = "end_of_stream"


@dataclass(frozen=True, slots=True)
class FrameResult:
    """Outcome of one framing step."""

    status: FrameStatus
    message: Optional[bytes] = None

    @property
    def is_message(self) -> bool:
        return self.status is FrameStatus.MESSAGE


PENDING = FrameResult(FrameStatus.PENDING)
END_OF_STREAM = FrameResult(FrameStatus.END_OF_STREAM)


class NMEAFramer:
    """Extracts complete sentences from a byte stream.

    Only one sentence can be in flight: a second ``$`` before the terminator
    abandons the first. Bytes outside a sentence are dropped as noise.
    """

    def __init__(
        self,
        max_sentence_length: int = MAX_SENTENCE_LENGTH,
        allow_bare_lf: bool = ALLOW_BARE_LF,
        read_size: int = DEFAULT_READ_SIZE,
    ):
        if max_sentence_length < MIN_SENTENCE_LENGTH:
            raise ValueError(
                f"max_sentence_length must be at least {MIN_SENTENCE_LENGTH}"
            )
        if read_size <= 0:
            raise ValueError("read_size must be positive")
        self.max_sentence_length = max_sentence_length
        self.allow_bare_lf = allow_bare_lf
        self.read_size = read_size
        self._buffer = bytearray()
        self._eof = False
        self._starved = False

    @property
    def buffered(self) -> bytes:
        """Bytes currently held, not yet framed."""
        return bytes(self._buffer)

    @property
    def at_eof(self) -> bool:
        return self._eof

    @property
    def starved(self) -> bool:
        """True when the last next_message call read the source and got nothing."""
        return self._starved

    def feed(self, data: bytes) -> None:
        """Push bytes into the buffer (for callers that read the source themselves)."""
        if data:
            self._buffer.extend(data)

    def mark_eof(self) -> None:
        """Record that no more bytes will arrive."""
        self._eof = True

    def reset(self) -> None:
        """Drop buffered bytes and forget end of stream."""
        self._buffer.clear()
        self._eof = False
        self._starved = False

    def next_message(self, source: Optional[ByteStreamSource] = None) -> FrameResult:
        """Return the next sentence, PENDING, or END_OF_STREAM.

        Sentences already in the buffer are returned without touching the
        source; otherwise the source is read once. Raises a FramingError
        subclass after discarding a malformed span; calling again resumes at
        the next start marker.
        """
        self._starved = False
        result = self._extract()
        if result is not None:
            return result

        if source is not None and not self._eof:
            chunk = source.read(self.read_size)
            self._starved = chunk == b""
            if chunk is None:
                self._eof = True
            elif chunk:
                self._buffer.extend(chunk)
                result = self._extract()
                if result is not None:
                    return result

        if self._eof:
            return self._finish()
        return PENDING

    def messages(self, source: Optional[ByteStreamSource] = None) -> Iterator[bytes]:
        """Yield sentences until end of stream.

        PENDING results are retried immediately, so the source's read should
        block or time out rather than return instantly. Framing errors
        propagate; the generator cannot be resumed after one.
        """
        while True:
            result = self.next_message(source)
            if result.status is FrameStatus.MESSAGE:
                yield result.message
            elif result.status is FrameStatus.END_OF_STREAM:
                return

    # ------------------------------------------------------------------
    # Buffer scanning

    def _extract(self) -> Optional[FrameResult]:
        buf = self._buffer
        start = buf.find(START_MARKER)
        if start < 0:
            if buf:
                logger.debug("Dropping %d bytes with no start marker", len(buf))
                buf.clear()
            return None
        if start:
            logger.debug("Dropping %d bytes before start marker", start)
            del buf[:start]

        # A sentence may not exceed max_sentence_length bytes including its
        # terminator, so only that window is ever searched.
        window_end = min(len(buf), self.max_sentence_length)
        terminator = self._find_terminator(window_end)
        restart = buf.find(START_MARKER, 1, window_end)

        if restart >= 0 and (terminator < 0 or restart < terminator):
            discarded = bytes(buf[:restart])
            del buf[:restart]
            raise AbandonedMessageError(discarded)

        if terminator >= 0:
            message = bytes(buf[:terminator + 1])
            del buf[:terminator + 1]
            return FrameResult(FrameStatus.MESSAGE, message)

        if len(buf) >= self.max_sentence_length:
            discarded = bytes(buf[:self.max_sentence_length])
            del buf[:self.max_sentence_length]
            raise OversizedMessageError(discarded, self.max_sentence_length)

        return None

    def _find_terminator(self, window_end: int) -> int:
        """Index of the LF ending the buffered sentence, or -1."""
        buf = self._buffer
        index = buf.find(LF, 1, window_end)
        if self.allow_bare_lf:
            return index
        while index >= 0 and buf[index - 1] != CR:
            index = buf.find(LF, index + 1, window_end)
        return index

    def _finish(self) -> FrameResult:
        if self._buffer:
            discarded = bytes(self._buffer)
            self._buffer.clear()
            raise TruncatedMessageError(discarded)
        return END_OF_STREAM
