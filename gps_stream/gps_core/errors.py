"""Exception hierarchy for framing and parsing NMEA data.

Every error is recoverable: the framer has already discarded the offending
bytes when it raises, and a parse error concerns one sentence only. Callers
decide whether to log and continue or to stop reading.
"""

from __future__ import annotations

from typing import Optional, Sequence


class GPSStreamError(Exception):
    """Base class for all gps_stream errors."""


# ----------------------------------------------------------------------
# Framing
# ----------------------------------------------------------------------


class FramingError(GPSStreamError):
    """Synchronization with the byte stream was lost and recovered."""

    def __init__(self, message: str, discarded: bytes = b"") -> None:
        super().__init__(message)
        self.discarded = bytes(discarded)


class OversizedMessageError(FramingError):
    """No terminator arrived within the maximum sentence length."""

    def __init__(self, discarded: bytes, limit: int) -> None:
        super().__init__(
            f"Sentence exceeded {limit} bytes without a terminator", discarded
        )
        self.limit = limit


class TruncatedMessageError(FramingError):
    """The stream ended in the middle of a sentence."""

    def __init__(self, discarded: bytes) -> None:
        super().__init__(
            f"Stream ended inside a sentence ({len(discarded)} bytes dropped)",
            discarded,
        )


class AbandonedMessageError(FramingError):
    """A new start marker arrived before the current sentence terminated."""

    def __init__(self, discarded: bytes) -> None:
        super().__init__(
            f"Sentence abandoned by a new start marker ({len(discarded)} bytes dropped)",
            discarded,
        )


# ----------------------------------------------------------------------
# Parsing
# ----------------------------------------------------------------------


class ParseError(GPSStreamError):
    """One sentence could not be turned into a record."""

    def __init__(self, message: str, sentence: Optional[str] = None) -> None:
        super().__init__(message)
        self.sentence = sentence


class MalformedSentenceError(ParseError):
    """Sentence is not structurally NMEA (missing '$', non-ASCII, empty)."""


class ChecksumMismatchError(ParseError):
    def __init__(
        self,
        expected: Optional[str],
        actual: int,
        sentence: Optional[str] = None,
    ) -> None:
        if expected is None:
            message = f"Missing checksum (computed {actual:02X})"
        else:
            message = f"Checksum mismatch: sentence says {expected!r}, computed {actual:02X}"
        super().__init__(message, sentence)
        self.expected = expected
        self.actual = actual


class UnsupportedSentenceError(ParseError):
    def __init__(self, tag: str, sentence: Optional[str] = None) -> None:
        super().__init__(f"Unsupported sentence type {tag!r}", sentence)
        self.tag = tag


class FieldCountMismatchError(ParseError):
    def __init__(
        self,
        sentence_type: str,
        expected: Sequence[int],
        actual: int,
        sentence: Optional[str] = None,
    ) -> None:
        accepted = "/".join(str(count) for count in expected)
        super().__init__(
            f"{sentence_type} expects {accepted} fields, got {actual}", sentence
        )
        self.sentence_type = sentence_type
        self.expected = tuple(expected)
        self.actual = actual


class InvalidTimeError(ParseError):
    pass


class InvalidDateError(ParseError):
    pass


class InvalidHemisphereError(ParseError):
    pass


class InvalidFlagError(ParseError):
    pass


class InvalidNumericError(ParseError):
    def __init__(self, field: str, value: str, sentence: Optional[str] = None) -> None:
        super().__init__(f"Invalid numeric value {value!r} for {field}", sentence)
        self.field = field
        self.value = value


__all__ = [
    "GPSStreamError",
    "FramingError",
    "OversizedMessageError",
    "TruncatedMessageError",
    "AbandonedMessageError",
    "ParseError",
    "MalformedSentenceError",
    "ChecksumMismatchError",
    "UnsupportedSentenceError",
    "FieldCountMismatchError",
    "InvalidTimeError",
    "InvalidDateError",
    "InvalidHemisphereError",
    "InvalidFlagError",
    "InvalidNumericError",
]
