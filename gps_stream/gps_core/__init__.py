"""GPS core: framing, parsing and reading NMEA streams."""

from .config import GPSConfig
from .errors import (
    AbandonedMessageError,
    ChecksumMismatchError,
    FieldCountMismatchError,
    FramingError,
    GPSStreamError,
    InvalidDateError,
    InvalidFlagError,
    InvalidHemisphereError,
    InvalidNumericError,
    InvalidTimeError,
    MalformedSentenceError,
    OversizedMessageError,
    ParseError,
    TruncatedMessageError,
    UnsupportedSentenceError,
)
from .fix_state import FixAccumulator, GPSFixSnapshot
from .framing import END_OF_STREAM, PENDING, FrameResult, FrameStatus, NMEAFramer
from .parsers import GpsRecord, NMEAParser, SentenceType, parse_sentence
from .reader import GPSReader, ReaderStats, async_records

__all__ = [
    "GPSConfig",
    "AbandonedMessageError",
    "ChecksumMismatchError",
    "FieldCountMismatchError",
    "FramingError",
    "GPSStreamError",
    "InvalidDateError",
    "InvalidFlagError",
    "InvalidHemisphereError",
    "InvalidNumericError",
    "InvalidTimeError",
    "MalformedSentenceError",
    "OversizedMessageError",
    "ParseError",
    "TruncatedMessageError",
    "UnsupportedSentenceError",
    "FixAccumulator",
    "GPSFixSnapshot",
    "END_OF_STREAM",
    "PENDING",
    "FrameResult",
    "FrameStatus",
    "NMEAFramer",
    "GpsRecord",
    "NMEAParser",
    "SentenceType",
    "parse_sentence",
    "GPSReader",
    "ReaderStats",
    "async_records",
]
