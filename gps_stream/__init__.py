"""gps_stream - read and parse NMEA sentences from serial GPS receivers."""

__version__ = "0.1.0"

from .gps_core import (  # noqa: E402
    END_OF_STREAM,
    PENDING,
    FramingError,
    GPSConfig,
    GPSReader,
    GpsRecord,
    NMEAFramer,
    NMEAParser,
    ParseError,
    parse_sentence,
)

__all__ = [
    "__version__",
    "END_OF_STREAM",
    "PENDING",
    "FramingError",
    "GPSConfig",
    "GPSReader",
    "GpsRecord",
    "NMEAFramer",
    "NMEAParser",
    "ParseError",
    "parse_sentence",
]
