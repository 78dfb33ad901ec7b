"""NMEA parsing components."""

from .nmea_parser import (
    FIELD_COUNTS,
    NMEAParser,
    build_sentence,
    compute_checksum,
    parse_sentence,
    validate_checksum,
)
from .nmea_types import (
    FaaMode,
    FixQuality,
    FixType,
    GGARecord,
    GLLRecord,
    GpsRecord,
    GSARecord,
    GSVRecord,
    RMCRecord,
    SatelliteInfo,
    SelectionMode,
    SentenceType,
    TXTRecord,
    UtcTime,
    VTGRecord,
    ZDARecord,
)

__all__ = [
    "FIELD_COUNTS",
    "NMEAParser",
    "build_sentence",
    "compute_checksum",
    "parse_sentence",
    "validate_checksum",
    "FaaMode",
    "FixQuality",
    "FixType",
    "GGARecord",
    "GLLRecord",
    "GpsRecord",
    "GSARecord",
    "GSVRecord",
    "RMCRecord",
    "SatelliteInfo",
    "SelectionMode",
    "SentenceType",
    "TXTRecord",
    "UtcTime",
    "VTGRecord",
    "ZDARecord",
]
