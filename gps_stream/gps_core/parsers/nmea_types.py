"""GPS data types and structures."""

from __future__ import annotations

from dataclasses import dataclass
import datetime as dt
from decimal import Decimal
from enum import Enum, IntEnum
from typing import Optional


class SentenceType(str, Enum):
    """Sentence types understood by the parser."""

    RMC = "RMC"
    GGA = "GGA"
    GLL = "GLL"
    VTG = "VTG"
    GSA = "GSA"
    GSV = "GSV"
    ZDA = "ZDA"
    TXT = "TXT"


class FixQuality(IntEnum):
    """GGA fix quality indicator."""

    INVALID = 0
    GPS = 1
    DGPS = 2
    PPS = 3
    RTK = 4
    FLOAT_RTK = 5
    ESTIMATED = 6
    MANUAL = 7
    SIMULATION = 8


class FixType(IntEnum):
    """GSA fix type."""

    NO_FIX = 1
    FIX_2D = 2
    FIX_3D = 3


class FaaMode(str, Enum):
    """Positioning mode indicator added in NMEA 2.3."""

    AUTONOMOUS = "A"
    DIFFERENTIAL = "D"
    ESTIMATED = "E"
    FLOAT_RTK = "F"
    MANUAL = "M"
    NOT_VALID = "N"
    PRECISE = "P"
    RTK = "R"
    SIMULATED = "S"


class SelectionMode(str, Enum):
    """GSA 2D/3D selection mode."""

    AUTOMATIC = "A"
    MANUAL = "M"


@dataclass(frozen=True, slots=True)
class UtcTime:
    """UTC time of day as reported by the receiver.

    ``second`` may be 60 during a leap second, which ``datetime.time`` cannot
    represent, so the raw components are kept.
    """

    hour: int
    minute: int
    second: int
    fraction: Decimal = Decimal(0)

    @property
    def microsecond(self) -> int:
        return min(int(self.fraction * 1_000_000), 999_999)

    def to_time(self) -> dt.time:
        """Return an aware ``datetime.time``; a leap second clamps to :59.999999."""
        if self.second >= 60:
            return dt.time(self.hour, self.minute, 59, 999_999, tzinfo=dt.timezone.utc)
        return dt.time(
            self.hour, self.minute, self.second, self.microsecond, tzinfo=dt.timezone.utc
        )

    def __str__(self) -> str:
        text = f"{self.hour:02d}:{self.minute:02d}:{self.second:02d}"
        if self.fraction:
            text += f"{self.fraction:f}"[1:]
        return text


@dataclass(frozen=True, slots=True)
class SatelliteInfo:
    """One satellite block from a GSV sentence."""

    prn: int
    elevation_deg: Optional[int] = None
    azimuth_deg: Optional[int] = None
    snr_db: Optional[int] = None


@dataclass(frozen=True, slots=True)
class GpsRecord:
    """Typed result of parsing one sentence.

    Fields the sentence type does not carry, or that the receiver left empty,
    are ``None`` so that a missing reading is never mistaken for zero.
    """

    sentence_type: SentenceType
    talker: str = ""
    time: Optional[UtcTime] = None
    fix_valid: Optional[bool] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    speed_knots: Optional[Decimal] = None
    course_deg: Optional[Decimal] = None
    date: Optional[dt.date] = None

    @property
    def tag(self) -> str:
        """Full sentence tag, e.g. ``GPRMC``."""
        return f"{self.talker}{self.sentence_type.value}"

    def has_position(self) -> bool:
        return self.latitude is not None and self.longitude is not None

    def timestamp(self) -> Optional[dt.datetime]:
        """Combine date and time into an aware datetime when both are present."""
        if self.date is None or self.time is None:
            return None
        return dt.datetime.combine(self.date, self.time.to_time())


@dataclass(frozen=True, slots=True)
class RMCRecord(GpsRecord):
    sentence_type: SentenceType = SentenceType.RMC
    magnetic_variation: Optional[Decimal] = None
    mode: Optional[FaaMode] = None


@dataclass(frozen=True, slots=True)
class GGARecord(GpsRecord):
    sentence_type: SentenceType = SentenceType.GGA
    fix_quality: Optional[FixQuality] = None
    satellites_in_use: Optional[int] = None
    hdop: Optional[Decimal] = None
    altitude_m: Optional[Decimal] = None
    geoid_separation_m: Optional[Decimal] = None
    dgps_age_s: Optional[Decimal] = None
    dgps_station_id: Optional[str] = None


@dataclass(frozen=True, slots=True)
class GLLRecord(GpsRecord):
    sentence_type: SentenceType = SentenceType.GLL
    mode: Optional[FaaMode] = None


@dataclass(frozen=True, slots=True)
class VTGRecord(GpsRecord):
    sentence_type: SentenceType = SentenceType.VTG
    course_magnetic_deg: Optional[Decimal] = None
    speed_kmh: Optional[Decimal] = None
    mode: Optional[FaaMode] = None


@dataclass(frozen=True, slots=True)
class GSARecord(GpsRecord):
    sentence_type: SentenceType = SentenceType.GSA
    selection_mode: Optional[SelectionMode] = None
    fix_type: Optional[FixType] = None
    satellite_ids: tuple[int, ...] = ()
    pdop: Optional[Decimal] = None
    hdop: Optional[Decimal] = None
    vdop: Optional[Decimal] = None


@dataclass(frozen=True, slots=True)
class GSVRecord(GpsRecord):
    sentence_type: SentenceType = SentenceType.GSV
    total_messages: Optional[int] = None
    message_number: Optional[int] = None
    satellites_in_view: Optional[int] = None
    satellites: tuple[SatelliteInfo, ...] = ()


@dataclass(frozen=True, slots=True)
class ZDARecord(GpsRecord):
    sentence_type: SentenceType = SentenceType.ZDA
    local_zone_hours: Optional[int] = None
    local_zone_minutes: Optional[int] = None


@dataclass(frozen=True, slots=True)
class TXTRecord(GpsRecord):
    sentence_type: SentenceType = SentenceType.TXT
    total_messages: Optional[int] = None
    message_number: Optional[int] = None
    text_type: Optional[int] = None
    text: str = ""
