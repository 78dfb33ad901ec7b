"""NMEA sentence parsing for GPS receivers.

Turns one complete sentence into a typed :class:`GpsRecord`. Parsing is
strict: a sentence either yields a fully validated record or raises a
:class:`ParseError` subclass describing what was wrong with it. Empty fields
are legal in NMEA and come back as ``None``.
"""

from __future__ import annotations

import datetime as dt
import re
from decimal import Decimal
from enum import Enum
from typing import Callable, Dict, Iterable, Optional, Sequence, TypeVar, Union

from ..constants import (
    CENTURY_PIVOT,
    CHECKSUM_MARKER,
    FIELD_DELIMITER,
    REQUIRE_CHECKSUM,
)
from ..errors import (
    ChecksumMismatchError,
    FieldCountMismatchError,
    InvalidDateError,
    InvalidFlagError,
    InvalidHemisphereError,
    InvalidNumericError,
    InvalidTimeError,
    MalformedSentenceError,
    ParseError,
    UnsupportedSentenceError,
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

E = TypeVar("E", bound=Enum)

# Accepted data field counts per sentence type, excluding the type token.
# Several counts are legal because NMEA 2.3 and 4.1 appended fields.
FIELD_COUNTS: Dict[SentenceType, tuple[int, ...]] = {
    SentenceType.RMC: (11, 12, 13),
    SentenceType.GGA: (14,),
    SentenceType.GLL: (6, 7),
    SentenceType.VTG: (8, 9),
    SentenceType.GSA: (17, 18),
    SentenceType.GSV: tuple(sorted({3 + 4 * n + extra for n in range(5) for extra in (0, 1)})),
    SentenceType.ZDA: (6,),
    SentenceType.TXT: (4,),
}


# ----------------------------------------------------------------------
# Checksum helpers
# ----------------------------------------------------------------------

_HEX_DIGITS = re.compile(r"[0-9A-Fa-f]{2}")


def compute_checksum(body: str) -> int:
    """XOR of every character between '$' and '*'."""
    calculated = 0
    for char in body:
        calculated ^= ord(char)
    return calculated


def _checksum_digits(text: str) -> Optional[int]:
    """Value of a '*HH' suffix: exactly two hex digits, nothing after them."""
    if len(text) != 2 or not _HEX_DIGITS.fullmatch(text):
        return None
    return int(text, 16)


def validate_checksum(sentence: str) -> bool:
    """True when ``sentence`` (terminator optional) carries a matching checksum."""
    sentence = sentence.rstrip("\r\n")
    if not sentence.startswith("$"):
        return False
    body, star, checksum_str = sentence[1:].partition(CHECKSUM_MARKER)
    expected = _checksum_digits(checksum_str)
    return bool(star) and expected is not None and compute_checksum(body) == expected


def build_sentence(body: str) -> bytes:
    """Encode ``body`` as a checksummed, CR LF terminated sentence."""
    return f"${body}*{compute_checksum(body):02X}\r\n".encode("ascii")


# ----------------------------------------------------------------------
# Field converters
# ----------------------------------------------------------------------

# Plain ASCII digits only: Decimal() and int() would also take whitespace,
# "_" separators, exponents and non-ASCII digits.
_UNSIGNED_DECIMAL = re.compile(r"(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)")
_SIGNED_DECIMAL = re.compile(r"[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)")
_UNSIGNED_INT = re.compile(r"[0-9]+")
_SIGNED_INT = re.compile(r"[+-]?[0-9]+")


def _parse_decimal(value: str, field: str, *, signed: bool = True) -> Optional[Decimal]:
    """Parse a fixed-point token, None when the field is empty."""
    if not value:
        return None
    pattern = _SIGNED_DECIMAL if signed else _UNSIGNED_DECIMAL
    if not pattern.fullmatch(value):
        raise InvalidNumericError(field, value)
    return Decimal(value)


def _parse_int(value: str, field: str, *, signed: bool = False) -> Optional[int]:
    """Parse an integer token, None when the field is empty."""
    if not value:
        return None
    pattern = _SIGNED_INT if signed else _UNSIGNED_INT
    if not pattern.fullmatch(value):
        raise InvalidNumericError(field, value)
    return int(value)


def _parse_enum(enum_cls: type[E], value: str, field: str, *, numeric: bool = False) -> Optional[E]:
    if not value:
        return None
    key = int(value) if numeric and _UNSIGNED_INT.fullmatch(value) else value
    try:
        return enum_cls(key)
    except ValueError:
        raise InvalidFlagError(f"Invalid {field} {value!r}") from None


def _parse_status(value: str) -> bool:
    """A = data valid, V = receiver warning."""
    if value == "A":
        return True
    if value == "V":
        return False
    raise InvalidFlagError(f"Invalid status flag {value!r}")


def _parse_latlon(value: str, direction: str, *, is_lat: bool) -> Optional[float]:
    """Parse NMEA lat/lon format (DDMM.MMMM or DDDMM.MMMM) to decimal degrees."""
    if not value:
        return None
    field = "latitude" if is_lat else "longitude"
    hemispheres = ("N", "S") if is_lat else ("E", "W")
    if direction not in hemispheres:
        raise InvalidHemisphereError(f"Invalid {field} hemisphere {direction!r}")

    deg_len = 2 if is_lat else 3
    degree_text = value[:deg_len]
    if len(degree_text) < deg_len or not degree_text.isdigit():
        raise InvalidNumericError(field, value)
    minutes = _parse_decimal(value[deg_len:], field, signed=False)
    if minutes is None or minutes < 0 or minutes >= 60:
        raise InvalidNumericError(field, value)

    degrees = int(degree_text) + minutes / 60
    if degrees > (90 if is_lat else 180):
        raise InvalidNumericError(field, value)
    if direction in ("S", "W") and degrees:
        degrees = -degrees
    return float(degrees)


def _parse_hms(value: str) -> Optional[UtcTime]:
    """Parse NMEA time format (HHMMSS[.sss]) to UtcTime."""
    if not value:
        return None
    main, dot, frac = value.partition(".")
    if len(main) != 6 or not main.isdigit() or (frac and not frac.isdigit()):
        raise InvalidTimeError(f"Malformed time {value!r}")
    hour = int(main[0:2])
    minute = int(main[2:4])
    second = int(main[4:6])
    # 60 seconds is allowed for leap second notation
    if hour > 23 or minute > 59 or second > 60:
        raise InvalidTimeError(f"Time out of range {value!r}")
    fraction = Decimal(f"0.{frac}") if frac else Decimal(0)
    return UtcTime(hour, minute, second, fraction)


def _resolve_year(two_digit: int, century_pivot: int) -> int:
    return (1900 if two_digit >= century_pivot else 2000) + two_digit


def _parse_date(value: str, century_pivot: int = CENTURY_PIVOT) -> Optional[dt.date]:
    """Parse NMEA date format (DDMMYY) to datetime.date."""
    if not value:
        return None
    if len(value) != 6 or not value.isdigit():
        raise InvalidDateError(f"Malformed date {value!r}")
    day = int(value[0:2])
    month = int(value[2:4])
    year = _resolve_year(int(value[4:6]), century_pivot)
    try:
        return dt.date(year, month, day)
    except ValueError:
        raise InvalidDateError(f"Date out of range {value!r}") from None


def _parse_signed(value: str, direction: str, field: str) -> Optional[Decimal]:
    """Magnitude with an E/W suffix; west is negative."""
    magnitude = _parse_decimal(value, field, signed=False)
    if magnitude is None:
        return None
    if direction not in ("E", "W"):
        raise InvalidHemisphereError(f"Invalid {field} direction {direction!r}")
    return -magnitude if direction == "W" else magnitude


def _optional(fields: Sequence[str], index: int) -> str:
    return fields[index] if len(fields) > index else ""


# ----------------------------------------------------------------------
# Parser
# ----------------------------------------------------------------------


RawSentence = Union[bytes, bytearray, str]


class NMEAParser:
    """Stateless NMEA sentence parser.

    Configuration is fixed at construction; ``parse`` is a pure function of
    its input, so one parser can be shared freely.
    """

    def __init__(
        self,
        require_checksum: bool = REQUIRE_CHECKSUM,
        century_pivot: int = CENTURY_PIVOT,
        enabled_sentences: Optional[Iterable[str]] = None,
    ):
        self._require_checksum = require_checksum
        self._century_pivot = century_pivot
        self._enabled_sentences: Optional[frozenset[str]] = None
        self.set_enabled_sentences(enabled_sentences)
        self._handlers: Dict[SentenceType, Callable[[str, list[str]], GpsRecord]] = {
            SentenceType.RMC: self._parse_rmc,
            SentenceType.GGA: self._parse_gga,
            SentenceType.GLL: self._parse_gll,
            SentenceType.VTG: self._parse_vtg,
            SentenceType.GSA: self._parse_gsa,
            SentenceType.GSV: self._parse_gsv,
            SentenceType.ZDA: self._parse_zda,
            SentenceType.TXT: self._parse_txt,
        }

    @property
    def require_checksum(self) -> bool:
        return self._require_checksum

    @property
    def century_pivot(self) -> int:
        return self._century_pivot

    @property
    def enabled_sentences(self) -> Optional[frozenset[str]]:
        return self._enabled_sentences

    def set_enabled_sentences(self, sentences: Optional[Iterable[str]]) -> None:
        if sentences is None:
            self._enabled_sentences = None
        else:
            self._enabled_sentences = frozenset(s.strip().upper() for s in sentences if s.strip())

    def parse(self, raw: RawSentence) -> GpsRecord:
        """Parse one complete sentence into a record."""
        text = self._decode(raw)
        try:
            return self._parse_text(text)
        except ParseError as exc:
            if exc.sentence is None:
                exc.sentence = text
            raise

    @staticmethod
    def _decode(raw: RawSentence) -> str:
        if isinstance(raw, (bytes, bytearray)):
            try:
                text = bytes(raw).decode("ascii")
            except UnicodeDecodeError:
                raise MalformedSentenceError(
                    "Sentence contains non-ASCII bytes", raw.decode("ascii", errors="replace")
                ) from None
        else:
            text = raw
        return text.rstrip("\r\n")

    def _parse_text(self, text: str) -> GpsRecord:
        if not text.startswith("$"):
            raise MalformedSentenceError("Sentence does not start with '$'")
        if not text.isascii():
            raise MalformedSentenceError("Sentence contains non-ASCII characters")

        body = self._verify_checksum(text[1:])
        if not body:
            raise MalformedSentenceError("Empty sentence")

        parts = body.split(FIELD_DELIMITER)
        talker, sentence_type = self._classify(parts[0])

        fields = parts[1:]
        accepted = FIELD_COUNTS[sentence_type]
        if len(fields) not in accepted:
            raise FieldCountMismatchError(sentence_type.value, accepted, len(fields))

        return self._handlers[sentence_type](talker, fields)

    def _verify_checksum(self, payload: str) -> str:
        """Check and strip the '*HH' suffix, returning the checked body."""
        body, star, checksum_str = payload.partition(CHECKSUM_MARKER)
        calculated = compute_checksum(body)
        if not star:
            if self._require_checksum:
                raise ChecksumMismatchError(None, calculated)
            return body
        expected = _checksum_digits(checksum_str)
        if expected != calculated:
            raise ChecksumMismatchError(checksum_str, calculated)
        return body

    def _classify(self, header: str) -> tuple[str, SentenceType]:
        """Split the address field into talker ID and sentence type."""
        if header.startswith("P"):
            talker, formatter = "P", header[1:]
        elif len(header) == 5:
            talker, formatter = header[:2], header[2:]
        else:
            raise UnsupportedSentenceError(header)

        try:
            sentence_type = SentenceType(formatter.upper())
        except ValueError:
            raise UnsupportedSentenceError(header) from None

        if self._enabled_sentences is not None and sentence_type.value not in self._enabled_sentences:
            raise UnsupportedSentenceError(header)
        return talker, sentence_type

    # ------------------------------------------------------------------
    # Sentence-specific parsers
    # ------------------------------------------------------------------

    def _parse_rmc(self, talker: str, fields: list[str]) -> RMCRecord:
        """Parse $GPRMC: time, status, position, speed, course, date."""
        return RMCRecord(
            talker=talker,
            time=_parse_hms(fields[0]),
            fix_valid=_parse_status(fields[1]),
            latitude=_parse_latlon(fields[2], fields[3], is_lat=True),
            longitude=_parse_latlon(fields[4], fields[5], is_lat=False),
            speed_knots=_parse_decimal(fields[6], "speed_knots"),
            course_deg=_parse_decimal(fields[7], "course_deg"),
            date=_parse_date(fields[8], self._century_pivot),
            magnetic_variation=_parse_signed(fields[9], fields[10], "magnetic_variation"),
            mode=_parse_enum(FaaMode, _optional(fields, 11), "mode"),
        )

    def _parse_gga(self, talker: str, fields: list[str]) -> GGARecord:
        """Parse $GPGGA: time, position, fix quality, satellites, HDOP, altitude."""
        fix_quality = _parse_enum(FixQuality, fields[5], "fix quality", numeric=True)
        return GGARecord(
            talker=talker,
            time=_parse_hms(fields[0]),
            fix_valid=None if fix_quality is None else fix_quality > FixQuality.INVALID,
            latitude=_parse_latlon(fields[1], fields[2], is_lat=True),
            longitude=_parse_latlon(fields[3], fields[4], is_lat=False),
            fix_quality=fix_quality,
            satellites_in_use=_parse_int(fields[6], "satellites_in_use"),
            hdop=_parse_decimal(fields[7], "hdop"),
            altitude_m=_parse_decimal(fields[8], "altitude_m"),
            geoid_separation_m=_parse_decimal(fields[10], "geoid_separation_m"),
            dgps_age_s=_parse_decimal(fields[12], "dgps_age_s"),
            dgps_station_id=fields[13] or None,
        )

    def _parse_gll(self, talker: str, fields: list[str]) -> GLLRecord:
        """Parse $GPGLL: position, time, status."""
        return GLLRecord(
            talker=talker,
            latitude=_parse_latlon(fields[0], fields[1], is_lat=True),
            longitude=_parse_latlon(fields[2], fields[3], is_lat=False),
            time=_parse_hms(fields[4]),
            fix_valid=_parse_status(fields[5]),
            mode=_parse_enum(FaaMode, _optional(fields, 6), "mode"),
        )

    def _parse_vtg(self, talker: str, fields: list[str]) -> VTGRecord:
        """Parse $GPVTG: course and ground speed."""
        return VTGRecord(
            talker=talker,
            course_deg=_parse_decimal(fields[0], "course_deg"),
            course_magnetic_deg=_parse_decimal(fields[2], "course_magnetic_deg"),
            speed_knots=_parse_decimal(fields[4], "speed_knots"),
            speed_kmh=_parse_decimal(fields[6], "speed_kmh"),
            mode=_parse_enum(FaaMode, _optional(fields, 8), "mode"),
        )

    def _parse_gsa(self, talker: str, fields: list[str]) -> GSARecord:
        """Parse $GPGSA: fix mode, satellites used, PDOP, HDOP, VDOP."""
        satellite_ids = tuple(
            _parse_int(value, "satellite_id") for value in fields[2:14] if value
        )
        return GSARecord(
            talker=talker,
            selection_mode=_parse_enum(SelectionMode, fields[0], "selection mode"),
            fix_type=_parse_enum(FixType, fields[1], "fix type", numeric=True),
            satellite_ids=satellite_ids,
            pdop=_parse_decimal(fields[14], "pdop"),
            hdop=_parse_decimal(fields[15], "hdop"),
            vdop=_parse_decimal(fields[16], "vdop"),
        )

    def _parse_gsv(self, talker: str, fields: list[str]) -> GSVRecord:
        """Parse $GPGSV: satellites in view, up to four per sentence."""
        trailing = (len(fields) - 3) % 4  # NMEA 4.1 signal ID
        blocks = fields[3:len(fields) - trailing]
        satellites = []
        for offset in range(0, len(blocks), 4):
            prn, elevation, azimuth, snr = blocks[offset:offset + 4]
            if not prn:
                continue
            satellites.append(
                SatelliteInfo(
                    prn=_parse_int(prn, "prn"),
                    elevation_deg=_parse_int(elevation, "elevation_deg", signed=True),
                    azimuth_deg=_parse_int(azimuth, "azimuth_deg"),
                    snr_db=_parse_int(snr, "snr_db"),
                )
            )
        return GSVRecord(
            talker=talker,
            total_messages=_parse_int(fields[0], "total_messages"),
            message_number=_parse_int(fields[1], "message_number"),
            satellites_in_view=_parse_int(fields[2], "satellites_in_view"),
            satellites=tuple(satellites),
        )

    def _parse_zda(self, talker: str, fields: list[str]) -> ZDARecord:
        """Parse $GPZDA: time, day, month, four-digit year, local zone."""
        day, month, year = fields[1], fields[2], fields[3]
        date_value = None
        if day and month and year:
            if not (day.isdigit() and month.isdigit() and len(year) == 4 and year.isdigit()):
                raise InvalidDateError(f"Malformed date {day}/{month}/{year}")
            try:
                date_value = dt.date(int(year), int(month), int(day))
            except ValueError:
                raise InvalidDateError(f"Date out of range {day}/{month}/{year}") from None
        return ZDARecord(
            talker=talker,
            time=_parse_hms(fields[0]),
            date=date_value,
            local_zone_hours=_parse_int(fields[4], "local_zone_hours", signed=True),
            local_zone_minutes=_parse_int(fields[5], "local_zone_minutes"),
        )

    def _parse_txt(self, talker: str, fields: list[str]) -> TXTRecord:
        """Parse $GPTXT: receiver status text (e.g. ANTENNA OPEN)."""
        return TXTRecord(
            talker=talker,
            total_messages=_parse_int(fields[0], "total_messages"),
            message_number=_parse_int(fields[1], "message_number"),
            text_type=_parse_int(fields[2], "text_type"),
            text=fields[3],
        )


def parse_sentence(
    raw: RawSentence,
    *,
    require_checksum: bool = REQUIRE_CHECKSUM,
    century_pivot: int = CENTURY_PIVOT,
) -> GpsRecord:
    """Parse one sentence with a throwaway :class:`NMEAParser`."""
    return NMEAParser(require_checksum=require_checksum, century_pivot=century_pivot).parse(raw)
