"""Synthetic NMEA encoder used to build test sentences from known values."""

from __future__ import annotations

import datetime as dt
from decimal import Decimal
from typing import Optional

from gps_stream.gps_core.parsers.nmea_parser import build_sentence


def format_latitude(degrees: float) -> tuple[str, str]:
    """Decimal degrees -> ('ddmm.mmmm', 'N'|'S')."""
    hemisphere = "S" if degrees < 0 else "N"
    whole = int(abs(degrees))
    minutes = (abs(degrees) - whole) * 60
    return f"{whole:02d}{minutes:07.4f}", hemisphere


def format_longitude(degrees: float) -> tuple[str, str]:
    """Decimal degrees -> ('dddmm.mmmm', 'E'|'W')."""
    hemisphere = "W" if degrees < 0 else "E"
    whole = int(abs(degrees))
    minutes = (abs(degrees) - whole) * 60
    return f"{whole:03d}{minutes:07.4f}", hemisphere


def format_time(value: dt.time) -> str:
    text = value.strftime("%H%M%S")
    if value.microsecond:
        text += f".{value.microsecond // 1000:03d}"
    return text


def format_date(value: dt.date) -> str:
    return value.strftime("%d%m%y")


def encode_rmc(
    *,
    time: dt.time,
    latitude: float,
    longitude: float,
    speed_knots: Optional[Decimal],
    course_deg: Optional[Decimal],
    date: dt.date,
    valid: bool = True,
    talker: str = "GP",
) -> bytes:
    lat, ns = format_latitude(latitude)
    lon, ew = format_longitude(longitude)
    fields = [
        f"{talker}RMC",
        format_time(time),
        "A" if valid else "V",
        lat, ns, lon, ew,
        "" if speed_knots is None else str(speed_knots),
        "" if course_deg is None else str(course_deg),
        format_date(date),
        "", "",
    ]
    return build_sentence(",".join(fields))


def encode_gga(
    *,
    time: dt.time,
    latitude: float,
    longitude: float,
    quality: int = 1,
    satellites: int = 8,
    hdop: str = "0.9",
    altitude: str = "545.4",
    talker: str = "GP",
) -> bytes:
    lat, ns = format_latitude(latitude)
    lon, ew = format_longitude(longitude)
    fields = [
        f"{talker}GGA",
        format_time(time),
        lat, ns, lon, ew,
        str(quality), f"{satellites:02d}", hdop, altitude, "M", "46.9", "M", "", "",
    ]
    return build_sentence(",".join(fields))
