"""Latest-known fix built up from successive sentences.

Receivers spread one epoch over several sentences (RMC for speed and date,
GGA for altitude and satellites, GSA for DOP...). ``FixAccumulator`` merges
the records it is given into a single ``GPSFixSnapshot``; only fields a
record actually carries overwrite the snapshot.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
import datetime as dt
import time
from typing import Optional

from .constants import FIX_MODE_MAP, KMH_PER_KNOT, MPH_PER_KNOT
from .parsers.nmea_types import (
    GGARecord,
    GpsRecord,
    GSARecord,
    GSVRecord,
    UtcTime,
    VTGRecord,
)


@dataclass(slots=True)
class GPSFixSnapshot:
    """GPS fix data from NMEA sentences, updated incrementally."""

    time: Optional[UtcTime] = None
    date: Optional[dt.date] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    altitude_m: Optional[float] = None
    speed_knots: Optional[float] = None
    speed_kmh: Optional[float] = None
    speed_mph: Optional[float] = None
    course_deg: Optional[float] = None
    fix_quality: Optional[int] = None
    fix_mode: Optional[str] = None
    satellites_in_use: Optional[int] = None
    satellites_in_view: Optional[int] = None
    hdop: Optional[float] = None
    vdop: Optional[float] = None
    pdop: Optional[float] = None
    fix_valid: bool = False
    last_sentence: Optional[str] = None
    last_update_monotonic: float = 0.0

    @property
    def timestamp(self) -> Optional[dt.datetime]:
        """UTC datetime of the last fix when both date and time are known."""
        if self.date is None or self.time is None:
            return None
        return dt.datetime.combine(self.date, self.time.to_time())

    def age_seconds(self) -> Optional[float]:
        """Return seconds since last update, or None if never updated."""
        if not self.last_update_monotonic:
            return None
        return max(0.0, time.monotonic() - self.last_update_monotonic)

    def has_position(self) -> bool:
        """Return True if we have a valid position fix."""
        return (
            self.latitude is not None
            and self.longitude is not None
            and self.fix_valid
        )

    def copy(self) -> "GPSFixSnapshot":
        """Create a shallow copy of this snapshot."""
        return replace(self)


class FixAccumulator:
    """Merges parsed records into a running ``GPSFixSnapshot``."""

    def __init__(self) -> None:
        self._fix = GPSFixSnapshot()

    @property
    def fix(self) -> GPSFixSnapshot:
        """Current accumulated GPS fix data."""
        return self._fix

    def reset(self) -> None:
        """Reset accumulated state to initial values."""
        self._fix = GPSFixSnapshot()

    def update(self, record: GpsRecord) -> GPSFixSnapshot:
        """Apply ``record`` to the snapshot and return it."""
        fix = self._fix

        # Position
        if record.latitude is not None and record.longitude is not None:
            fix.latitude = record.latitude
            fix.longitude = record.longitude

        # Time and date; the date persists so GGA times pair with the last RMC/ZDA date
        if record.time is not None:
            fix.time = record.time
        if record.date is not None:
            fix.date = record.date

        if record.fix_valid is not None:
            fix.fix_valid = record.fix_valid

        if record.course_deg is not None:
            fix.course_deg = float(record.course_deg)

        # Speed (with unit conversions)
        if record.speed_knots is not None:
            fix.speed_knots = float(record.speed_knots)
            fix.speed_kmh = fix.speed_knots * KMH_PER_KNOT
            fix.speed_mph = fix.speed_knots * MPH_PER_KNOT
        elif isinstance(record, VTGRecord) and record.speed_kmh is not None:
            fix.speed_kmh = float(record.speed_kmh)
            fix.speed_knots = fix.speed_kmh / KMH_PER_KNOT
            fix.speed_mph = fix.speed_knots * MPH_PER_KNOT

        if isinstance(record, GGARecord):
            if record.fix_quality is not None:
                fix.fix_quality = int(record.fix_quality)
            if record.satellites_in_use is not None:
                fix.satellites_in_use = record.satellites_in_use
            if record.altitude_m is not None:
                fix.altitude_m = float(record.altitude_m)
            if record.hdop is not None:
                fix.hdop = float(record.hdop)

        elif isinstance(record, GSARecord):
            if record.fix_type is not None:
                fix.fix_mode = FIX_MODE_MAP.get(int(record.fix_type))
            if record.pdop is not None:
                fix.pdop = float(record.pdop)
            if record.hdop is not None:
                fix.hdop = float(record.hdop)
            if record.vdop is not None:
                fix.vdop = float(record.vdop)

        elif isinstance(record, GSVRecord):
            if record.satellites_in_view is not None:
                fix.satellites_in_view = record.satellites_in_view

        # Metadata
        fix.last_sentence = record.tag
        fix.last_update_monotonic = time.monotonic()
        return fix
