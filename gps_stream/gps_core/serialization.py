"""JSON-safe views of records and fix snapshots."""

from __future__ import annotations

from dataclasses import fields
import datetime as dt
import decimal
from enum import Enum
import json
from typing import Any, Dict

from .fix_state import GPSFixSnapshot
from .parsers.nmea_types import GpsRecord, SatelliteInfo, UtcTime


def _convert(value: Any) -> Any:
    """Convert Decimal, enums and time types to JSON-friendly values."""
    if isinstance(value, Enum):
        return value.value
    if value is None or isinstance(value, (bool, int, float, str)):
        return value
    if isinstance(value, decimal.Decimal):
        return float(value)
    if isinstance(value, UtcTime):
        return str(value)
    if isinstance(value, (dt.date, dt.datetime)):
        return value.isoformat()
    if isinstance(value, SatelliteInfo):
        return {f.name: getattr(value, f.name) for f in fields(value)}
    if isinstance(value, (tuple, list)):
        return [_convert(item) for item in value]
    return str(value)


def record_to_dict(record: GpsRecord) -> Dict[str, Any]:
    """Flatten a record; absent fields stay None (JSON null)."""
    data = {"tag": record.tag}
    for f in fields(record):
        data[f.name] = _convert(getattr(record, f.name))
    timestamp = record.timestamp()
    data["timestamp"] = timestamp.isoformat() if timestamp else None
    return data


def record_to_json(record: GpsRecord, **kwargs) -> str:
    return json.dumps(record_to_dict(record), **kwargs)


def snapshot_to_dict(fix: GPSFixSnapshot) -> Dict[str, Any]:
    data = {
        f.name: _convert(getattr(fix, f.name))
        for f in fields(fix)
        if f.name != "last_update_monotonic"
    }
    timestamp = fix.timestamp
    data["timestamp"] = timestamp.isoformat() if timestamp else None
    data["has_position"] = fix.has_position()
    return data
