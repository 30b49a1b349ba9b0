"""Conversions of driver temporal values into timezone-aware timestamps."""

from __future__ import annotations
import struct
from datetime import date, datetime, time, timedelta, timezone, tzinfo
from typing import Any, Optional

import pendulum

# Layout of the ODBC SQL_SS_TIMESTAMPOFFSET_STRUCT returned for datetimeoffset:
# year, month, day, hour, minute, second, fraction (ns), tz hour, tz minute
_TIMESTAMPOFFSET_STRUCT = struct.Struct("<6hI2h")


def decode_timestamp_offset(raw: Optional[bytes]) -> Optional[datetime]:
    """Decode a raw ``SQL_SS_TIMESTAMPOFFSET_STRUCT`` into an aware datetime.

    pyodbc passes SQL NULL as ``None``.
    """
    if raw is None:
        return None
    year, month, day, hour, minute, second, fraction, tz_hour, tz_minute = \
        _TIMESTAMPOFFSET_STRUCT.unpack(raw[:_TIMESTAMPOFFSET_STRUCT.size])
    offset = timezone(timedelta(hours=tz_hour, minutes=tz_minute))
    return datetime(year, month, day, hour, minute, second, fraction // 1000, tzinfo=offset)


def localize(value: datetime, zone: tzinfo) -> datetime:
    """Attach ``zone`` to a naive datetime; aware values are returned as-is."""
    if value.tzinfo is not None:
        return value
    if hasattr(zone, "convert"):
        return zone.convert(value)
    return value.replace(tzinfo=zone)


def to_timestamp(value: Any, zone: tzinfo) -> Optional[datetime]:
    """Convert a driver value to a UTC datetime.

    Naive values are interpreted in ``zone``. Accepts datetimes, dates, ISO-8601
    strings and raw datetimeoffset structs.
    """
    if value is None:
        return None
    if isinstance(value, (bytes, bytearray, memoryview)):
        value = decode_timestamp_offset(bytes(value))
    elif isinstance(value, str):
        parsed = pendulum.parse(value, tz=None, exact=True)
        if isinstance(parsed, datetime):
            value = parsed
        elif isinstance(parsed, date):
            value = datetime(parsed.year, parsed.month, parsed.day)
        else:
            raise ValueError(f"Cannot convert '{value}' to a timestamp")
    elif isinstance(value, date) and not isinstance(value, datetime):
        value = datetime(value.year, value.month, value.day)

    if not isinstance(value, datetime):
        raise TypeError(f"Cannot convert {type(value).__name__} to a timestamp")
    return localize(value, zone).astimezone(timezone.utc)


def to_date(value: Any) -> Optional[date]:
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return pendulum.parse(str(value), exact=True)


def to_time(value: Any) -> Optional[time]:
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.time()
    if isinstance(value, time):
        return value
    return pendulum.parse(str(value), exact=True)
