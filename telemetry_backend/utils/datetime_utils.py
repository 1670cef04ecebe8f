"""
Centralized DateTime Utilities
==============================

Provides consistent datetime handling for the telemetry pipeline.
Every timestamp is normalized to a timezone-aware UTC datetime.

Functions:
- utc_now(): current UTC time, truncated to millisecond precision
- ensure_utc(): normalize naive/aware datetimes to UTC
- parse_iso(): safely parse ISO 8601 string to datetime
- to_iso(): convert datetime object to ISO 8601 string (millisecond precision, "Z")
- from_epoch_millis() / to_epoch_millis(): epoch milliseconds conversion
- coerce_timestamp(): accept any wire representation of a timestamp

Event timestamps travel in two shapes: ISO strings (`createdAt` from the
events API) and epoch milliseconds (`timestamp` on locally buffered events).
"""
from datetime import datetime, timezone as dt_timezone
from typing import Any, Optional


def utc_now() -> datetime:
    """
    Get current UTC time as a timezone-aware datetime.

    Truncated to milliseconds, which is the precision MongoDB stores
    (BSON Date), so a value read back equals the value written.
    """
    now = datetime.now(dt_timezone.utc)
    return now.replace(microsecond=(now.microsecond // 1000) * 1000)


def ensure_utc(dt: Optional[datetime]) -> Optional[datetime]:
    """
    Normalize a datetime into a timezone-aware UTC datetime.

    - If dt is None -> None
    - If dt is naive -> assume it represents UTC (this matches MongoDB/PyMongo behavior)
    - If dt is aware -> convert to UTC
    """
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=dt_timezone.utc)
    return dt.astimezone(dt_timezone.utc)


def parse_iso(dt_str: Optional[str]) -> Optional[datetime]:
    """
    Parse ISO 8601 string to a UTC datetime.

    Args:
        dt_str: ISO 8601 string (e.g., "2025-12-24T10:30:00.123Z" or "2025-12-24T10:30:00+05:30")

    Returns:
        timezone-aware UTC datetime, or None if parsing fails
    """
    if not dt_str:
        return None

    try:
        normalized = dt_str.strip().replace("Z", "+00:00")
        return ensure_utc(datetime.fromisoformat(normalized))
    except (ValueError, TypeError):
        return None


def to_iso(dt: Optional[datetime]) -> Optional[str]:
    """
    Convert datetime object to ISO 8601 string with millisecond precision.

    Args:
        dt: datetime object (timezone-aware or naive, naive is treated as UTC)

    Returns:
        ISO 8601 formatted string (e.g., "2025-12-24T10:30:00.123Z"), or None if dt is None
    """
    if dt is None:
        return None
    return ensure_utc(dt).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def from_epoch_millis(value: float) -> datetime:
    return datetime.fromtimestamp(value / 1000.0, tz=dt_timezone.utc)


def to_epoch_millis(dt: datetime) -> int:
    return int(ensure_utc(dt).timestamp() * 1000)


def coerce_timestamp(value: Any) -> Optional[datetime]:
    """
    Interpret a timestamp in any shape the event sources produce.

    Accepts datetime objects, ISO 8601 strings, numeric strings and
    epoch milliseconds. Returns None for anything unparseable.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        return ensure_utc(value)
    if isinstance(value, (int, float)):
        try:
            return from_epoch_millis(value)
        except (OverflowError, OSError, ValueError):
            return None
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            return coerce_timestamp(float(text))
        except ValueError:
            return parse_iso(text)
    return None
