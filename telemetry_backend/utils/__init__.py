"""Utility modules for the telemetry backend application."""

from .datetime_utils import (
    coerce_timestamp,
    ensure_utc,
    from_epoch_millis,
    parse_iso,
    to_epoch_millis,
    to_iso,
    utc_now,
)

__all__ = [
    "coerce_timestamp",
    "ensure_utc",
    "from_epoch_millis",
    "parse_iso",
    "to_epoch_millis",
    "to_iso",
    "utc_now",
]
