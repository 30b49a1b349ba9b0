"""Helpers for reading table structure from driver metadata."""

from .base import (
    ProbeResult,
    nullability_from_metadata,
    parse_yes_no,
    probe_auto_increment,
    read_metadata_field,
)

__all__ = [
    "ProbeResult",
    "nullability_from_metadata",
    "parse_yes_no",
    "probe_auto_increment",
    "read_metadata_field",
]
