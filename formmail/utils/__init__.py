"""Utility functions for time handling and email addresses."""

from .addresses import build_sender_address, is_valid_address, parse_recipients
from .timestamps import (
    ensure_utc,
    format_receipt_date,
    format_receipt_time,
    format_timestamp,
    utc_now,
)

__all__ = [
    # Addresses
    "parse_recipients",
    "is_valid_address",
    "build_sender_address",
    # Timestamps
    "utc_now",
    "ensure_utc",
    "format_receipt_date",
    "format_receipt_time",
    "format_timestamp",
]
