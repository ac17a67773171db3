# gleam_api/utils/datetime_utils.py
"""
Centralized date/time helpers.

Everything the backend stores or compares is a timezone-aware UTC datetime;
clients send and receive ISO 8601 strings.
"""

import logging
from datetime import datetime, timezone
from typing import Any
from dateutil import parser as dateutil_parser

logger = logging.getLogger(__name__)


class DateTimeUtils:
    """UTC date/time helpers shared by the services."""

    @staticmethod
    def now() -> datetime:
        """Current time as a UTC timezone-aware datetime."""
        return datetime.now(timezone.utc)

    @staticmethod
    def parse_iso_datetime(iso_string: str) -> datetime:
        """
        Parse an ISO 8601 string into a UTC datetime.

        Supported forms:
        - 2024-01-15T10:30:00Z
        - 2024-01-15T10:30:00+09:00
        - 2024-01-15T10:30:00.123456Z
        - 2024-01-15T10:30:00 (assumed UTC)
        """
        if not iso_string or not isinstance(iso_string, str):
            raise ValueError("Cannot parse an empty datetime value")

        try:
            if iso_string.endswith('Z'):
                iso_string = iso_string[:-1] + '+00:00'
            dt = dateutil_parser.isoparse(iso_string)
        except (ValueError, OverflowError) as e:
            logger.debug(f"ISO datetime parse failed: {iso_string} - {e}")
            raise ValueError(f"Invalid ISO datetime: {iso_string}")

        if dt.tzinfo is None:
            dt = dt.replace(tzinfo=timezone.utc)
        return dt.astimezone(timezone.utc)

    @staticmethod
    def from_firestore(obj: Any) -> Any:
        """
        Convert Firestore timestamps (DatetimeWithNanoseconds) in a document
        into plain UTC datetimes, recursing through dicts and lists.
        """
        if isinstance(obj, datetime):
            if obj.tzinfo is None:
                return obj.replace(tzinfo=timezone.utc)
            return datetime.fromtimestamp(obj.timestamp(), tz=timezone.utc)
        if isinstance(obj, dict):
            return {k: DateTimeUtils.from_firestore(v) for k, v in obj.items()}
        if isinstance(obj, list):
            return [DateTimeUtils.from_firestore(item) for item in obj]
        return obj
