# petconnect/utils/datetime_utils.py
"""
Central date/time helpers.

- every timestamp the backend writes is a timezone-aware UTC datetime
- documents are normalized with for_firestore before they are written
- the client layer parses the ISO strings the API returns with parse_iso_datetime
"""

import logging
from datetime import datetime, date, timezone, time
from typing import Any, Union
from dateutil import parser as dateutil_parser

logger = logging.getLogger(__name__)


class DateTimeUtils:
    """Date/time helpers shared by the services and the client layer."""

    @staticmethod
    def now() -> datetime:
        """Current time as a UTC timezone-aware datetime."""
        return datetime.now(timezone.utc)

    @staticmethod
    def parse_iso_datetime(iso_string: str) -> datetime:
        """
        Parses an ISO-8601 string into a UTC datetime.

        Accepted forms:
        - 2024-01-15T10:30:00Z
        - 2024-01-15T10:30:00+09:00
        - 2024-01-15T10:30:00.123456Z
        - 2024-01-15T10:30:00 (assumed UTC)
        """
        try:
            if not iso_string:
                raise ValueError("cannot parse an empty string")

            if iso_string.endswith('Z'):
                iso_string = iso_string[:-1] + '+00:00'

            dt = dateutil_parser.isoparse(iso_string)
            if dt.tzinfo is None:
                dt = dt.replace(tzinfo=timezone.utc)
            return dt.astimezone(timezone.utc)

        except Exception as e:
            logger.error(f"ISO datetime parse failed: {iso_string} - {e}")
            raise ValueError(f"Invalid ISO datetime: {iso_string}")

    @staticmethod
    def to_iso_string(dt: datetime) -> str:
        """datetime -> ISO string with a 'Z' suffix."""
        if dt.tzinfo is None:
            dt = dt.replace(tzinfo=timezone.utc)
        else:
            dt = dt.astimezone(timezone.utc)
        return dt.isoformat().replace('+00:00', 'Z')

    @staticmethod
    def coerce_datetime(value: Union[str, datetime, date, None]) -> datetime:
        """
        Best-effort conversion used for sorting. Unparseable values sort as the epoch.
        """
        if isinstance(value, datetime):
            return value if value.tzinfo else value.replace(tzinfo=timezone.utc)
        if isinstance(value, date):
            return datetime.combine(value, time.min).replace(tzinfo=timezone.utc)
        if isinstance(value, str) and value:
            try:
                return DateTimeUtils.parse_iso_datetime(value)
            except ValueError:
                pass
        return datetime.fromtimestamp(0, tz=timezone.utc)

    @staticmethod
    def for_firestore(obj: Any) -> Any:
        """
        Normalizes date/time values before a Firestore write.

        - date -> datetime (00:00:00 UTC)
        - naive datetime -> UTC aware datetime
        - dicts and lists are converted recursively
        """
        if isinstance(obj, date) and not isinstance(obj, datetime):
            return datetime.combine(obj, time.min).replace(tzinfo=timezone.utc)
        elif isinstance(obj, datetime):
            if obj.tzinfo is None:
                return obj.replace(tzinfo=timezone.utc)
            return obj.astimezone(timezone.utc)
        elif isinstance(obj, dict):
            return {k: DateTimeUtils.for_firestore(v) for k, v in obj.items()}
        elif isinstance(obj, list):
            return [DateTimeUtils.for_firestore(item) for item in obj]
        return obj

    @staticmethod
    def from_firestore(obj: Any) -> Any:
        """
        Converts values read from Firestore (DatetimeWithNanoseconds, naive datetimes)
        into plain UTC datetimes, recursively.
        """
        try:
            if isinstance(obj, datetime):
                if obj.tzinfo is None:
                    return obj.replace(tzinfo=timezone.utc)
                return datetime.fromtimestamp(obj.timestamp(), tz=timezone.utc)
            elif isinstance(obj, dict):
                return {k: DateTimeUtils.from_firestore(v) for k, v in obj.items()}
            elif isinstance(obj, list):
                return [DateTimeUtils.from_firestore(item) for item in obj]
            return obj
        except Exception as e:
            logger.error(f"Firestore read conversion failed: {obj} ({type(obj)}) - {e}")
            return obj
