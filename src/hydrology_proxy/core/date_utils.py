"""
Date and timezone utilities.

Centralizes calendar-day arithmetic and UTC timestamp formatting.
"""

import logging
import re
from datetime import date, datetime, timedelta
from typing import Iterator, Optional, Tuple, Union

import pytz

from ..exceptions import ValidationError


ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


class DateUtils:
    """Utilities for calendar dates and UTC timestamps."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        """
        Initialize date utilities.

        Args:
            logger: Logger instance
        """
        self.logger = logger or logging.getLogger(__name__)

    @staticmethod
    def parse_iso_date(value: Union[str, date, None], field: str = "date") -> date:
        """
        Parse a YYYY-MM-DD string or full ISO datetime (or pass a date through).

        Args:
            value: ISO date string, date or datetime
            field: Field name used in the error message

        Returns:
            Calendar date

        Raises:
            ValidationError: If the value is missing or not an ISO date
        """
        if isinstance(value, datetime):
            return value.date()
        if isinstance(value, date):
            return value
        if not isinstance(value, str) or not value.strip():
            raise ValidationError(f"Missing required parameter: {field}")

        text = value.strip()
        if ISO_DATE.match(text):
            try:
                return datetime.strptime(text, "%Y-%m-%d").date()
            except ValueError:
                pass
        elif len(text) > 10 and text[10] in "Tt " and ISO_DATE.match(text[:10]):
            # Full ISO datetime; fromisoformat wants +00:00 rather than Z
            if text[-1] in "Zz":
                text = text[:-1] + "+00:00"
            try:
                return datetime.fromisoformat(text).date()
            except ValueError:
                pass

        raise ValidationError(f"Invalid {field}: {value!r} (expected YYYY-MM-DD)")

    @staticmethod
    def iter_days(start_date: date, end_date: date) -> Iterator[date]:
        """
        Yield every calendar day from start_date to end_date inclusive.

        Nothing is yielded when end_date precedes start_date.
        """
        current = start_date
        while current <= end_date:
            yield current
            current += timedelta(days=1)

    @staticmethod
    def day_of_year(day: date) -> int:
        """1-based ordinal day within the year."""
        return day.timetuple().tm_yday

    @staticmethod
    def format_date(day: date) -> str:
        return day.strftime("%Y-%m-%d")

    @staticmethod
    def utc_now() -> datetime:
        return datetime.now(pytz.UTC)

    @staticmethod
    def to_iso_timestamp(moment: datetime) -> str:
        """
        Format a datetime as an ISO 8601 UTC timestamp with milliseconds.

        Naive datetimes are assumed to be UTC.
        """
        if moment.tzinfo is None:
            moment = pytz.UTC.localize(moment)
        moment = moment.astimezone(pytz.UTC)
        return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")

    def utc_timestamp(self) -> str:
        """Current instant as an ISO 8601 UTC timestamp."""
        return self.to_iso_timestamp(self.utc_now())

    def last_n_days(self, days: int, today: Optional[date] = None) -> Tuple[date, date]:
        """
        Get the inclusive date range covering the last N days, ending today.

        Args:
            days: Number of days in the window (at least 1)
            today: Reference day (defaults to the current UTC date)

        Returns:
            Tuple of (start_date, end_date)
        """
        if days < 1:
            raise ValidationError(f"days must be at least 1, got {days}")

        end_date = today or self.utc_now().date()
        start_date = end_date - timedelta(days=days - 1)

        self.logger.debug(f"Window of {days} days: {start_date} to {end_date}")
        return start_date, end_date
