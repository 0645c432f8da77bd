"""
Upstream payload normalization.

Turns the shapes returned by the Data Rods service into a uniform list of
SeriesPoint. Two shapes are recognized:

1. JSON: ``{"data": [{"date_time": ..., "value": ...}, ...]}`` or a bare
   array of ``{"date": ..., "value": ...}`` records.
2. Delimited text: one ``date,value`` row per line, with ``#`` comments and a
   ``Date...`` header line.

Normalization never raises; unusable input yields an empty list.
"""

import json
import logging
import math
import re
from typing import Any, Iterable, List, Optional, Union

from ..core import constants
from ..models import SeriesPoint
from .rounding import round_half_up


# Leading decimal number, as accepted by lenient float parsers
_LEADING_FLOAT = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")

MISSING_VALUES = (None, "NA")


def parse_leading_float(text: str) -> Optional[float]:
    """
    Parse the numeric prefix of a string.

    Returns None when there is no numeric prefix ('NaN', 'row', '').
    """
    match = _LEADING_FLOAT.match(text.strip())
    if not match:
        return None
    return float(match.group(0))


def coerce_number(value: Any) -> Optional[float]:
    """Convert a JSON scalar to a finite float, or None."""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            number = float(text)
        except ValueError:
            return None
    else:
        return None
    return number if math.isfinite(number) else None


class ResponseNormalizer:
    """Normalize raw upstream payloads into series points."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        """
        Initialize normalizer.

        Args:
            logger: Logger instance
        """
        self.logger = logger or logging.getLogger(__name__)

    def normalize(self, raw_payload: Union[str, bytes, dict, list, None], variable: str = "") -> List[SeriesPoint]:
        """
        Parse a raw payload into an ordered list of points.

        Args:
            raw_payload: Response body text (already-decoded JSON is accepted too)
            variable: Variable key, used for logging only

        Returns:
            Series points in payload order; empty when nothing usable was found
        """
        if isinstance(raw_payload, (dict, list)):
            return self.normalize_structured(raw_payload, variable)

        if isinstance(raw_payload, bytes):
            raw_payload = raw_payload.decode("utf-8", errors="replace")

        if not isinstance(raw_payload, str) or not raw_payload.strip():
            self.logger.debug(f"Empty payload for {variable or 'unknown variable'}")
            return []

        try:
            parsed = json.loads(raw_payload)
        except (ValueError, RecursionError):
            return self.normalize_text(raw_payload, variable)

        return self.normalize_structured(parsed, variable)

    def normalize_structured(self, parsed: Any, variable: str = "") -> List[SeriesPoint]:
        """
        Extract points from decoded JSON.

        Accepts an object with a 'data' array of {date_time, value} records or
        a bare array of {date, value} records. Records whose value is null or
        'NA' are dropped; values are coerced to float but not rounded.
        """
        if isinstance(parsed, dict) and isinstance(parsed.get("data"), list):
            records = parsed["data"]
        elif isinstance(parsed, list):
            records = parsed
        else:
            self.logger.warning(
                f"Unrecognized JSON payload for {variable or 'unknown variable'}: "
                f"{type(parsed).__name__}"
            )
            return []

        return list(self._records_to_points(records))

    def _records_to_points(self, records: Iterable[Any]) -> Iterable[SeriesPoint]:
        for record in records:
            if not isinstance(record, dict):
                continue

            raw_value = record.get("value")
            if raw_value in MISSING_VALUES:
                continue

            date = record.get("date_time", record.get("date"))
            if not isinstance(date, str) or not date.strip():
                continue

            value = coerce_number(raw_value)
            if value is None:
                continue

            yield SeriesPoint(date=date.strip(), value=value)

    def normalize_text(self, text: str, variable: str = "") -> List[SeriesPoint]:
        """
        Extract points from comma-delimited text.

        Skips blank lines, '#' comments, 'Date' headers and lines without a
        comma. Values are rounded to 3 decimals; unparseable values are dropped.
        """
        series: List[SeriesPoint] = []

        for line in text.split("\n"):
            if not line.strip():
                continue
            if line.startswith("#") or line.startswith("Date") or "," not in line:
                continue

            parts = line.split(",")
            date = parts[0].strip()
            value = parse_leading_float(parts[1])

            if value is None or not math.isfinite(value):
                continue

            series.append(SeriesPoint(
                date=date,
                value=round_half_up(value, constants.TEXT_DECIMALS),
            ))

        self.logger.debug(f"Parsed {len(series)} text rows for {variable or 'unknown variable'}")
        return series
