"""
Request validation for proxy endpoints.

Validation errors abort a request before any upstream work starts.
"""

import math
from typing import Any, Dict, List, Mapping, Tuple

from ..core import DateUtils
from ..exceptions import ValidationError
from ..models import BulkRequest


BULK_REQUIRED = ("variables", "latitude", "longitude", "startDate", "endDate")
SINGLE_REQUIRED = ("variable", "latitude", "longitude", "startDate", "endDate")


def _is_missing(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def parse_coordinate(value: Any, field: str, limit: float) -> float:
    """
    Parse a latitude/longitude given as number or numeric string.

    Raises:
        ValidationError: If missing, non-numeric, non-finite or out of range
    """
    if _is_missing(value) or isinstance(value, bool):
        raise ValidationError(f"Missing required parameter: {field}")
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid {field}: {value!r}")
    if not math.isfinite(number) or abs(number) > limit:
        raise ValidationError(f"Invalid {field}: {value!r} (must be within ±{limit:g})")
    return number


def validate_coordinates(latitude: Any, longitude: Any) -> Tuple[float, float]:
    return (
        parse_coordinate(latitude, "latitude", 90.0),
        parse_coordinate(longitude, "longitude", 180.0),
    )


def validate_variables(variables: Any) -> List[str]:
    """
    Check the requested variable keys.

    Returns:
        Keys in request order with duplicates removed
    """
    if not isinstance(variables, (list, tuple)):
        raise ValidationError("variables must be an array of variable keys")
    for key in variables:
        if not isinstance(key, str) or not key.strip():
            raise ValidationError(f"Invalid variable key: {key!r}")
    return list(dict.fromkeys(variables))


def missing_fields(payload: Mapping[str, Any], required: Tuple[str, ...]) -> List[str]:
    return [name for name in required if _is_missing(payload.get(name))]


def validate_bulk_request(payload: Any) -> BulkRequest:
    """
    Validate a bulk request body.

    Args:
        payload: Decoded JSON body

    Returns:
        BulkRequest with parsed coordinates and dates

    Raises:
        ValidationError: On any missing or malformed field
    """
    if not isinstance(payload, dict):
        raise ValidationError("Request body must be a JSON object")

    missing = missing_fields(payload, BULK_REQUIRED)
    if missing:
        raise ValidationError(
            "Missing required parameters: variables (array), latitude, longitude, "
            f"startDate, endDate (missing: {', '.join(missing)})"
        )

    latitude, longitude = validate_coordinates(payload["latitude"], payload["longitude"])
    return BulkRequest(
        variables=validate_variables(payload["variables"]),
        latitude=latitude,
        longitude=longitude,
        start_date=DateUtils.parse_iso_date(payload["startDate"], "startDate"),
        end_date=DateUtils.parse_iso_date(payload["endDate"], "endDate"),
    )


def validate_single_request(params: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Validate single-variable query parameters.

    Returns:
        Dictionary with variable, latitude, longitude, start_date, end_date, response_format
    """
    missing = missing_fields(params, SINGLE_REQUIRED)
    if missing:
        raise ValidationError(
            "Missing required parameters: variable, latitude, longitude, startDate, endDate"
        )

    latitude, longitude = validate_coordinates(params["latitude"], params["longitude"])
    return {
        "variable": params["variable"].strip(),
        "latitude": latitude,
        "longitude": longitude,
        "start_date": DateUtils.parse_iso_date(params["startDate"], "startDate"),
        "end_date": DateUtils.parse_iso_date(params["endDate"], "endDate"),
        "response_format": params.get("format") or "json",
    }
