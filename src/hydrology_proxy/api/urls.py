"""
Link builders for external NASA and CPTEC viewers.

Pure string construction; nothing here performs I/O.
"""

from datetime import date, timedelta
from typing import Dict, Any, Optional
from urllib.parse import urlencode, quote

from ..core import DateUtils, constants


def format_coordinate(value: float) -> str:
    """Render a coordinate without a trailing '.0' for whole numbers."""
    value = float(value)
    if value.is_integer():
        return str(int(value))
    return repr(round(value, 10))


def bbox(latitude: float, longitude: float, delta: float) -> str:
    """Bounding box 'west,south,east,north' around a point."""
    return ",".join(format_coordinate(v) for v in (
        longitude - delta,
        latitude - delta,
        longitude + delta,
        latitude + delta,
    ))


def giovanni_url(
    latitude: float,
    longitude: float,
    variable: str = constants.GIOVANNI_DEFAULT_VARIABLE,
    days: int = constants.GIOVANNI_DEFAULT_DAYS,
    today: Optional[date] = None,
    base_url: str = constants.GIOVANNI_BASE_URL
) -> str:
    """
    Build a Giovanni area-averaged time series link.

    Args:
        latitude: Point latitude
        longitude: Point longitude
        variable: Giovanni data field
        days: Window length ending today
        today: Reference day (defaults to the current UTC date)
        base_url: Giovanni base URL

    Returns:
        Giovanni URL with the query in the fragment
    """
    end_date = today or DateUtils.utc_now().date()
    start_date = end_date - timedelta(days=int(days))

    params = {
        "service": "ArAvTs",
        "starttime": DateUtils.format_date(start_date),
        "endtime": DateUtils.format_date(end_date),
        "bbox": bbox(latitude, longitude, constants.GIOVANNI_BBOX_DELTA),
        "data": variable,
        "variableFacets": constants.GIOVANNI_VARIABLE_FACETS,
        "portal": "GIOVANNI",
    }
    return f"{base_url}/#{urlencode(params)}"


def worldview_url(
    latitude: float,
    longitude: float,
    layers: str = constants.WORLDVIEW_DEFAULT_LAYERS,
    today: Optional[date] = None,
    base_url: str = constants.WORLDVIEW_BASE_URL
) -> str:
    """Build a Worldview imagery link centred on a point."""
    day = today or DateUtils.utc_now().date()
    view = bbox(latitude, longitude, constants.WORLDVIEW_BBOX_DELTA)
    return f"{base_url}/?v={view}&t={DateUtils.format_date(day)}&l={layers}"


def earthdata_search_url(
    latitude: float,
    longitude: float,
    keywords: str = constants.EARTHDATA_DEFAULT_KEYWORDS,
    base_url: str = constants.EARTHDATA_SEARCH_URL
) -> str:
    """Build an Earthdata Search link for a 2x2 degree box around a point."""
    box = bbox(latitude, longitude, 1)
    return f"{base_url}/search?sb={box}&q={quote(keywords, safe='')}"


def is_in_south_america(latitude: float, longitude: float) -> bool:
    """Whether a point falls inside CPTEC coverage."""
    bounds = constants.SOUTH_AMERICA_BOUNDS
    return (
        bounds["min_lat"] <= latitude <= bounds["max_lat"] and
        bounds["min_lon"] <= longitude <= bounds["max_lon"]
    )


def cptec_products(
    latitude: float,
    longitude: float,
    today: Optional[date] = None,
    base_url: str = constants.CPTEC_BASE_URL
) -> Dict[str, Any]:
    """
    Build CPTEC satellite and radar product links.

    Returns:
        Dictionary with forecastUrl, radarUrl, satelliteUrl and available
    """
    day = today or DateUtils.utc_now().date()
    stamp = day.strftime("%Y%m%d")
    return {
        "forecastUrl": f"{base_url}/goes16/produtos/tempo/goes16_ret_ch13_ams_{stamp}.jpg",
        "radarUrl": f"{base_url}/radar/radar_ppi_ams.gif",
        "satelliteUrl": f"{base_url}/goes16/produtos/tempo/goes16_ret_ch13_ams.gif",
        "available": is_in_south_america(latitude, longitude),
    }
