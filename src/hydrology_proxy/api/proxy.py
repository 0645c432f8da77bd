"""
Client for the hydrology proxy's own HTTP endpoints.

Used by the client-side hydrology service.
"""

import logging
from datetime import date
from typing import Dict, Any, Iterable

from .client import APIClient
from ..core import DateUtils, constants


class ProxyAPI(APIClient):
    """Proxy endpoint operations."""

    logger: logging.Logger

    def get_data_rods(
        self,
        variable: str,
        latitude: float,
        longitude: float,
        start_date: date,
        end_date: date,
        response_format: str = constants.DEFAULT_FORMAT
    ) -> Dict[str, Any]:
        """
        Fetch one variable through the proxy's single-variable endpoint.

        Returns:
            Response object with data, source, status, variable, location and dateRange
        """
        params = {
            "variable": variable,
            "latitude": str(latitude),
            "longitude": str(longitude),
            "startDate": DateUtils.format_date(start_date),
            "endDate": DateUtils.format_date(end_date),
            "format": response_format,
        }
        return self.get("/api/nasa/data-rods", params=params)

    def post_bulk_data(
        self,
        variables: Iterable[str],
        latitude: float,
        longitude: float,
        start_date: date,
        end_date: date
    ) -> Dict[str, Any]:
        """
        Fetch several variables in one round trip.

        Returns:
            Envelope with hydrological, coordinates, timestamp and source
        """
        body = {
            "variables": list(variables),
            "latitude": latitude,
            "longitude": longitude,
            "startDate": DateUtils.format_date(start_date),
            "endDate": DateUtils.format_date(end_date),
        }
        self.logger.debug(f"Bulk request for {len(body['variables'])} variables")
        return self.post("/api/nasa/bulk-data", body)

    def get_giovanni_url(self, latitude: float, longitude: float, variable: str, days: int) -> str:
        params = {"latitude": latitude, "longitude": longitude, "variable": variable, "days": days}
        return self.get("/api/nasa/giovanni-url", params=params)["url"]

    def get_worldview_url(self, latitude: float, longitude: float, layers: str) -> str:
        params = {"latitude": latitude, "longitude": longitude, "layers": layers}
        return self.get("/api/nasa/worldview-url", params=params)["url"]
