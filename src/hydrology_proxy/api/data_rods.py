"""
Data Rods operations for the NASA GES DISC time series service.

Builds the point time-series request for one variable and returns the raw
response body. Shape interpretation is left to the normalizer.
"""

import logging
from datetime import date
from typing import Dict, Any, Optional, Union

from .client import APIClient
from ..core import DateUtils, constants
from ..models import VariableKey, parse_variable


class DataRodsAPI(APIClient):
    """Client for the Data Rods time series endpoint."""

    logger: logging.Logger

    def build_params(
        self,
        variable: Union[str, VariableKey],
        latitude: float,
        longitude: float,
        start_date: date,
        end_date: date,
        response_format: str = constants.DEFAULT_FORMAT
    ) -> Dict[str, Any]:
        """
        Build query parameters for a point time-series request.

        Args:
            variable: Variable key; known keys resolve to their dataset id
            latitude: Latitude in decimal degrees
            longitude: Longitude in decimal degrees
            start_date: First day requested
            end_date: Last day requested
            response_format: Requested payload format ('json' or text formats)

        Returns:
            Query parameters in request order
        """
        parsed = parse_variable(variable)
        return {
            "variable": parsed.dataset_id,
            "latitude": str(float(latitude)),
            "longitude": str(float(longitude)),
            "startDate": DateUtils.format_date(start_date),
            "endDate": DateUtils.format_date(end_date),
            "type": constants.SORT_ORDER,
            "format": response_format,
        }

    def fetch_variable(
        self,
        variable: Union[str, VariableKey],
        latitude: float,
        longitude: float,
        start_date: date,
        end_date: date,
        response_format: str = constants.DEFAULT_FORMAT
    ) -> str:
        """
        Fetch the raw time series payload for one variable.

        A single attempt is made; retrying is the caller's decision.

        Returns:
            Response body text, whatever its shape

        Raises:
            UpstreamAuthFailed: Credentials rejected
            UpstreamUnavailable: Non-2xx status, network error or timeout
        """
        params = self.build_params(
            variable, latitude, longitude, start_date, end_date, response_format
        )
        self.logger.info(
            f"Fetching {params['variable']} at ({params['latitude']}, {params['longitude']}) "
            f"from {params['startDate']} to {params['endDate']}"
        )
        return self.get_text(params=params)
