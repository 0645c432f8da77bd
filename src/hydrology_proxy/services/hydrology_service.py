"""
Client-side hydrology data service.

Talks to the proxy when real-data mode is on and the proxy answers its health
check; otherwise, or when the proxy call fails, generates location-aware
synthetic data locally so the dashboard always has something to render.
"""

import logging
from datetime import date
from typing import Dict, Any, Optional, TYPE_CHECKING

from ..algorithms import SeriesSynthesizer
from ..api import ProxyHealthGate, urls
from ..core import DateUtils, constants
from ..exceptions import HydrologyProxyError
from ..models import Variable, known_variable_keys

if TYPE_CHECKING:
    from ..api import ProxyAPI
    from ..core.config import Config


class HydrologyService:
    """Fetch hydrological data through the proxy, or synthesize it locally."""

    def __init__(
        self,
        proxy_api: "ProxyAPI",
        config: "Config",
        health_gate: Optional[ProxyHealthGate] = None,
        synthesizer: Optional[SeriesSynthesizer] = None,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize hydrology service.

        Args:
            proxy_api: Client for the proxy endpoints
            config: Configuration object
            health_gate: Proxy reachability check
            synthesizer: Local synthetic series generator
            logger: Logger instance
        """
        self.proxy_api = proxy_api
        self.config = config
        self.logger = logger or logging.getLogger(__name__)
        self.health_gate = health_gate or ProxyHealthGate(logger=self.logger)
        self.synthesizer = synthesizer or SeriesSynthesizer(logger=self.logger)
        self.date_utils = DateUtils(logger)
        self.use_real_data = config.use_real_data

        self.logger.info(f"Hydrology service initialized - Real data: {self.use_real_data}")

    def check_proxy_health(self) -> bool:
        """Check the proxy within the configured deadline."""
        return self.health_gate.is_reachable(
            self.config.proxy_base_url,
            self.config.health_timeout_ms
        )

    def fetch_real_data(
        self,
        variable: str,
        latitude: float,
        longitude: float,
        start_date: date,
        end_date: date
    ) -> Dict[str, Any]:
        """
        Fetch one variable through the proxy's single-variable endpoint.

        Raises:
            UpstreamError: If the proxy cannot be reached or answers with an error
        """
        try:
            return self.proxy_api.get_data_rods(variable, latitude, longitude, start_date, end_date)
        except HydrologyProxyError as e:
            self.logger.error(f"Failed to fetch real data for {variable}: {e}")
            raise

    def fetch_bulk_real_data(
        self,
        latitude: float,
        longitude: float,
        days: int = 7,
        today: Optional[date] = None
    ) -> Dict[str, Any]:
        """
        Fetch every known variable for the last N days in one proxy call.

        Raises:
            UpstreamError: If the proxy cannot be reached or answers with an error
        """
        start_date, end_date = self.date_utils.last_n_days(days, today)
        return self.proxy_api.post_bulk_data(
            known_variable_keys(), latitude, longitude, start_date, end_date
        )

    def generate_mock_hydrological_data(
        self,
        latitude: float,
        longitude: float,
        days: int = 7,
        today: Optional[date] = None
    ) -> Dict[str, Dict[str, Any]]:
        """
        Synthesize every known variable for the last N days at a location.

        Returns:
            Mapping of variable key to series, unit, description, source,
            location, dataset variable and lastUpdated
        """
        start_date, end_date = self.date_utils.last_n_days(days, today)
        last_updated = self.date_utils.utc_timestamp()
        results: Dict[str, Dict[str, Any]] = {}

        for variable in Variable:
            series = self.synthesizer.synthesize(
                variable, start_date, end_date, location=(latitude, longitude)
            )
            results[variable.key] = {
                "series": [point.to_dict() for point in series],
                "unit": variable.info.unit,
                "description": variable.info.description,
                "source": constants.SOURCE_LOCAL_MOCK,
                "location": {"lat": latitude, "lng": longitude},
                "variable": variable.dataset_id,
                "lastUpdated": last_updated,
            }

        return results

    def get_hydrological_data(
        self,
        latitude: float,
        longitude: float,
        days: Optional[int] = None,
        today: Optional[date] = None
    ) -> Dict[str, Dict[str, Any]]:
        """
        Get all hydrological variables, real when possible, synthetic otherwise.

        Args:
            latitude: Latitude in decimal degrees
            longitude: Longitude in decimal degrees
            days: Window length (defaults to processing.default_days)
            today: Reference day for the window

        Returns:
            Mapping of variable key to result dictionary
        """
        days = days or self.config.default_days

        if not self.use_real_data:
            self.logger.info("Real data mode disabled, using mock data")
        elif not self.check_proxy_health():
            self.logger.warning("Proxy server unavailable, using mock data")
        else:
            try:
                self.logger.info("Fetching real NASA data via proxy")
                result = self.fetch_bulk_real_data(latitude, longitude, days, today)
                hydrological = result.get("hydrological") if isinstance(result, dict) else None
                if isinstance(hydrological, dict):
                    self.logger.info("Real NASA data fetched successfully")
                    return hydrological
                self.logger.warning("Proxy response carried no hydrological data, falling back to mock data")
            except HydrologyProxyError as e:
                self.logger.warning(f"Real NASA data failed, falling back to mock data: {e}")

        return self.generate_mock_hydrological_data(latitude, longitude, days, today)

    def get_giovanni_url(
        self,
        latitude: float,
        longitude: float,
        variable: str = constants.GIOVANNI_DEFAULT_VARIABLE,
        days: int = constants.GIOVANNI_DEFAULT_DAYS,
        today: Optional[date] = None
    ) -> str:
        """Giovanni link from the proxy when available, built locally otherwise."""
        if self.use_real_data:
            try:
                return self.proxy_api.get_giovanni_url(latitude, longitude, variable, days)
            except (HydrologyProxyError, KeyError, TypeError) as e:
                self.logger.warning(f"Failed to get Giovanni URL from proxy: {e}")

        return urls.giovanni_url(
            latitude, longitude, variable, days, today, base_url=self.config.giovanni_url
        )

    def get_worldview_url(
        self,
        latitude: float,
        longitude: float,
        layers: str = constants.WORLDVIEW_DEFAULT_LAYERS,
        today: Optional[date] = None
    ) -> str:
        """Worldview link from the proxy when available, built locally otherwise."""
        if self.use_real_data:
            try:
                return self.proxy_api.get_worldview_url(latitude, longitude, layers)
            except (HydrologyProxyError, KeyError, TypeError) as e:
                self.logger.warning(f"Failed to get Worldview URL from proxy: {e}")

        return urls.worldview_url(
            latitude, longitude, layers, today, base_url=self.config.worldview_url
        )

    def get_comprehensive_data(
        self,
        latitude: float,
        longitude: float,
        days: Optional[int] = None,
        today: Optional[date] = None
    ) -> Dict[str, Any]:
        """
        Assemble hydrological data, CPTEC products and viewer links for a location.

        Returns:
            Dictionary with hydrological, cptec, links, coordinates, timestamp,
            dataMode and note
        """
        self.logger.info(f"Fetching comprehensive data for ({latitude}, {longitude})")

        hydrological = self.get_hydrological_data(latitude, longitude, days, today)
        cptec = urls.cptec_products(latitude, longitude, today, base_url=self.config.cptec_url)

        is_real = any(
            constants.SOURCE_UPSTREAM in str(result.get("source", ""))
            for result in hydrological.values()
            if isinstance(result, dict)
        )

        return {
            "hydrological": hydrological,
            "cptec": cptec,
            "links": {
                "giovanni": self.get_giovanni_url(latitude, longitude, today=today),
                "worldview": self.get_worldview_url(latitude, longitude, today=today),
                "earthdataSearch": urls.earthdata_search_url(
                    latitude, longitude, base_url=self.config.earthdata_search_url
                ),
            },
            "coordinates": {"lat": latitude, "lng": longitude},
            "timestamp": self.date_utils.utc_timestamp(),
            "dataMode": "real" if is_real else "mock",
            "note": (
                "Real NASA data accessed via backend proxy"
                if is_real
                else "Mock data used - start proxy server for real NASA data access"
            ),
        }
