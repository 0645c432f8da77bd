"""
Integration tests across the HTTP layer, reconciler, upstream client and
client-side service.
"""

import json
import random
import unittest
from datetime import date
from unittest.mock import Mock, patch

import pytest
import requests  # type: ignore

from src.hydrology_proxy.algorithms import SeriesSynthesizer
from src.hydrology_proxy.api import DataRodsAPI
from src.hydrology_proxy.core import constants
from src.hydrology_proxy.core.config import Config
from src.hydrology_proxy.services import DataReconciler, HydrologyService
from src.hydrology_proxy.web import create_app


TODAY = date(2025, 10, 6)


def make_config(use_real_data=True):
    config = Mock(spec=Config)
    config.use_real_data = use_real_data
    config.server_port = 3001
    config.cors_origins = list(constants.DEFAULT_CORS_ORIGINS)
    config.proxy_base_url = "http://localhost:3001"
    config.health_timeout_ms = 5000
    config.default_days = 7
    config.giovanni_url = constants.GIOVANNI_BASE_URL
    config.worldview_url = constants.WORLDVIEW_BASE_URL
    config.earthdata_search_url = constants.EARTHDATA_SEARCH_URL
    config.cptec_url = constants.CPTEC_BASE_URL
    return config


@pytest.mark.integration
class TestUnreachableUpstream(unittest.TestCase):
    """Bulk request while the upstream host refuses connections."""

    def setUp(self):
        self.upstream = DataRodsAPI(base_url="https://hydro1.example.test/timeseries.cgi", logger=Mock())
        # Patched on the class so every worker thread's session is covered
        refuse = patch.object(
            requests.Session, "request",
            side_effect=requests.exceptions.ConnectionError("connection refused")
        )
        self.request = refuse.start()
        self.addCleanup(refuse.stop)
        reconciler = DataReconciler(
            upstream=self.upstream,
            synthesizer=SeriesSynthesizer(rng=random.Random(2025)),
            logger=Mock()
        )
        self.client = create_app(make_config(), reconciler, logger=Mock()).test_client()

    def test_bulk_request_falls_back_for_every_variable(self):
        response = self.client.post("/api/nasa/bulk-data", json={
            "variables": ["precipitation", "temperature"],
            "latitude": 37.7749,
            "longitude": -122.4194,
            "startDate": "2025-09-30",
            "endDate": "2025-10-06",
        })

        self.assertEqual(response.status_code, 200)
        hydrological = response.get_json()["hydrological"]

        self.assertEqual(list(hydrological), ["precipitation", "temperature"])
        for key, result in hydrological.items():
            self.assertEqual(result["status"], "fallback", key)
            self.assertEqual(result["source"], "Mock Data (NASA API failed)", key)
            self.assertEqual(len(result["series"]), 7, key)
            self.assertEqual(result["series"][0]["date"], "2025-09-30")
            self.assertEqual(result["series"][-1]["date"], "2025-10-06")
        for point in hydrological["precipitation"]["series"]:
            self.assertGreaterEqual(point["value"], 0)

        # One attempt per variable
        self.assertEqual(self.request.call_count, 2)


@pytest.mark.integration
class TestServiceThroughProxy(unittest.TestCase):
    """Client-side service talking to the proxy app in-process."""

    def setUp(self):
        upstream = Mock()
        upstream.fetch_variable.return_value = json.dumps({"data": [
            {"date_time": "2025-10-05", "value": 4.2},
            {"date_time": "2025-10-06", "value": 3.1},
        ]})
        reconciler = DataReconciler(upstream=upstream, logger=Mock())
        self.client = create_app(make_config(), reconciler, logger=Mock()).test_client()

        proxy_api = Mock()
        proxy_api.post_bulk_data.side_effect = self._post_bulk
        proxy_api.get_giovanni_url.side_effect = lambda lat, lng, variable, days: "g"
        proxy_api.get_worldview_url.side_effect = lambda lat, lng, layers: "w"

        gate = Mock()
        gate.is_reachable.side_effect = lambda url, timeout_ms: self.client.get("/health").status_code == 200

        self.service = HydrologyService(proxy_api, make_config(), health_gate=gate, logger=Mock())

    def _post_bulk(self, variables, latitude, longitude, start_date, end_date):
        response = self.client.post("/api/nasa/bulk-data", json={
            "variables": variables,
            "latitude": latitude,
            "longitude": longitude,
            "startDate": start_date.isoformat(),
            "endDate": end_date.isoformat(),
        })
        return response.get_json()

    def test_comprehensive_data_uses_real_values(self):
        summary = self.service.get_comprehensive_data(-15.8, -47.9, today=TODAY)

        self.assertEqual(summary["dataMode"], "real")
        precipitation = summary["hydrological"]["precipitation"]
        self.assertEqual(precipitation["status"], "success")
        self.assertEqual(precipitation["series"], [
            {"date": "2025-10-05", "value": 4.2},
            {"date": "2025-10-06", "value": 3.1},
        ])
        self.assertEqual(len(summary["hydrological"]), 6)


if __name__ == "__main__":
    unittest.main()
