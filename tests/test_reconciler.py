"""
Tests for real-versus-synthetic data reconciliation.
"""

import json
import random
import threading
import unittest
from datetime import date
from unittest.mock import Mock

from src.hydrology_proxy.algorithms import SeriesSynthesizer
from src.hydrology_proxy.exceptions import (
    UpstreamAuthFailed,
    UpstreamUnavailable,
    ValidationError,
)
from src.hydrology_proxy.models import ResultStatus, SeriesPoint
from src.hydrology_proxy.services import DataReconciler


START = date(2025, 9, 30)
END = date(2025, 10, 6)
LAT, LNG = 37.7749, -122.4194

DATA_RODS_JSON = json.dumps({"data": [
    {"date_time": "2025-09-30", "value": 1.25},
    {"date_time": "2025-10-01", "value": 0.5},
]})


class ReconcilerTestCase(unittest.TestCase):
    """Shared setup with a mocked upstream."""

    def setUp(self):
        self.upstream = Mock()
        self.reconciler = DataReconciler(
            upstream=self.upstream,
            synthesizer=SeriesSynthesizer(rng=random.Random(3)),
            logger=Mock()
        )


class TestResolve(ReconcilerTestCase):
    """Test single-variable resolution."""

    def test_success(self):
        self.upstream.fetch_variable.return_value = DATA_RODS_JSON

        result = self.reconciler.resolve("precipitation", LAT, LNG, START, END)

        self.assertEqual(result.status, ResultStatus.SUCCESS)
        self.assertEqual(result.source, "NASA GES DISC")
        self.assertEqual(result.series, (
            SeriesPoint(date="2025-09-30", value=1.25),
            SeriesPoint(date="2025-10-01", value=0.5),
        ))
        self.assertEqual(result.unit, "mm/day")
        self.assertEqual(result.description, "Daily precipitation from GPM IMERG")
        self.assertIsNone(result.error)

    def test_requested_format_forwarded(self):
        self.upstream.fetch_variable.return_value = "2025-09-30,1"

        self.reconciler.resolve("runoff", LAT, LNG, START, END, response_format="csv")

        args = self.upstream.fetch_variable.call_args.args
        self.assertEqual(args[0].key, "runoff")
        self.assertEqual(args[1:], (LAT, LNG, START, END, "csv"))

    def test_upstream_unavailable_falls_back(self):
        self.upstream.fetch_variable.side_effect = UpstreamUnavailable("503 Service Unavailable", 503)

        result = self.reconciler.resolve("temperature", LAT, LNG, START, END)

        self.assertEqual(result.status, ResultStatus.FALLBACK)
        self.assertEqual(result.source, "Mock Data (NASA API failed)")
        self.assertEqual(len(result.series), 7)
        self.assertEqual(result.series[0].date, "2025-09-30")
        self.assertEqual(result.series[-1].date, "2025-10-06")
        self.assertEqual(result.error, "503 Service Unavailable")
        self.assertEqual(result.unit, "°C")

    def test_auth_failure_falls_back(self):
        self.upstream.fetch_variable.side_effect = UpstreamAuthFailed("401 Unauthorized", 401)

        result = self.reconciler.resolve("humidity", LAT, LNG, START, END)

        self.assertEqual(result.status, ResultStatus.FALLBACK)
        self.assertEqual(result.error, "401 Unauthorized")

    def test_empty_payload_is_soft_failure(self):
        for payload in ("", '{"data": []}', "# only a comment"):
            with self.subTest(payload=payload):
                self.upstream.fetch_variable.side_effect = None
                self.upstream.fetch_variable.return_value = payload

                result = self.reconciler.resolve("runoff", LAT, LNG, START, END)

                self.assertEqual(result.status, ResultStatus.FALLBACK)
                self.assertEqual(len(result.series), 7)
                self.assertIn("no usable data", result.error)

    def test_unexpected_error_keeps_variable(self):
        self.upstream.fetch_variable.side_effect = RuntimeError("boom")

        result = self.reconciler.resolve("soilMoisture", LAT, LNG, START, END)

        self.assertEqual(result.status, ResultStatus.ERROR)
        self.assertEqual(result.source, "Mock Data (Error occurred)")
        self.assertEqual(result.error, "boom")
        self.assertEqual(len(result.series), 7)
        self.assertTrue(all(point.value >= 0.05 for point in result.series))

    def test_unknown_variable_metadata(self):
        self.upstream.fetch_variable.side_effect = UpstreamUnavailable("404 Not Found", 404)

        result = self.reconciler.resolve("windSpeed", LAT, LNG, START, END)

        self.assertEqual(result.unit, "units")
        self.assertEqual(result.description, "Unknown parameter")
        self.assertEqual(result.to_dict()["variable"], "windSpeed")
        for point in result.series:
            self.assertTrue(0 <= point.value <= 10)

    def test_mock_mode_skips_upstream(self):
        reconciler = DataReconciler(upstream=self.upstream, use_real_data=False, logger=Mock())

        result = reconciler.resolve("precipitation", LAT, LNG, START, END)

        self.upstream.fetch_variable.assert_not_called()
        self.assertEqual(result.status, ResultStatus.FALLBACK)
        self.assertEqual(result.source, "Mock Data (NASA API proxy fallback)")
        self.assertIsNone(result.error)

    def test_no_upstream_configured(self):
        reconciler = DataReconciler(upstream=None, logger=Mock())
        result = reconciler.resolve("runoff", LAT, LNG, START, END)
        self.assertEqual(result.status, ResultStatus.FALLBACK)

    def test_result_serialization(self):
        self.upstream.fetch_variable.side_effect = UpstreamUnavailable("timeout")

        data = self.reconciler.resolve("soilMoisture", LAT, LNG, START, END).to_dict()

        self.assertEqual(data["status"], "fallback")
        self.assertEqual(data["variable"], "GLDAS_NOAH025_3H_2_1_SoilMoi0_10cm_inst")
        self.assertEqual(data["unit"], "m³/m³")
        self.assertEqual(data["error"], "timeout")
        self.assertEqual(set(data["series"][0]), {"date", "value"})


class TestResolveAll(ReconcilerTestCase):
    """Test bulk resolution."""

    def test_every_variable_present_regardless_of_outcome(self):
        def fetch(variable, *args):
            if variable.key == "precipitation":
                return DATA_RODS_JSON
            if variable.key == "temperature":
                raise UpstreamUnavailable("502 Bad Gateway", 502)
            if variable.key == "humidity":
                return ""
            raise RuntimeError("unexpected")

        self.upstream.fetch_variable.side_effect = fetch
        keys = ["precipitation", "temperature", "humidity", "runoff"]

        envelope = self.reconciler.resolve_all(keys, LAT, LNG, START, END)

        self.assertEqual(list(envelope.results), keys)
        self.assertEqual(envelope.results["precipitation"].status, ResultStatus.SUCCESS)
        self.assertEqual(envelope.results["temperature"].status, ResultStatus.FALLBACK)
        self.assertEqual(envelope.results["humidity"].status, ResultStatus.FALLBACK)
        self.assertEqual(envelope.results["runoff"].status, ResultStatus.ERROR)

    def test_duplicate_keys_collapse(self):
        self.upstream.fetch_variable.side_effect = UpstreamUnavailable("down")

        envelope = self.reconciler.resolve_all(
            ["runoff", "runoff", "humidity"], LAT, LNG, START, END
        )

        self.assertEqual(list(envelope.results), ["runoff", "humidity"])
        self.assertEqual(self.upstream.fetch_variable.call_count, 2)

    def test_fetches_run_concurrently(self):
        keys = ["precipitation", "soilMoisture", "runoff"]
        barrier = threading.Barrier(len(keys), timeout=5)

        def fetch(variable, *args):
            # Only passes if all three fetches are in flight together
            barrier.wait()
            return DATA_RODS_JSON

        self.upstream.fetch_variable.side_effect = fetch

        envelope = self.reconciler.resolve_all(keys, LAT, LNG, START, END)

        for key in keys:
            self.assertEqual(envelope.results[key].status, ResultStatus.SUCCESS, key)

    def test_slow_sibling_does_not_fail_others(self):
        release = threading.Event()

        def fetch(variable, *args):
            if variable.key == "runoff":
                release.wait(timeout=5)
                return DATA_RODS_JSON
            release.set()
            raise UpstreamUnavailable("down")

        self.upstream.fetch_variable.side_effect = fetch

        envelope = self.reconciler.resolve_all(["runoff", "humidity"], LAT, LNG, START, END)

        self.assertEqual(envelope.results["runoff"].status, ResultStatus.SUCCESS)
        self.assertEqual(envelope.results["humidity"].status, ResultStatus.FALLBACK)

    def test_envelope_shape(self):
        self.upstream.fetch_variable.side_effect = UpstreamUnavailable("down")

        data = self.reconciler.resolve_all(["precipitation"], LAT, LNG, START, END).to_dict()

        self.assertEqual(set(data), {"hydrological", "coordinates", "timestamp", "source"})
        self.assertEqual(data["coordinates"], {"lat": LAT, "lng": LNG})
        self.assertEqual(data["source"], "NASA Data Proxy Server")
        self.assertTrue(data["timestamp"].endswith("Z"))

    def test_empty_variable_list(self):
        envelope = self.reconciler.resolve_all([], LAT, LNG, START, END)
        self.assertEqual(envelope.results, {})
        self.upstream.fetch_variable.assert_not_called()

    def test_invalid_input_aborts(self):
        cases = [
            ("precipitation", LAT, LNG, START, END),
            (["precipitation", 5], LAT, LNG, START, END),
            (["precipitation"], 91.0, LNG, START, END),
            (["precipitation"], LAT, "west", START, END),
            (["precipitation"], LAT, LNG, "2025-09-30", END),
        ]
        for args in cases:
            with self.subTest(args=args):
                with self.assertRaises(ValidationError):
                    self.reconciler.resolve_all(*args)
        self.upstream.fetch_variable.assert_not_called()


if __name__ == "__main__":
    unittest.main()
