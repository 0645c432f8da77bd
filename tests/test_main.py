"""
Tests for the command-line entry point.
"""

import io
import json
import logging
import os
import tempfile
import unittest
from contextlib import redirect_stdout
from unittest.mock import patch

from src.hydrology_proxy import main as cli


class TestCommandLine(unittest.TestCase):

    def setUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmpdir.cleanup)
        self.cwd = os.getcwd()
        os.chdir(self.tmpdir.name)
        self.addCleanup(os.chdir, self.cwd)

        env = patch.dict(os.environ, {"LOG_FILE": os.path.join(self.tmpdir.name, "test.log")}, clear=True)
        env.start()
        self.addCleanup(env.stop)

        dotenv = patch.object(cli, "load_dotenv")
        dotenv.start()
        self.addCleanup(dotenv.stop)
        self.addCleanup(self._close_log_handlers)

    def _close_log_handlers(self):
        logger = logging.getLogger("hydrology_proxy")
        for handler in list(logger.handlers):
            handler.close()
            logger.removeHandler(handler)

    def test_health_exit_codes(self):
        for reachable, code in ((True, 0), (False, 1)):
            with self.subTest(reachable=reachable):
                with patch.object(cli.ProxyHealthGate, "is_reachable", return_value=reachable) as check:
                    with self.assertRaises(SystemExit) as ctx:
                        cli.main(["health", "--url", "http://proxy.test:3001", "--timeout-ms", "250"])
                self.assertEqual(ctx.exception.code, code)
                check.assert_called_once_with("http://proxy.test:3001", 250.0)

    def test_fetch_in_mock_mode_prints_json(self):
        os.environ["USE_REAL_NASA_DATA"] = "false"
        out = io.StringIO()

        with redirect_stdout(out):
            cli.main(["fetch", "--lat", "-15.8", "--lng", "-47.9", "--days", "3"])

        result = json.loads(out.getvalue())
        self.assertEqual(result["dataMode"], "mock")
        self.assertEqual(len(result["hydrological"]["runoff"]["series"]), 3)
        self.assertTrue(result["cptec"]["available"])

    def test_missing_config_file_exits_with_error(self):
        out = io.StringIO()
        with redirect_stdout(out):
            with self.assertRaises(SystemExit) as ctx:
                cli.main(["--config", "missing.json", "health"])
        self.assertEqual(ctx.exception.code, 1)
        self.assertIn("Configuration error", out.getvalue())

    def test_bad_input_is_not_a_configuration_error(self):
        os.environ["USE_REAL_NASA_DATA"] = "false"
        out = io.StringIO()

        with redirect_stdout(out):
            with self.assertRaises(SystemExit) as ctx:
                cli.main(["fetch", "--lat", "10", "--lng", "20", "--days", "-3"])

        self.assertEqual(ctx.exception.code, 2)
        self.assertIn("Invalid input", out.getvalue())
        self.assertNotIn("Configuration error", out.getvalue())

    def test_no_command_prints_help(self):
        with redirect_stdout(io.StringIO()):
            with self.assertRaises(SystemExit) as ctx:
                cli.main([])
        self.assertEqual(ctx.exception.code, 2)


if __name__ == "__main__":
    unittest.main()
