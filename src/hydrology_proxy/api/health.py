"""
Reachability check for the data proxy.

Used by callers to skip the remote path entirely when the proxy is down,
instead of issuing one failing request per variable.

The deadline covers the whole exchange. requests only bounds each socket
operation, so the GET runs on a daemon thread and the caller stops waiting
once the deadline passes; a request still running at that point is abandoned
and its late answer ignored.
"""

import logging
import threading
import time
from typing import Dict, Optional

import requests  # type: ignore

from ..core import constants


class ProxyHealthGate:
    """Advisory health check against a fixed health path."""

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        health_path: str = constants.HEALTH_PATH,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize health gate.

        Args:
            session: HTTP session (a fresh one is created if omitted)
            health_path: Path requested below the base URL
            logger: Logger instance
        """
        self.session = session or requests.Session()
        self.health_path = health_path
        self.logger = logger or logging.getLogger(__name__)

    def is_reachable(self, base_url: str, timeout_ms: float = constants.DEFAULT_HEALTH_TIMEOUT_MS) -> bool:
        """
        Check the health endpoint.

        Args:
            base_url: Proxy base URL
            timeout_ms: Overall deadline in milliseconds

        Returns:
            True only for a 2xx answer completed within the deadline
        """
        url = f"{base_url.rstrip('/')}/{self.health_path.lstrip('/')}"
        timeout = timeout_ms / 1000
        deadline = time.monotonic() + timeout
        outcome: Dict[str, bool] = {}

        worker = threading.Thread(
            target=self._check,
            args=(url, timeout, deadline, outcome),
            name="proxy-health",
            daemon=True
        )
        worker.start()
        worker.join(timeout)

        if "reachable" not in outcome:
            self.logger.warning(f"Proxy health check timed out after {timeout_ms:.0f}ms: {url}")
            return False
        return outcome["reachable"]

    def _check(self, url: str, timeout: float, deadline: float, outcome: Dict[str, bool]) -> None:
        try:
            response = self.session.get(
                url,
                timeout=(timeout, timeout),
                headers={"Content-Type": "application/json"},
            )
        except requests.exceptions.Timeout:
            self.logger.warning(f"Proxy health check timed out: {url}")
            outcome["reachable"] = False
            return
        except requests.exceptions.RequestException as e:
            self.logger.warning(f"Proxy unavailable: {url} - {e}")
            outcome["reachable"] = False
            return

        try:
            healthy = response.ok
        finally:
            response.close()

        if time.monotonic() > deadline:
            outcome["reachable"] = False
            return
        if not healthy:
            self.logger.warning(f"Proxy health check responded with {response.status_code}")
            outcome["reachable"] = False
            return

        self.logger.info(f"Proxy is healthy: {url}")
        outcome["reachable"] = True
