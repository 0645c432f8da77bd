"""
Base HTTP client for upstream services.

Handles session management, optional Basic authentication and translation of
transport failures into upstream errors.

Sessions are per thread: the bulk fan-out calls one client from several
worker threads, and each of them gets its own requests.Session built with
the same adapter, headers and credentials.
"""

import logging
import threading
import weakref
from typing import Dict, Any, Optional, Tuple

import requests  # type: ignore
from requests.adapters import HTTPAdapter  # type: ignore
from urllib3.util.retry import Retry  # type: ignore

from ..core import constants
from ..exceptions import UpstreamAuthFailed, UpstreamMalformedResponse, UpstreamUnavailable


AUTH_FAILURE_STATUSES = (401, 403)


class APIClient:
    """Base client for HTTP services reached by the proxy."""

    def __init__(
        self,
        base_url: str,
        username: Optional[str] = None,
        password: Optional[str] = None,
        timeout: float = 30,
        max_retries: int = 0,
        verify_ssl: bool = True,
        user_agent: str = constants.USER_AGENT,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize API client.

        Args:
            base_url: Base URL for the API
            username: Username for Basic authentication (optional)
            password: Password for Basic authentication (optional)
            timeout: Request timeout in seconds
            max_retries: Transport-level retries for idempotent requests (0 disables)
            verify_ssl: Whether to verify SSL certificates
            user_agent: User-Agent header value
            logger: Logger instance
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.verify_ssl = verify_ssl
        self.max_retries = max_retries
        self.user_agent = user_agent
        self.logger = logger or logging.getLogger(__name__)

        # Anonymous access is allowed; upstream answers with reduced quota
        self._auth: Optional[Tuple[str, str]] = (username, password) if username and password else None

        if not verify_ssl:
            import urllib3
            urllib3.disable_warnings(urllib3.exceptions.InsecureRequestWarning)

        self._local = threading.local()
        self._sessions: "weakref.WeakSet[requests.Session]" = weakref.WeakSet()
        self._sessions_lock = threading.Lock()

        # The constructing thread gets its session up front
        self._thread_session()

    def _create_session(self) -> requests.Session:
        """Build a session with the retry policy, headers and credentials."""
        session = requests.Session()
        if self.max_retries > 0:
            retry_strategy = Retry(
                total=self.max_retries,
                backoff_factor=1,
                status_forcelist=[429, 500, 502, 503, 504],
                allowed_methods=["GET"]
            )
            adapter = HTTPAdapter(max_retries=retry_strategy)
        else:
            adapter = HTTPAdapter(max_retries=0)
        session.mount("http://", adapter)
        session.mount("https://", adapter)

        session.headers.update({
            "User-Agent": self.user_agent,
            "Accept": constants.ACCEPT_HEADER,
        })

        if self._auth:
            session.auth = self._auth

        return session

    def _thread_session(self) -> requests.Session:
        session = getattr(self._local, "session", None)
        if session is None:
            session = self._create_session()
            self._local.session = session
            with self._sessions_lock:
                self._sessions.add(session)
        return session

    @property
    def session(self) -> requests.Session:
        """Session owned by the calling thread, created on first use."""
        return self._thread_session()

    @property
    def is_authenticated(self) -> bool:
        return self._auth is not None

    def _url(self, endpoint: str) -> str:
        if not endpoint:
            return self.base_url
        return f"{self.base_url}/{endpoint.lstrip('/')}"

    def _make_request(
        self,
        method: str,
        endpoint: str = "",
        **kwargs
    ) -> requests.Response:
        """
        Make HTTP request to the service.

        Args:
            method: HTTP method (GET, POST, ...)
            endpoint: Path relative to the base URL ('' for the base URL itself)
            **kwargs: Additional arguments for requests

        Returns:
            Response object with a 2xx status

        Raises:
            UpstreamAuthFailed: On HTTP 401/403
            UpstreamUnavailable: On any other non-2xx status, network error or timeout
        """
        url = self._url(endpoint)
        kwargs.setdefault("verify", self.verify_ssl)
        kwargs.setdefault("timeout", self.timeout)

        self.logger.debug(f"{method} {url}")

        try:
            response = self.session.request(method=method, url=url, **kwargs)
            response.raise_for_status()
            return response

        except requests.exceptions.HTTPError as e:
            status = e.response.status_code if e.response is not None else None
            reason = e.response.reason if e.response is not None else ""
            message = f"{status} {reason}".strip()
            self.logger.error(f"API request failed: {method} {url} - {message}")
            if status in AUTH_FAILURE_STATUSES:
                raise UpstreamAuthFailed(message, status_code=status) from e
            raise UpstreamUnavailable(message, status_code=status) from e

        except requests.exceptions.Timeout as e:
            self.logger.error(f"API request timed out: {method} {url}")
            raise UpstreamUnavailable(f"Request timed out after {self.timeout}s") from e

        except requests.exceptions.RequestException as e:
            self.logger.error(f"API request failed: {method} {url} - {e}")
            raise UpstreamUnavailable(str(e)) from e

    def get_text(self, endpoint: str = "", params: Optional[Dict[str, Any]] = None) -> str:
        """
        Make GET request and return the raw body.

        Args:
            endpoint: API endpoint
            params: Query parameters

        Returns:
            Response body as text
        """
        response = self._make_request("GET", endpoint, params=params)
        return response.text

    def get(self, endpoint: str = "", params: Optional[Dict[str, Any]] = None) -> Any:
        """
        Make GET request.

        Args:
            endpoint: API endpoint
            params: Query parameters

        Returns:
            Decoded JSON response
        """
        response = self._make_request("GET", endpoint, params=params)
        return self._decode_json(response)

    def post(self, endpoint: str, data: Dict[str, Any]) -> Any:
        """
        Make POST request with a JSON body.

        Args:
            endpoint: API endpoint
            data: Request body data

        Returns:
            Decoded JSON response
        """
        response = self._make_request("POST", endpoint, json=data)
        return self._decode_json(response)

    def _decode_json(self, response: requests.Response) -> Any:
        try:
            return response.json()
        except ValueError as e:
            raise UpstreamMalformedResponse(f"Invalid JSON from {response.url}: {e}") from e

    def close(self) -> None:
        """Close every live session, whichever thread created it."""
        with self._sessions_lock:
            sessions = list(self._sessions)
        for session in sessions:
            session.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
