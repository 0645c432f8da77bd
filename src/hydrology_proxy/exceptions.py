"""
Exception types for the hydrology proxy.

Upstream failures are scoped to a single variable and absorbed by the
reconciler; only validation and internal errors reach the HTTP caller.
"""

from typing import Optional


class HydrologyProxyError(Exception):
    """Base class for all hydrology proxy errors."""


class ValidationError(HydrologyProxyError, ValueError):
    """Request fields are missing or malformed."""


class UpstreamError(HydrologyProxyError):
    """The real data provider could not deliver usable data."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class UpstreamUnavailable(UpstreamError):
    """Non-2xx response, network error or timeout."""


class UpstreamAuthFailed(UpstreamUnavailable):
    """Upstream rejected the credentials (HTTP 401/403)."""


class UpstreamMalformedResponse(UpstreamError):
    """Payload could not be interpreted as a series."""


class NormalizationDegraded(UpstreamMalformedResponse):
    """Payload parsed but yielded no usable points."""
