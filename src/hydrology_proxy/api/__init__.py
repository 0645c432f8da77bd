"""
API layer for the hydrology proxy.

Provides HTTP clients for the Data Rods service, the proxy itself, and the
proxy health check.
"""

from .client import APIClient
from .data_rods import DataRodsAPI
from .proxy import ProxyAPI
from .health import ProxyHealthGate
from . import urls

__all__ = [
    "APIClient",
    "DataRodsAPI",
    "ProxyAPI",
    "ProxyHealthGate",
    "urls",
]
