"""
NASA Hydrology Data Proxy

This package re-exposes NASA Data Rods time series with CORS headers and
substitutes synthetic series whenever the real provider is unavailable.
"""

__version__ = "0.1.0"
__description__ = "NASA hydrology data proxy with synthetic fallback"


def __getattr__(name):
    """Lazy import to avoid importing dependencies when not needed."""
    if name == "HydrologyProxyApp":
        from .main import HydrologyProxyApp
        return HydrologyProxyApp
    if name == "create_app":
        from .web import create_app
        return create_app
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    "HydrologyProxyApp",
    "create_app",
]
