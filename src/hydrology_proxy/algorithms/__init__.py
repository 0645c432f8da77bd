"""
Series synthesis algorithms.

Generates synthetic daily series used when real data is unavailable.
"""

from .synthesizer import SeriesSynthesizer, seasonal_factor, latitude_factor

__all__ = [
    "SeriesSynthesizer",
    "seasonal_factor",
    "latitude_factor",
]
