"""
Payload processing for the hydrology proxy.

Normalizes upstream responses into series points.
"""

from .normalizer import ResponseNormalizer
from .rounding import round_half_up

__all__ = [
    "ResponseNormalizer",
    "round_half_up",
]
