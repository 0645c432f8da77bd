"""
Core utilities for the hydrology proxy.

Provides configuration management, constants and date handling.
"""

from .config import Config
from . import constants
from .date_utils import DateUtils

__all__ = [
    "Config",
    "constants",
    "DateUtils",
]
