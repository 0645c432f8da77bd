"""
Data models for the hydrology proxy.

Contains variable metadata and DTOs for series results.
"""

from .variable import (
    Variable,
    UnknownVariable,
    VariableInfo,
    VariableKey,
    VARIABLE_INFO,
    parse_variable,
    known_variable_keys,
)
from .series import (
    ResultStatus,
    SeriesPoint,
    VariableSeriesResult,
    BulkResponseEnvelope,
    BulkRequest,
)

__all__ = [
    "Variable",
    "UnknownVariable",
    "VariableInfo",
    "VariableKey",
    "VARIABLE_INFO",
    "parse_variable",
    "known_variable_keys",
    "ResultStatus",
    "SeriesPoint",
    "VariableSeriesResult",
    "BulkResponseEnvelope",
    "BulkRequest",
]
