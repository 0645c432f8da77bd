"""
Business logic services for the hydrology proxy.

Services orchestrate API operations, normalization and synthesis.
"""

from .reconciler import DataReconciler
from .hydrology_service import HydrologyService
from . import validation

__all__ = [
    "DataReconciler",
    "HydrologyService",
    "validation",
]
