"""
Series data models.

Contains DTOs for series points, per-variable results and the bulk envelope.
"""

from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from .variable import VariableKey


class ResultStatus(str, Enum):
    """Provenance status of a variable result."""

    SUCCESS = "success"
    FALLBACK = "fallback"
    ERROR = "error"


@dataclass(frozen=True)
class SeriesPoint:
    """One daily observation."""

    date: str
    value: float

    def to_dict(self) -> Dict[str, Any]:
        return {"date": self.date, "value": self.value}


@dataclass(frozen=True)
class VariableSeriesResult:
    """Series and provenance for one requested variable."""

    variable: VariableKey
    series: Tuple[SeriesPoint, ...]
    source: str
    status: ResultStatus
    unit: str
    description: str
    error: Optional[str] = None

    @property
    def key(self) -> str:
        return self.variable.key

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the wire shape; 'variable' carries the dataset id."""
        data: Dict[str, Any] = {
            "series": [point.to_dict() for point in self.series],
            "source": self.source,
            "status": self.status.value,
            "variable": self.variable.dataset_id,
            "unit": self.unit,
            "description": self.description,
        }
        if self.error is not None:
            data["error"] = self.error
        return data


@dataclass(frozen=True)
class BulkResponseEnvelope:
    """Results for every requested variable at one location."""

    results: Dict[str, VariableSeriesResult]
    latitude: float
    longitude: float
    timestamp: str
    source: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "hydrological": {key: result.to_dict() for key, result in self.results.items()},
            "coordinates": {"lat": self.latitude, "lng": self.longitude},
            "timestamp": self.timestamp,
            "source": self.source,
        }


@dataclass
class BulkRequest:
    """Validated bulk request parameters."""

    variables: List[str]
    latitude: float
    longitude: float
    start_date: date
    end_date: date
