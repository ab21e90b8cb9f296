# vehicle_registry/domain/search.py
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, List, Dict, Any, Mapping, Union

from .vehicle import Vehicle, ExtendedVehicleDetails

FilterValue = Union[str, int]

DEFAULT_LIMIT = 10


class ErrorKind(str, Enum):
    INVALID_INPUT = "invalid_input"
    TIMEOUT = "timeout"
    NETWORK_FAILURE = "network_failure"
    UPSTREAM_REJECTED = "upstream_rejected"


@dataclass(frozen=True)
class SearchSpecification:
    license_plate: Optional[str] = None  # קלט גולמי מהמשתמש, יכול לכלול מקפים
    exact_filters: Mapping[str, FilterValue] = field(default_factory=dict)  # שמות שדות של המאגר
    free_text_query: Optional[str] = None
    limit: int = DEFAULT_LIMIT
    offset: int = 0


@dataclass(frozen=True)
class VehicleFilterOptions:
    manufacturer: Optional[str] = None
    model: Optional[str] = None
    year_from: Optional[int] = None
    year_to: Optional[int] = None
    color: Optional[str] = None
    fuel_type: Optional[str] = None
    ownership: Optional[str] = None


@dataclass
class SearchResult:
    success: bool
    vehicles: List[Vehicle] = field(default_factory=list)
    total: int = 0
    error: Optional[str] = None
    error_kind: Optional[ErrorKind] = None

    @classmethod
    def failure(cls, kind: ErrorKind, message: str) -> "SearchResult":
        return cls(success=False, vehicles=[], total=0, error=message, error_kind=kind)

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "success": self.success,
            "vehicles": [v.to_dict() for v in self.vehicles],
            "total": self.total,
        }
        if not self.success:
            out["error"] = self.error
            out["errorKind"] = self.error_kind.value if self.error_kind else None
        return out


@dataclass
class ExtendedSearchResult:
    success: bool
    details: Optional[ExtendedVehicleDetails] = None
    error: Optional[str] = None
    error_kind: Optional[ErrorKind] = None

    @classmethod
    def failure(cls, kind: ErrorKind, message: str) -> "ExtendedSearchResult":
        return cls(success=False, details=None, error=message, error_kind=kind)

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "success": self.success,
            "details": self.details.to_dict() if self.details else None,
        }
        if not self.success:
            out["error"] = self.error
            out["errorKind"] = self.error_kind.value if self.error_kind else None
        return out
