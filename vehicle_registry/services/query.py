# vehicle_registry/services/query.py
"""
בניית בקשה ל-datastore_search של data.gov.il מתוך SearchSpecification.
"""
import json
from dataclasses import dataclass
from typing import Optional, Dict, Any

from vehicle_registry.config import RegistryConfig
from vehicle_registry.domain.search import SearchSpecification, FilterValue
from . import plate

PLATE_FIELD = "mispar_rechev"
INVALID_PLATE_MESSAGE = "Invalid license plate format. Must be 7-8 digits."


class InvalidInput(ValueError):
    """Raised before any request is made when the caller's input cannot be sent upstream."""
    pass


@dataclass(frozen=True)
class QueryDescriptor:
    resource_id: str
    limit: int
    offset: int
    filters: Optional[str] = None  # JSON
    q: Optional[str] = None

    def to_params(self) -> Dict[str, Any]:
        params: Dict[str, Any] = {
            "resource_id": self.resource_id,
            "limit": self.limit,
            "offset": self.offset,
        }
        if self.filters is not None:
            params["filters"] = self.filters
        if self.q is not None:
            params["q"] = self.q
        return params


def _check_paging(limit: int, offset: int) -> None:
    if not isinstance(limit, int) or limit < 1:
        raise InvalidInput(f"limit must be a positive integer, got {limit!r}")
    if not isinstance(offset, int) or offset < 0:
        raise InvalidInput(f"offset must be a non-negative integer, got {offset!r}")


def build(spec: SearchSpecification, config: RegistryConfig) -> QueryDescriptor:
    _check_paging(spec.limit, spec.offset)

    query_filters: Dict[str, FilterValue] = dict(spec.exact_filters or {})

    if spec.license_plate is not None:
        if not plate.is_valid_format(spec.license_plate):
            raise InvalidInput(INVALID_PLATE_MESSAGE)
        # חיפוש לפי לוחית ספציפי יותר - גובר על פילטר מפורש באותו מפתח
        query_filters[PLATE_FIELD] = plate.normalize(spec.license_plate)

    filters = json.dumps(query_filters, ensure_ascii=False) if query_filters else None

    return QueryDescriptor(
        resource_id=config.resource_id,
        limit=spec.limit,
        offset=spec.offset,
        filters=filters,
        q=spec.free_text_query or None,
    )


def build_extended(license_plate: str, config: RegistryConfig) -> QueryDescriptor:
    """
    The extended resource is searched with q=<plate>, which matches more
    reliably there than an exact filter.
    """
    if not plate.is_valid_format(license_plate):
        raise InvalidInput(INVALID_PLATE_MESSAGE)
    return QueryDescriptor(
        resource_id=config.extended_resource_id,
        limit=1,
        offset=0,
        q=plate.normalize(license_plate),
    )
