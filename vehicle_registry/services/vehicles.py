# vehicle_registry/services/vehicles.py
import json
import logging
from dataclasses import replace
from typing import Dict, Optional

from vehicle_registry.domain.search import DEFAULT_LIMIT, FilterValue, SearchResult, VehicleFilterOptions
from vehicle_registry.domain.vehicle import Vehicle
from .gateway import SearchGateway

logger = logging.getLogger(__name__)

# שדות ידידותיים -> שמות השדות במאגר
FILTER_FIELDS = {
    "manufacturer": "tozeret_nm",
    "model": "kinuy_mishari",
    "year_from": "shnat_yitzur",
    "color": "tzeva_rechev",
    "fuel_type": "sug_delek_nm",
    "ownership": "baalut",
}


def to_registry_filters(options: VehicleFilterOptions) -> Dict[str, FilterValue]:
    """
    year_from is sent as an exact year; the registry has no range filter, so
    year_to is applied on the returned page instead.
    """
    out: Dict[str, FilterValue] = {}
    for attr, registry_field in FILTER_FIELDS.items():
        v = getattr(options, attr)
        if v:
            out[registry_field] = v
    return out


class VehiclesService:
    def __init__(self, gateway: Optional[SearchGateway] = None):
        self.gateway = gateway or SearchGateway()

    def search_by_plate(self, plate: str) -> SearchResult:
        logger.info("Searching for vehicle with plate: %s", plate)
        result = self.gateway.search_by_license_plate(plate)
        self._log(result)
        return result

    def search_with_filters(self, options: VehicleFilterOptions, limit: int = DEFAULT_LIMIT,
                            offset: int = 0) -> SearchResult:
        api_filters = to_registry_filters(options)
        logger.info("Searching vehicles with filters: %s", json.dumps(api_filters, ensure_ascii=False))

        result = self.gateway.search_with_filters(api_filters, limit=limit, offset=offset)

        if options.year_to and result.success:
            year_from = options.year_from or 0
            kept = [v for v in result.vehicles if year_from <= v.year <= options.year_to]
            result = replace(result, vehicles=kept)

        self._log(result)
        return result

    def get_by_plate(self, plate: str) -> Optional[Vehicle]:
        result = self.search_by_plate(plate)
        if result.success and result.vehicles:
            return result.vehicles[0]
        return None

    @staticmethod
    def _log(result: SearchResult) -> None:
        if result.success:
            logger.info("Found %d vehicle(s) (total: %d)", len(result.vehicles), result.total)
        else:
            logger.warning("Search failed: %s", result.error)
