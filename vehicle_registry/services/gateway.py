# vehicle_registry/services/gateway.py
"""
SearchGateway - נקודת הכניסה היחידה למאגר הרכבים של data.gov.il.

Validating -> Building -> Requesting -> Classifying -> Normalizing -> Done.
כל כשל מוחזר כ-SearchResult עם success=False; שום חריגה לא יוצאת מכאן.
"""
import logging
from typing import Mapping, Optional

from vehicle_registry.config import RegistryConfig
from vehicle_registry.domain.search import (
    DEFAULT_LIMIT,
    ErrorKind,
    ExtendedSearchResult,
    FilterValue,
    SearchResult,
    SearchSpecification,
)
from . import classifier, query
from .normalization import record_normalizer
from .providers.http import CancellationToken, Transport
from .providers.protocols import RegistryTransport

logger = logging.getLogger(__name__)


class SearchGateway:
    def __init__(self, config: Optional[RegistryConfig] = None,
                 transport: Optional[RegistryTransport] = None):
        self.config = config or RegistryConfig()
        self.transport = transport or Transport(self.config.base_url, user_agent=self.config.user_agent)

    # ----- Convenience entry points -----

    def search_by_license_plate(self, license_plate: str, limit: int = DEFAULT_LIMIT,
                                offset: int = 0) -> SearchResult:
        return self.search(SearchSpecification(license_plate=license_plate, limit=limit, offset=offset))

    def search_with_filters(self, filters: Mapping[str, FilterValue], limit: int = DEFAULT_LIMIT,
                            offset: int = 0) -> SearchResult:
        """Exact-match filters keyed by registry field names (tozeret_nm, shnat_yitzur, ...)."""
        return self.search(SearchSpecification(exact_filters=dict(filters), limit=limit, offset=offset))

    def search_with_query(self, text: str, limit: int = DEFAULT_LIMIT, offset: int = 0) -> SearchResult:
        """Full-text search across all fields; Hebrew and English both work."""
        return self.search(SearchSpecification(free_text_query=text, limit=limit, offset=offset))

    # ----- Core -----

    def search(self, spec: SearchSpecification,
               cancellation_token: Optional[CancellationToken] = None) -> SearchResult:
        try:
            try:
                descriptor = query.build(spec, self.config)
            except query.InvalidInput as e:
                return SearchResult.failure(ErrorKind.INVALID_INPUT, str(e))

            logger.debug("Fetching from gov.il API: %s %s", self.config.base_url, descriptor.to_params())
            outcome = self.transport.execute(descriptor, self.config.timeout_ms, cancellation_token)

            c = classifier.classify(outcome)
            if not c.ok:
                return SearchResult.failure(c.kind, c.message)

            vehicles = record_normalizer.normalize_many(c.records)
            logger.debug("Found %d vehicles (total: %d)", len(vehicles), c.total)
            return SearchResult(success=True, vehicles=vehicles, total=c.total)
        except Exception as e:
            logger.exception("Gov.il API request failed")
            return SearchResult.failure(ErrorKind.NETWORK_FAILURE, str(e) or classifier.NETWORK_FALLBACK)

    def get_extended_details(self, license_plate: str,
                             cancellation_token: Optional[CancellationToken] = None) -> ExtendedSearchResult:
        """
        Tire load/speed codes, model codes and towing info for one plate.
        success=True with details=None means the registry has no such record.
        """
        try:
            try:
                descriptor = query.build_extended(license_plate, self.config)
            except query.InvalidInput as e:
                return ExtendedSearchResult.failure(ErrorKind.INVALID_INPUT, str(e))

            logger.debug("Fetching extended details from gov.il API: %s", descriptor.to_params())
            outcome = self.transport.execute(descriptor, self.config.timeout_ms, cancellation_token)

            c = classifier.classify(outcome)
            if not c.ok:
                return ExtendedSearchResult.failure(c.kind, c.message)
            if not c.records:
                return ExtendedSearchResult(success=True, details=None)

            return ExtendedSearchResult(success=True, details=record_normalizer.normalize_extended(c.records[0]))
        except Exception as e:
            logger.exception("Gov.il API request failed")
            return ExtendedSearchResult.failure(ErrorKind.NETWORK_FAILURE, str(e) or classifier.NETWORK_FALLBACK)
