# vehicle_registry/services/classifier.py
"""
סיווג תוצאת transport לאחד מסוגי השגיאה הסגורים (או Ok).
סדר: קוד HTTP לפני פענוח גוף, ודגל success בגוף רק אחרי 2xx.
"""
import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from vehicle_registry.domain.search import ErrorKind
from .providers.http import (
    TransportOutcome,
    TransportSuccess,
    TransportTimeout,
    TransportNetworkFailure,
)

logger = logging.getLogger(__name__)

TIMEOUT_MESSAGE = "Request timed out. Please try again."
UNKNOWN_API_ERROR = "Unknown API error"
MALFORMED_BODY = "Malformed response from registry"
NETWORK_FALLBACK = "Failed to fetch vehicle data"


@dataclass(frozen=True)
class Classification:
    kind: Optional[ErrorKind] = None  # None == Ok
    message: Optional[str] = None
    records: List[Dict[str, Any]] = field(default_factory=list)
    total: int = 0

    @property
    def ok(self) -> bool:
        return self.kind is None


def invalid_input(message: str) -> Classification:
    return Classification(kind=ErrorKind.INVALID_INPUT, message=message)


def _rejected(message: str) -> Classification:
    logger.error("Gov.il API error: %s", message)
    return Classification(kind=ErrorKind.UPSTREAM_REJECTED, message=message)


def _upstream_message(data: Dict[str, Any], default: str = UNKNOWN_API_ERROR) -> str:
    err = data.get("error")
    if isinstance(err, dict):
        msg = err.get("message")
        if isinstance(msg, str) and msg.strip():
            return msg
    return default


def _parse_body(body: bytes) -> Optional[Dict[str, Any]]:
    try:
        data = json.loads(body)
    except (TypeError, ValueError):
        return None
    return data if isinstance(data, dict) else None


def classify(outcome: TransportOutcome) -> Classification:
    if isinstance(outcome, TransportTimeout):
        return Classification(kind=ErrorKind.TIMEOUT, message=TIMEOUT_MESSAGE)

    if isinstance(outcome, TransportNetworkFailure):
        return Classification(kind=ErrorKind.NETWORK_FAILURE, message=outcome.message or NETWORK_FALLBACK)

    if not isinstance(outcome, TransportSuccess):
        return Classification(kind=ErrorKind.NETWORK_FAILURE, message=NETWORK_FALLBACK)

    data = _parse_body(outcome.body)

    if not 200 <= outcome.status_code < 300:
        # CKAN מחזיר גוף JSON עם error.message גם ב-404/409
        status_message = f"Registry API returned status {outcome.status_code}"
        return _rejected(_upstream_message(data, status_message) if data else status_message)

    if data is None:
        return _rejected(MALFORMED_BODY)

    result = data.get("result")
    if data.get("success") is not True or not isinstance(result, dict):
        return _rejected(_upstream_message(data))

    records = result.get("records")
    if not isinstance(records, list):
        records = []
    total = result.get("total")
    if isinstance(total, bool) or not isinstance(total, int):
        total = len(records)

    return Classification(records=[r for r in records if isinstance(r, dict)], total=total)
