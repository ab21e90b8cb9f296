from typing import Protocol, Optional

from vehicle_registry.services.query import QueryDescriptor
from .http import CancellationToken, TransportOutcome


class RegistryTransport(Protocol):
    def execute(self, descriptor: QueryDescriptor, timeout_ms: int,
                cancellation_token: Optional[CancellationToken] = None) -> TransportOutcome: ...
