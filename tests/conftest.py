import json
import pathlib

import pytest

from vehicle_registry.config import RegistryConfig
from vehicle_registry.services.gateway import SearchGateway
from vehicle_registry.services.providers.http import TransportSuccess

FIXTURES = pathlib.Path(__file__).parent / "fixtures"


def load_fixture(name):
    return json.loads((FIXTURES / f"{name}.json").read_text(encoding="utf-8"))


class StubTransport:
    """Records every descriptor and replays a canned outcome."""

    def __init__(self, outcome=None):
        self.outcome = outcome
        self.calls = []

    def execute(self, descriptor, timeout_ms, cancellation_token=None):
        self.calls.append((descriptor, timeout_ms, cancellation_token))
        if isinstance(self.outcome, Exception):
            raise self.outcome
        return self.outcome


def ok_body(records, total=None):
    payload = {"success": True, "result": {"records": records, "total": len(records) if total is None else total}}
    return TransportSuccess(status_code=200, body=json.dumps(payload, ensure_ascii=False).encode("utf-8"))


@pytest.fixture
def raw_record():
    return load_fixture("gov_il_record")


@pytest.fixture
def config():
    return RegistryConfig(base_url="https://registry.test/datastore_search", resource_id="res-main",
                          extended_resource_id="res-ext", timeout_ms=500)


@pytest.fixture
def stub_transport():
    return StubTransport()


@pytest.fixture
def gateway(config, stub_transport):
    return SearchGateway(config, transport=stub_transport)
