import threading

import pytest
import requests

from vehicle_registry.services.providers import http
from vehicle_registry.services.providers.http import (
    CancellationToken,
    Transport,
    TransportNetworkFailure,
    TransportSuccess,
    TransportTimeout,
)
from vehicle_registry.services.query import QueryDescriptor

DESCRIPTOR = QueryDescriptor(resource_id="res-main", limit=10, offset=0, filters='{"mispar_rechev": "1234567"}')
URL = "https://registry.test/datastore_search"


class FakeResponse:
    def __init__(self, status_code=200, chunks=(b"{}",), on_chunk=None):
        self.status_code = status_code
        self.chunks = list(chunks)
        self.on_chunk = on_chunk
        self.closed = False

    def iter_content(self, chunk_size=1):
        for i, c in enumerate(self.chunks):
            if self.on_chunk:
                self.on_chunk(i)
            yield c

    def close(self):
        self.closed = True


class FakeSession:
    def __init__(self, response=None, error=None):
        self.headers = {}
        self.response = response
        self.error = error
        self.calls = []
        self.closed = threading.Event()

    def get(self, url, params=None, timeout=None, stream=False):
        self.calls.append({"url": url, "params": params, "timeout": timeout, "stream": stream})
        if self.error is not None:
            raise self.error
        return self.response

    def close(self):
        self.closed.set()


class RecordingTimer:
    instances = []

    def __init__(self, interval, fn):
        self.interval = interval
        self.fn = fn
        self.daemon = False
        self.started = False
        self.cancelled = False
        RecordingTimer.instances.append(self)

    def start(self):
        self.started = True

    def cancel(self):
        self.cancelled = True


@pytest.fixture
def recording_timer(monkeypatch):
    RecordingTimer.instances = []
    monkeypatch.setattr(http.threading, "Timer", RecordingTimer)
    return RecordingTimer


def test_success_returns_status_and_body(recording_timer):
    session = FakeSession(FakeResponse(200, [b'{"success": ', b"true}"]))
    out = Transport(URL, user_agent="Tests/0.1", session_factory=lambda: session).execute(DESCRIPTOR, 2000)

    assert out == TransportSuccess(status_code=200, body=b'{"success": true}')
    call = session.calls[0]
    assert call["url"] == URL
    assert call["params"] == DESCRIPTOR.to_params()
    assert call["timeout"] == 2.0
    assert call["stream"] is True
    assert session.headers["Accept"] == "application/json"
    assert session.headers["User-Agent"] == "Tests/0.1"
    assert session.response.closed
    assert session.closed.is_set()

    timer = recording_timer.instances[0]
    assert timer.interval == 2.0
    assert timer.started and timer.cancelled


def test_non_2xx_is_still_a_transport_success(recording_timer):
    session = FakeSession(FakeResponse(500, [b"oops"]))
    out = Transport(URL, session_factory=lambda: session).execute(DESCRIPTOR, 1000)
    assert out == TransportSuccess(status_code=500, body=b"oops")


def test_connection_error_is_network_failure(recording_timer):
    session = FakeSession(error=requests.ConnectionError("Name or service not known"))
    out = Transport(URL, session_factory=lambda: session).execute(DESCRIPTOR, 1000)
    assert out == TransportNetworkFailure(message="Name or service not known")
    assert recording_timer.instances[0].cancelled
    assert session.closed.is_set()


def test_requests_timeout_is_timeout(recording_timer):
    session = FakeSession(error=requests.ReadTimeout("read timed out"))
    out = Transport(URL, session_factory=lambda: session).execute(DESCRIPTOR, 1000)
    assert out == TransportTimeout()
    assert recording_timer.instances[0].cancelled


def test_pre_cancelled_token_never_sends(recording_timer):
    session = FakeSession(FakeResponse())
    token = CancellationToken()
    token.cancel()
    out = Transport(URL, session_factory=lambda: session).execute(DESCRIPTOR, 1000, token)
    assert out == TransportTimeout()
    assert session.calls == []
    assert recording_timer.instances[0].cancelled


def test_cancel_while_reading_body(recording_timer):
    token = CancellationToken()
    response = FakeResponse(200, [b"a", b"b", b"c"], on_chunk=lambda i: token.cancel() if i == 1 else None)
    session = FakeSession(response)
    out = Transport(URL, session_factory=lambda: session).execute(DESCRIPTOR, 1000, token)
    assert out == TransportTimeout()
    assert response.closed


def test_token_callbacks():
    token = CancellationToken()
    hits = []
    unregister = token.register(lambda: hits.append("a"))
    token.register(lambda: hits.append("b"))
    unregister()
    token.cancel()
    token.cancel()
    assert hits == ["b"]
    assert token.cancelled

    token.register(lambda: hits.append("late"))
    assert hits == ["b", "late"]


@pytest.mark.timeout(10)
def test_token_keeps_callbacks_registered_while_cancelling():
    for _ in range(200):
        token = CancellationToken()
        hits = []
        barrier = threading.Barrier(5)

        def _register():
            barrier.wait()
            token.register(lambda: hits.append(1))

        threads = [threading.Thread(target=_register) for _ in range(4)]
        for t in threads:
            t.start()
        barrier.wait()
        token.cancel()
        for t in threads:
            t.join()
        assert len(hits) == 4
