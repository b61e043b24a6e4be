"""
Unit tests for the backend HTTP client and its configuration.
"""
from __future__ import annotations

import pytest
import requests

from packages.client import (
    ApiClient,
    ApiDecodeError,
    ApiStatusError,
    ApiTransportError,
    ClientConfig,
)


class _Response:
    def __init__(self, status_code: int = 200, payload=None, content: bytes | None = None):
        self.status_code = status_code
        self._payload = payload
        self.content = content if content is not None else (b"{}" if payload is not None else b"")

    def json(self):
        if self._payload is None:
            raise ValueError("No JSON object could be decoded")
        return self._payload


class _Session(requests.Session):
    def __init__(self, response=None, error: Exception | None = None):
        super().__init__()
        self.response = response
        self.error = error
        self.requests: list[dict] = []

    def request(self, method, url, **kwargs):
        self.requests.append({"method": method, "url": url, **kwargs})
        if self.error is not None:
            raise self.error
        return self.response


def _client(session: _Session, **config) -> ApiClient:
    return ApiClient(ClientConfig(base_url="http://hms.test/api/", **config), session=session)


def test_get_builds_url_and_params():
    session = _Session(_Response(payload={"data": []}))
    client = _client(session, timeout_seconds=3)
    assert client.get("/lab/orders", params={"patientId": "p-1"}) == {"data": []}
    sent = session.requests[0]
    assert sent["method"] == "GET"
    assert sent["url"] == "http://hms.test/api/lab/orders"
    assert sent["params"] == {"patientId": "p-1"}
    assert sent["timeout"] == 3


def test_auth_and_tenant_headers():
    session = _Session(_Response(payload=[]))
    _client(session, token="abc", tenant_subdomain="city")
    assert session.headers["Authorization"] == "Bearer abc"
    assert session.headers["X-Tenant-Subdomain"] == "city"
    assert session.headers["Accept"] == "application/json"


def test_no_auth_header_without_token():
    session = _Session(_Response(payload=[]))
    _client(session)
    assert "Authorization" not in session.headers


def test_status_error():
    client = _client(_Session(_Response(status_code=503, payload={"error": "down"})))
    with pytest.raises(ApiStatusError) as excinfo:
        client.get("/appointments")
    assert excinfo.value.status_code == 503
    assert excinfo.value.method == "GET"


def test_transport_error():
    client = _client(_Session(error=requests.ConnectionError("refused")))
    with pytest.raises(ApiTransportError):
        client.get("/appointments")


def test_decode_error():
    client = _client(_Session(_Response(content=b"<html>")))
    with pytest.raises(ApiDecodeError):
        client.get("/appointments")


def test_empty_body_is_none():
    client = _client(_Session(_Response(status_code=204)))
    assert client.delete("/patients/p-1/notes/n-1") is None


def test_post_sends_json():
    session = _Session(_Response(payload={"id": "n-2"}))
    assert _client(session).post("/patients/p-1/notes", json={"content": "x"}) == {"id": "n-2"}
    assert session.requests[0]["json"] == {"content": "x"}


# ── configuration ─────────────────────────────────────────────────────────

def test_config_defaults(monkeypatch):
    for name in ("HMS_API_BASE_URL", "HMS_API_TOKEN", "HMS_TENANT_SUBDOMAIN", "HMS_API_TIMEOUT_SECONDS", "HISTORY_FETCH_WORKERS"):
        monkeypatch.delenv(name, raising=False)
    config = ClientConfig.from_env()
    assert config.base_url == "http://localhost:5000/api"
    assert config.token is None
    assert config.timeout_seconds == 15.0
    assert config.max_workers == 8


def test_config_from_env(monkeypatch):
    monkeypatch.setenv("HMS_API_BASE_URL", "https://hms.example/api")
    monkeypatch.setenv("HMS_API_TOKEN", "tok")
    monkeypatch.setenv("HMS_TENANT_SUBDOMAIN", "  ")
    monkeypatch.setenv("HMS_API_TIMEOUT_SECONDS", "2.5")
    monkeypatch.setenv("HISTORY_FETCH_WORKERS", "4")
    config = ClientConfig.from_env()
    assert config.base_url == "https://hms.example/api"
    assert config.token == "tok"
    assert config.tenant_subdomain is None
    assert config.timeout_seconds == 2.5
    assert config.max_workers == 4


def test_config_rejects_bad_numbers(monkeypatch):
    monkeypatch.setenv("HISTORY_FETCH_WORKERS", "many")
    with pytest.raises(RuntimeError):
        ClientConfig.from_env()
