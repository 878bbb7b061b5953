"""
Tests for the codegen cache API.
"""

import pytest
from fastapi.testclient import TestClient

from codegen_cache.api.app import create_app
from codegen_cache.config import Settings
from codegen_cache.errors import UpstreamError
from codegen_cache.repositories import InMemoryEntryRepository

from conftest import FailingReadStore, FailingWriteStore, FakeGenerationProvider

REQUEST = {
    "device_name": "dev1",
    "keyword": "led",
    "language": "python",
    "prompt": "blink an LED",
    "refresh": False,
}


def test_root(client):
    """Test root endpoint."""
    response = client.get("/")
    assert response.status_code == 200
    data = response.json()
    assert data["name"] == "Codegen Cache API"


def test_health(client):
    """Health does not require the API key."""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {
        "status": "healthy",
        "store_healthy": True,
        "provider_healthy": True,
    }


@pytest.mark.parametrize("headers", [{}, {"X-API-Key": "wrong"}])
def test_protected_endpoints_reject_bad_key(client, provider, headers):
    assert client.post("/generate", json=REQUEST, headers=headers).status_code == 401
    assert client.get("/code", params={"device": "dev1"}, headers=headers).status_code == 401
    assert client.get("/stats", headers=headers).status_code == 401
    assert provider.calls == 0


def test_generate_then_fetch(client, provider, auth_headers):
    response = client.post("/generate", json=REQUEST, headers=auth_headers)
    assert response.status_code == 200
    expected = {
        "device_name": "dev1",
        "keyword": "led",
        "language": "python",
        "prompt": "blink an LED",
        "output": "import machine\nled.on()",
    }
    assert response.json() == expected

    response = client.get("/code", params={"device": "dev1"}, headers=auth_headers)
    assert response.status_code == 200
    assert response.json() == expected
    assert provider.calls == 1


def test_generate_is_served_from_cache(client, provider, auth_headers):
    client.post("/generate", json=REQUEST, headers=auth_headers)
    response = client.post(
        "/generate",
        json={**REQUEST, "prompt": "different prompt"},
        headers=auth_headers,
    )

    assert response.status_code == 200
    assert response.json()["prompt"] == "blink an LED"
    assert provider.calls == 1


def test_refresh_regenerates(test_settings, auth_headers):
    provider = FakeGenerationProvider("import old", "import new")
    app = create_app(config=test_settings, store=InMemoryEntryRepository(), provider=provider)

    with TestClient(app) as client:
        client.post("/generate", json=REQUEST, headers=auth_headers)
        response = client.post(
            "/generate",
            json={**REQUEST, "prompt": "blink faster", "refresh": True},
            headers=auth_headers,
        )
        stored = client.get("/code", params={"device": "dev1"}, headers=auth_headers).json()

    assert response.json()["output"] == "import new"
    assert stored["prompt"] == "blink faster"
    assert stored["output"] == "import new"


def test_missing_field_is_bad_request(client, provider, auth_headers):
    body = {key: value for key, value in REQUEST.items() if key != "keyword"}

    response = client.post("/generate", json=body, headers=auth_headers)

    assert response.status_code == 400
    assert "keyword" in response.json()["detail"]
    assert provider.calls == 0


def test_unknown_device_is_not_found(client, auth_headers):
    response = client.get("/code", params={"device": "ghost"}, headers=auth_headers)

    assert response.status_code == 404
    assert response.json() == {"detail": "device not found"}


def test_missing_device_param_is_bad_request(client, auth_headers):
    response = client.get("/code", headers=auth_headers)
    assert response.status_code == 400


def test_upstream_failure_is_bad_gateway(test_settings, auth_headers):
    provider = FakeGenerationProvider(UpstreamError("connection refused"))
    store = InMemoryEntryRepository()
    app = create_app(config=test_settings, store=store, provider=provider)

    with TestClient(app) as client:
        response = client.post("/generate", json=REQUEST, headers=auth_headers)

    assert response.status_code == 502
    assert "connection refused" in response.json()["detail"]
    assert store.count_all() == 0


def test_storage_failure_is_server_error(test_settings, auth_headers):
    app = create_app(
        config=test_settings,
        store=FailingWriteStore(),
        provider=FakeGenerationProvider("out"),
    )

    with TestClient(app) as client:
        response = client.post("/generate", json=REQUEST, headers=auth_headers)

    assert response.status_code == 500


def test_storage_read_failure_is_not_reported_as_save(test_settings, provider, auth_headers):
    app = create_app(config=test_settings, store=FailingReadStore(), provider=provider)

    with TestClient(app) as client:
        response = client.post("/generate", json=REQUEST, headers=auth_headers)

    assert response.status_code == 500
    assert response.json() == {"detail": "Storage failure: database is locked"}
    assert provider.calls == 0


def test_whitespace_device_is_not_found(client, auth_headers):
    response = client.get("/code", params={"device": " "}, headers=auth_headers)

    assert response.status_code == 404


def test_whitespace_prompt_is_accepted(client, provider, auth_headers):
    response = client.post("/generate", json={**REQUEST, "prompt": " "}, headers=auth_headers)

    assert response.status_code == 200
    assert response.json()["prompt"] == " "
    assert provider.prompts == [" "]


def test_stats(client, auth_headers):
    client.post("/generate", json=REQUEST, headers=auth_headers)

    response = client.get("/stats", headers=auth_headers)

    assert response.status_code == 200
    data = response.json()
    assert data["total_entries"] == 1
    assert data["store_backend"] == "memory"
    assert data["model"] == "fake-model"


def test_startup_fails_without_service_api_key(store, provider):
    app = create_app(config=Settings(service_api_key="", store_backend="memory"), store=store, provider=provider)

    with pytest.raises(RuntimeError, match="SERVICE_API_KEY"):
        with TestClient(app):
            pass
