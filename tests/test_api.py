"""
Tests for the HTTP endpoints.
"""

import json

import pytest
from conftest import TOUR_ID, FakeProvider, locale_json
from fastapi.testclient import TestClient
from lingotour.api.app import app, get_entity_translator, get_schema_registry, get_storage, state
from lingotour.core.registry import get_registry, reset_registry
from lingotour.i18n.framing import EventStreamDecoder
from lingotour.i18n.translator import Translator, get_translator
from lingotour.storage import Collections


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def provider():
    return FakeProvider()


@pytest.fixture
def client(storage, registry, provider):
    translator = Translator(provider)
    app.dependency_overrides[get_storage] = lambda: storage
    app.dependency_overrides[get_entity_translator] = lambda: translator
    app.dependency_overrides[get_schema_registry] = lambda: registry
    yield TestClient(app)
    app.dependency_overrides.clear()


def decode(body: bytes) -> list:
    decoder = EventStreamDecoder()
    events = decoder.feed(body)
    decoder.close()
    return events


# =============================================================================
# Metadata Endpoints
# =============================================================================


class TestMetadata:
    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_locales(self, client):
        locales = client.get("/locales").json()["locales"]
        assert [l["code"] for l in locales] == ["ar", "es", "fr", "de"]
        assert locales[0]["rtl"] is True


# =============================================================================
# Request Validation
# =============================================================================


class TestValidation:
    @pytest.mark.parametrize("path", ["/admin/translate", "/admin/translate/stream"])
    def test_invalid_entity_type(self, client, path):
        response = client.post(path, json={"entity_type": "hotel", "id": TOUR_ID})

        assert response.status_code == 400
        assert response.json() == {
            "success": False,
            "error": "Invalid entity_type. Must be one of: category, destination, tour",
        }

    @pytest.mark.parametrize("path", ["/admin/translate", "/admin/translate/stream"])
    def test_missing_id(self, client, path):
        response = client.post(path, json={"entity_type": "tour"})

        assert response.status_code == 400
        assert response.json()["error"] == "Missing id"


# =============================================================================
# Batch Endpoint
# =============================================================================


class TestTranslateEndpoint:
    @pytest.mark.asyncio
    async def test_translates_and_saves(self, client, provider, storage):
        provider.responses = [
            json.dumps({"es": {"title": "Tour de las Pirámides"}, "fr": {"title": "Visite"}, "it": {"title": "Giro"}})
        ]

        response = client.post("/admin/translate", json={"entity_type": "tour", "id": TOUR_ID})

        assert response.status_code == 200
        assert response.json()["translated_locales"] == ["es", "fr"]
        record = await storage.get(Collections.TOURS, TOUR_ID)
        assert set(record["translations"]) == {"es", "fr"}

    def test_provider_failure_is_not_an_error(self, client, provider):
        provider.responses = [RuntimeError("rate limited")]

        response = client.post("/admin/translate", json={"entity_type": "tour", "id": TOUR_ID})

        assert response.status_code == 200
        assert response.json() == {
            "success": True,
            "message": "No translations produced",
            "translated_locales": [],
        }

    def test_missing_entity(self, client):
        response = client.post("/admin/translate", json={"entity_type": "tour", "id": "missing"})

        assert response.status_code == 404
        assert response.json()["error"] == "tour not found"


# =============================================================================
# Streaming Endpoint
# =============================================================================


class TestStreamEndpoint:
    def test_streams_event_records(self, client, provider):
        provider.responses = [
            locale_json("ar", title="جولة"),
            locale_json("es", title="Tour"),
            locale_json("fr", title="Visite"),
            locale_json("de", title="Tour"),
        ]

        with client.stream(
            "POST", "/admin/translate/stream", json={"entity_type": "tour", "id": TOUR_ID}
        ) as response:
            assert response.status_code == 200
            assert response.headers["content-type"].startswith("text/event-stream")
            assert response.headers["cache-control"] == "no-cache"
            body = response.read()

        events = decode(body)
        assert events[0].kind == "start"
        assert events[-1].kind == "done"
        assert [e.locale for e in events if e.kind == "locale_done"] == ["ar", "es", "fr", "de"]
        assert "جولة".encode("utf-8") in body

    def test_missing_entity_is_one_error_event(self, client):
        response = client.post("/admin/translate/stream", json={"entity_type": "tour", "id": "missing"})

        assert response.status_code == 200
        assert response.text == 'event: error\ndata: {"error": "tour not found"}\n\n'


# =============================================================================
# Startup
# =============================================================================


class TestLifespan:
    @pytest.fixture(autouse=True)
    def fresh_registry(self):
        reset_registry()
        yield
        reset_registry()

    def test_startup_wires_defaults(self):
        with TestClient(app) as client:
            assert state.translator is get_translator()
            assert get_registry().has("tour")

            response = client.post("/admin/translate", json={"entity_type": "hotel", "id": TOUR_ID})

        assert response.status_code == 400
        assert response.json()["error"] == (
            "Invalid entity_type. Must be one of: category, destination, tour"
        )

    def test_startup_keeps_loaded_schemas(self):
        with TestClient(app):
            pass
        with TestClient(app):
            assert get_registry().list_entity_types() == ["category", "destination", "tour"]
