"""
Tests for the stream consumer and the HTTP streaming client.

Partial results survive every kind of early termination.
"""

import asyncio

import httpx
import pytest
from conftest import TOUR_ID, FakeProvider, locale_json
from lingotour.api.app import app, get_entity_translator, get_schema_registry, get_storage
from lingotour.core.events import ErrorEvent, LocaleDoneEvent, TranslatingEvent
from lingotour.core.models import LocaleStatus
from lingotour.i18n.consumer import TranslationStreamClient, consume_stream
from lingotour.i18n.framing import encode_event
from lingotour.i18n.merge import TranslationSession
from lingotour.i18n.translator import Translator


async def chunked(data: bytes, size: int = 5):
    for i in range(0, len(data), size):
        yield data[i:i + size]


def two_of_four() -> bytes:
    """Stream that stops after two locales with no terminal marker."""
    return b"".join(
        encode_event(e)
        for e in [
            TranslatingEvent(locale="ar"),
            LocaleDoneEvent(locale="ar", translation={"title": "جولة"}),
            TranslatingEvent(locale="es"),
            LocaleDoneEvent(locale="es", translation={"title": "Tour"}),
            TranslatingEvent(locale="fr"),
        ]
    )


# =============================================================================
# consume_stream Tests
# =============================================================================


class TestConsumeStream:
    @pytest.mark.asyncio
    async def test_abrupt_end_keeps_partial_results(self):
        published = []
        session = TranslationSession(on_update=published.append)

        await consume_stream(chunked(two_of_four()), session)

        assert session.bundle == {"ar": {"title": "جولة"}, "es": {"title": "Tour"}}
        assert published[-1] == session.bundle
        assert session.status("fr") == LocaleStatus.TRANSLATING
        assert session.status("de") == LocaleStatus.PENDING
        assert not session.finished
        assert not session.failed

    @pytest.mark.asyncio
    async def test_half_record_at_end_is_dropped(self):
        data = two_of_four() + encode_event(LocaleDoneEvent(locale="fr", translation={"title": "Visite"}))[:-1]
        session = TranslationSession()

        await consume_stream(chunked(data), session)

        assert "fr" not in session.bundle

    @pytest.mark.asyncio
    async def test_transport_error_is_not_raised(self):
        async def broken():
            async for chunk in chunked(two_of_four()):
                yield chunk
            raise httpx.ReadError("connection reset")

        session = await consume_stream(broken(), TranslationSession())

        assert set(session.bundle) == {"ar", "es"}

    @pytest.mark.asyncio
    async def test_terminal_error_stops_reading(self):
        data = encode_event(ErrorEvent(error="tour not found")) + encode_event(
            LocaleDoneEvent(locale="ar", translation={"title": "أ"})
        )

        session = await consume_stream(chunked(data, size=len(data)), TranslationSession())

        assert session.failed
        assert session.error == "tour not found"
        assert session.bundle == {}

    @pytest.mark.asyncio
    async def test_timeout_marks_session(self):
        async def slow():
            yield encode_event(LocaleDoneEvent(locale="ar", translation={"title": "أ"}))
            await asyncio.sleep(10)
            yield encode_event(LocaleDoneEvent(locale="es", translation={"title": "Hola"}))

        session = await consume_stream(slow(), TranslationSession(), timeout=0.05)

        assert session.timed_out
        assert session.bundle == {"ar": {"title": "أ"}}
        assert session.pending_locales == ["es", "fr", "de"]


# =============================================================================
# TranslationStreamClient Tests
# =============================================================================


@pytest.fixture
def api(storage, registry):
    """Wire the app to the test store; returns the scripted provider."""
    provider = FakeProvider()
    translator = Translator(provider)
    app.dependency_overrides[get_storage] = lambda: storage
    app.dependency_overrides[get_entity_translator] = lambda: translator
    app.dependency_overrides[get_schema_registry] = lambda: registry
    yield provider
    app.dependency_overrides.clear()


def http_client() -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://test")


class TestTranslationStreamClient:
    @pytest.mark.asyncio
    async def test_full_session(self, api, storage):
        api.responses = [
            locale_json("ar", title="جولة الأهرامات"),
            locale_json("es", title="Tour de las Pirámides"),
            RuntimeError("rate limited"),
            locale_json("de", title="Pyramiden-Tour"),
        ]

        async with http_client() as http:
            session = await TranslationStreamClient(http).translate("tour", TOUR_ID)

        assert set(session.bundle) == {"ar", "es", "de"}
        assert session.statuses["fr"] == LocaleStatus.ERROR
        assert session.progress == 0.75
        assert session.finished
        assert session.translated_locales == ["ar", "es", "de"]

    @pytest.mark.asyncio
    async def test_seeded_bundle(self, api):
        api.responses = [RuntimeError("down")] * 3 + [locale_json("de", title="Neu")]

        async with http_client() as http:
            session = await TranslationStreamClient(http).translate(
                "tour", TOUR_ID, existing={"es": {"title": "Viejo"}}
            )

        assert session.bundle == {"es": {"title": "Viejo"}, "de": {"title": "Neu"}}

    @pytest.mark.asyncio
    async def test_entity_not_found(self, api):
        async with http_client() as http:
            session = await TranslationStreamClient(http).translate("tour", "missing")

        assert session.failed
        assert session.error == "tour not found"

    @pytest.mark.asyncio
    async def test_rejected_request(self, api):
        async with http_client() as http:
            session = await TranslationStreamClient(http).translate("hotel", TOUR_ID)

        assert session.failed
        assert session.error.startswith("Invalid entity_type")
