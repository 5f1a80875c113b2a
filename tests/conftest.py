"""
Shared fixtures: a scripted provider, an in-memory document store and a
registry loaded from the packaged schemas.
"""

from __future__ import annotations

import json

import pytest
import pytest_asyncio

from lingotour.config_loader import load_config
from lingotour.core.registry import SchemaRegistry
from lingotour.i18n.translator import Translator
from lingotour.services.ai.client import CompletionProvider
from lingotour.storage import Collections, InMemoryMetadataStorage


class FakeProvider(CompletionProvider):
    """
    Returns scripted responses in order.

    A response that is an exception instance is raised instead of
    returned. Every prompt is recorded.
    """

    def __init__(self, responses=None):
        self.responses = list(responses or [])
        self.calls: list[tuple[str, str]] = []

    async def complete_json(self, system: str, prompt: str) -> str | None:
        self.calls.append((system, prompt))
        if not self.responses:
            raise RuntimeError("No scripted response left")
        response = self.responses.pop(0)
        if isinstance(response, BaseException):
            raise response
        return response


def locale_json(locale: str, **fields) -> str:
    """Single-locale provider response."""
    return json.dumps({locale: fields}, ensure_ascii=False)


TOUR_ID = "tour_1"

TOUR_RECORD = {
    "title": "Pyramids Tour",
    "description": "A great tour",
    "highlights": ["Giza plateau", "", "Sphinx"],
    "meta_title": "   ",
    "price": 120,
}


@pytest.fixture
def registry():
    """Registry loaded from the packaged YAML schemas."""
    reg = SchemaRegistry()
    load_config(registry=reg)
    return reg


@pytest.fixture
def tour_schema(registry):
    return registry.get("tour")


@pytest_asyncio.fixture
async def storage():
    """In-memory store with one tour."""
    store = InMemoryMetadataStorage()
    await store.save(Collections.TOURS, TOUR_ID, TOUR_RECORD)
    return store


@pytest.fixture
def provider():
    return FakeProvider()


@pytest.fixture
def translator(provider):
    return Translator(provider)
