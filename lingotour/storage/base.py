"""
Storage abstraction layer.

The translation pipeline only needs a document store: look an entity up
by ID and write its ``translations`` attribute back. Implementations
(MongoDB, PostgreSQL JSONB, in-memory) plug in behind this interface.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from lingotour.core.models import TranslationBundle


class EntityNotFoundError(LookupError):
    """The document store has no record for the requested entity."""

    def __init__(self, entity_type: str, entity_id: str):
        super().__init__(f"{entity_type} not found")
        self.entity_type = entity_type
        self.entity_id = entity_id


# =============================================================================
# Storage Interface
# =============================================================================


class MetadataStorage(ABC):
    """
    Storage for catalog documents (tours, destinations, categories).

    Records are opaque mappings of attribute -> value.
    """

    @abstractmethod
    async def save(self, collection: str, id: str, data: dict[str, Any]) -> None:
        """Save a document to a collection."""
        pass

    @abstractmethod
    async def get(self, collection: str, id: str) -> dict[str, Any] | None:
        """Get a document by ID."""
        pass

    @abstractmethod
    async def update(self, collection: str, id: str, updates: dict[str, Any]) -> bool:
        """Partial update of a document."""
        pass

    async def set_translations(
        self,
        collection: str,
        id: str,
        translations: TranslationBundle,
    ) -> bool:
        """Replace a document's ``translations`` attribute."""
        return await self.update(collection, id, {"translations": translations})


# =============================================================================
# Collection Names
# =============================================================================


class Collections:
    """Standard collection names."""

    TOURS = "tours"
    DESTINATIONS = "destinations"
    CATEGORIES = "categories"
