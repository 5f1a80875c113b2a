"""
Registry for entity schemas.

Entity types (tour, destination, category, ...) register their
translatable field definitions here, and every part of the pipeline
looks them up by entity type name.
"""

from __future__ import annotations

from lingotour.core.models import EntitySchema


class RegistryError(Exception):
    """Raised when there's an error with the registry."""
    pass


class SchemaRegistry:
    """
    Central registry of translatable entity schemas.

    Schemas register themselves by entity type, and request handlers
    reference them by entity type.
    """

    def __init__(self):
        # entity_type -> schema
        self._schemas: dict[str, EntitySchema] = {}

    def register(self, schema: EntitySchema) -> None:
        """Register a schema by its entity type."""
        if schema.entity_type in self._schemas:
            raise RegistryError(f"Schema '{schema.entity_type}' is already registered")
        self._schemas[schema.entity_type] = schema

    def get(self, entity_type: str) -> EntitySchema:
        """Get a schema by entity type."""
        if entity_type not in self._schemas:
            raise RegistryError(f"Schema '{entity_type}' not found")
        return self._schemas[entity_type]

    def has(self, entity_type: str) -> bool:
        return entity_type in self._schemas

    def list_entity_types(self) -> list[str]:
        """List all registered entity types."""
        return list(self._schemas.keys())


# =============================================================================
# Global Registry Instance
# =============================================================================

_registry: SchemaRegistry | None = None


def get_registry() -> SchemaRegistry:
    """Get the global registry instance."""
    global _registry
    if _registry is None:
        _registry = SchemaRegistry()
    return _registry


def reset_registry() -> None:
    """Reset the global registry (mainly for testing)."""
    global _registry
    _registry = None
