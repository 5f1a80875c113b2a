"""
Storage abstractions.

Integration points:
- MetadataStorage → MongoDB / PostgreSQL (JSONB) document store
"""

from lingotour.storage.base import (
    MetadataStorage,
    EntityNotFoundError,
    Collections,
)
from lingotour.storage.local import (
    InMemoryMetadataStorage,
    JsonFileMetadataStorage,
    create_local_storage,
)

__all__ = [
    "MetadataStorage",
    "EntityNotFoundError",
    "Collections",
    "InMemoryMetadataStorage",
    "JsonFileMetadataStorage",
    "create_local_storage",
]
