"""
Local storage implementations for development.

In-memory or JSON-file backed document stores that work without any
external services.
"""

from __future__ import annotations

import copy
import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from lingotour.storage.base import MetadataStorage


# =============================================================================
# In-Memory Metadata Storage
# =============================================================================


class InMemoryMetadataStorage(MetadataStorage):
    """In-memory document storage for development and tests."""

    def __init__(self):
        self._data: dict[str, dict[str, dict[str, Any]]] = {}

    async def save(self, collection: str, id: str, data: dict[str, Any]) -> None:
        if collection not in self._data:
            self._data[collection] = {}
        self._data[collection][id] = {
            **copy.deepcopy(data),
            "_id": id,
            "_updated_at": datetime.now(timezone.utc).isoformat(),
        }

    async def get(self, collection: str, id: str) -> dict[str, Any] | None:
        doc = self._data.get(collection, {}).get(id)
        # Callers get a copy, like a lean() read from a real store
        return copy.deepcopy(doc) if doc is not None else None

    async def update(self, collection: str, id: str, updates: dict[str, Any]) -> bool:
        if collection in self._data and id in self._data[collection]:
            self._data[collection][id].update(copy.deepcopy(updates))
            self._data[collection][id]["_updated_at"] = datetime.now(timezone.utc).isoformat()
            return True
        return False


# =============================================================================
# JSON File Metadata Storage
# =============================================================================


class JsonFileMetadataStorage(InMemoryMetadataStorage):
    """
    Document storage persisted to one JSON file per collection.

    Layout: <base_path>/<collection>.json -> {id: document}
    """

    def __init__(self, base_path: str = "./data/documents"):
        super().__init__()
        self.base_path = Path(base_path)
        self.base_path.mkdir(parents=True, exist_ok=True)
        for path in self.base_path.glob("*.json"):
            self._data[path.stem] = json.loads(path.read_text(encoding="utf-8"))

    def _flush(self, collection: str) -> None:
        path = self.base_path / f"{collection}.json"
        path.write_text(
            json.dumps(self._data.get(collection, {}), ensure_ascii=False, indent=2),
            encoding="utf-8",
        )

    async def save(self, collection: str, id: str, data: dict[str, Any]) -> None:
        await super().save(collection, id, data)
        self._flush(collection)

    async def update(self, collection: str, id: str, updates: dict[str, Any]) -> bool:
        updated = await super().update(collection, id, updates)
        if updated:
            self._flush(collection)
        return updated


# =============================================================================
# Factory
# =============================================================================


def create_local_storage(data_dir: str | None = None) -> MetadataStorage:
    """Create a document store: file-backed when a directory is given."""
    if data_dir:
        return JsonFileMetadataStorage(f"{data_dir}/documents")
    return InMemoryMetadataStorage()
