"""
Schema loader.

Loads the translatable field schemas from YAML files and registers
them with the schema registry.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml

from lingotour.core.models import EntitySchema
from lingotour.core.registry import SchemaRegistry, RegistryError, get_registry

logger = logging.getLogger(__name__)


DEFAULT_SCHEMA_DIR = Path(__file__).parent / "schemas"


class ConfigLoader:
    """
    Loads schema files and registers them with the system.

    This is the standard way to bootstrap the pipeline with the entity
    types it knows how to translate.
    """

    def __init__(
        self,
        schema_dir: Path | str | None = None,
        registry: SchemaRegistry | None = None,
    ):
        self.registry = registry or get_registry()

        # Default to the schemas/ directory shipped with the package
        if schema_dir is None:
            schema_dir = DEFAULT_SCHEMA_DIR
        self.schema_dir = Path(schema_dir)

    def load_all(self) -> int:
        """
        Load all schema files.

        Returns:
            Number of schemas registered
        """
        if not self.schema_dir.exists():
            logger.warning(f"Schema directory not found: {self.schema_dir}")
            return 0

        count = 0
        paths = sorted([*self.schema_dir.glob("*.yaml"), *self.schema_dir.glob("*.yml")])
        for path in paths:
            self.load_schema(path)
            count += 1

        logger.info(f"Loaded {count} entity schemas from {self.schema_dir}")
        return count

    def load_schema(self, path: Path | str) -> EntitySchema:
        """Load one entity schema from YAML."""
        path = Path(path)
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)

        schema = schema_from_dict(data, source=path.name)
        self.registry.register(schema)
        return schema


def schema_from_dict(data: Any, source: str = "<dict>") -> EntitySchema:
    """Validate raw YAML data into an EntitySchema."""
    if not isinstance(data, dict):
        raise RegistryError(f"Schema file {source} must contain a mapping")

    if "entity_type" not in data:
        raise RegistryError(f"Schema file {source} is missing 'entity_type'")

    data = dict(data)
    data.setdefault("collection", f"{data['entity_type']}s")

    schema = EntitySchema.model_validate(data)

    keys = schema.field_keys
    duplicates = {k for k in keys if keys.count(k) > 1}
    if duplicates:
        raise RegistryError(
            f"Schema '{schema.entity_type}' declares duplicate fields: {', '.join(sorted(duplicates))}"
        )

    return schema


def load_config(
    schema_dir: Path | str | None = None,
    registry: SchemaRegistry | None = None,
) -> int:
    """
    Convenience function to load all schemas.

    Returns:
        Number of schemas registered
    """
    loader = ConfigLoader(schema_dir, registry)
    return loader.load_all()
