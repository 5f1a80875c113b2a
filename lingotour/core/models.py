"""
Core data models for the translation pipeline.

These models describe which attributes of a catalog entity are
translatable and what shape translated content takes.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Union

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# Type Aliases
# =============================================================================


# A translatable value is either a scalar string or an ordered list of strings
FieldValue = Union[str, list[str]]

# field key -> value, only non-empty content
FieldSet = dict[str, FieldValue]

# Translated counterpart of a FieldSet for one locale
LocaleTranslation = dict[str, Any]

# locale code -> LocaleTranslation (sparse)
TranslationBundle = dict[str, LocaleTranslation]


# =============================================================================
# Enums
# =============================================================================


class FieldKind(str, Enum):
    """Shape of a translatable field."""

    TEXT = "text"  # Single line (titles, names, SEO titles)
    LONG_TEXT = "long_text"  # Multi-line prose
    LIST = "list"  # Ordered list of strings (highlights, includes)


class LocaleStatus(str, Enum):
    """Progress of one locale within a streaming session."""

    PENDING = "pending"  # Not started
    TRANSLATING = "translating"  # Provider call in flight
    DONE = "done"  # Translation received and merged
    ERROR = "error"  # Provider failed or returned garbage


# =============================================================================
# Field Definitions
# =============================================================================


class FieldDef(BaseModel):
    """
    Declares one translatable attribute of an entity type.

    Field definitions are immutable and loaded from the schema YAML files.
    """

    model_config = ConfigDict(frozen=True)

    key: str
    label: str = ""
    kind: FieldKind = FieldKind.TEXT
    max_length: int | None = None
    rows: int | None = None  # Editor hint for long_text fields

    @property
    def is_list(self) -> bool:
        return self.kind == FieldKind.LIST

    @property
    def display_label(self) -> str:
        return self.label or self.key.replace("_", " ").title()


class EntitySchema(BaseModel):
    """
    Translatable fields of one entity type and where its records live.

    Example:
        EntitySchema(
            entity_type="category",
            collection="categories",
            fields=[FieldDef(key="name"), FieldDef(key="description", kind="long_text")],
        )
    """

    model_config = ConfigDict(frozen=True)

    entity_type: str
    collection: str
    description: str = ""
    fields: list[FieldDef] = Field(default_factory=list)

    @property
    def field_keys(self) -> list[str]:
        return [f.key for f in self.fields]

    def get_field(self, key: str) -> FieldDef | None:
        for field_def in self.fields:
            if field_def.key == key:
                return field_def
        return None
