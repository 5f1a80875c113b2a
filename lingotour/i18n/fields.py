"""
Field extraction.

Turns an entity record into the flat set of translatable values that
actually have English content.
"""

from __future__ import annotations

from typing import Any, Mapping

from lingotour.core.models import FieldDef, FieldSet


def extract_fields(record: Mapping[str, Any], field_defs: list[FieldDef]) -> FieldSet:
    """
    Collect non-empty translatable values from a record.

    Strings are kept when they contain non-whitespace characters. Lists
    are kept when at least one string element is non-empty; empty
    elements inside a kept list stay in place so item positions line up
    with the translated list. Values whose shape doesn't match the field
    kind are skipped.

    Args:
        record: Entity record (any mapping of attribute -> value)
        field_defs: Translatable fields of the entity type

    Returns:
        FieldSet with only the fields worth translating
    """
    fields: FieldSet = {}

    for field_def in field_defs:
        value = record.get(field_def.key)

        if field_def.is_list:
            if not isinstance(value, (list, tuple)):
                continue
            items = [item for item in value if isinstance(item, str)]
            if any(item.strip() for item in items):
                fields[field_def.key] = items
        else:
            if isinstance(value, str) and value.strip():
                fields[field_def.key] = value

    return fields


def has_content(value: Any) -> bool:
    """Whether a translated value has anything in it."""
    if isinstance(value, (list, tuple)):
        return any(str(item).strip() for item in value)
    return isinstance(value, str) and bool(value.strip())
