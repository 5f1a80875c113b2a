"""
Core module - fundamental data models and infrastructure.

This module contains:
- models: Field definitions, entity schemas, bundle types
- events: Stream events exchanged by dispatcher and consumer
- registry: Entity schema registry
"""

from lingotour.core.models import (
    FieldKind,
    FieldDef,
    EntitySchema,
    LocaleStatus,
    FieldSet,
    LocaleTranslation,
    TranslationBundle,
)

from lingotour.core.events import (
    StartEvent,
    TranslatingEvent,
    LocaleDoneEvent,
    ErrorEvent,
    SavingEvent,
    DoneEvent,
    StreamEvent,
    event_from_payload,
)

from lingotour.core.registry import (
    SchemaRegistry,
    RegistryError,
    get_registry,
    reset_registry,
)

__all__ = [
    # Models
    "FieldKind",
    "FieldDef",
    "EntitySchema",
    "LocaleStatus",
    "FieldSet",
    "LocaleTranslation",
    "TranslationBundle",
    # Events
    "StartEvent",
    "TranslatingEvent",
    "LocaleDoneEvent",
    "ErrorEvent",
    "SavingEvent",
    "DoneEvent",
    "StreamEvent",
    "event_from_payload",
    # Registry
    "SchemaRegistry",
    "RegistryError",
    "get_registry",
    "reset_registry",
]
