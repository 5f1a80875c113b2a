"""
Stream events exchanged between the locale dispatcher and its consumers.

Each event is one self-contained unit of the translation stream. On the
wire the event kind travels in the ``event:`` line and the remaining
fields are the JSON ``data:`` payload (see lingotour.i18n.framing).
"""

from __future__ import annotations

from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, Field, TypeAdapter, ValidationError


# =============================================================================
# Event Types
# =============================================================================


class _BaseEvent(BaseModel):
    kind: str

    def to_payload(self) -> dict[str, Any]:
        """JSON payload for the ``data:`` line (kind travels separately)."""
        return self.model_dump(exclude={"kind"}, exclude_none=True)


class StartEvent(_BaseEvent):
    """Session accepted; lists the locales that will be attempted."""

    kind: Literal["start"] = "start"
    locales: list[str] = Field(default_factory=list)
    locale_names: dict[str, str] = Field(default_factory=dict)
    total: int = 0


class TranslatingEvent(_BaseEvent):
    """The provider call for a locale has started."""

    kind: Literal["translating"] = "translating"
    locale: str
    locale_name: str | None = None
    index: int | None = None
    total: int | None = None


class LocaleDoneEvent(_BaseEvent):
    """A locale finished successfully and carries its translation."""

    kind: Literal["locale_done"] = "locale_done"
    locale: str
    translation: dict[str, Any] = Field(default_factory=dict)
    locale_name: str | None = None
    index: int | None = None
    total: int | None = None


class ErrorEvent(_BaseEvent):
    """
    A failure.

    With a locale: only that locale failed and the session continues.
    Without a locale: the whole session failed.
    """

    kind: Literal["error"] = "error"
    locale: str | None = None
    error: str | None = None

    @property
    def is_terminal(self) -> bool:
        return self.locale is None


class SavingEvent(_BaseEvent):
    """Merged translations are being written to the document store."""

    kind: Literal["saving"] = "saving"
    message: str = ""


class DoneEvent(_BaseEvent):
    """Session finished normally."""

    kind: Literal["done"] = "done"
    success: bool = True
    translated_locales: list[str] = Field(default_factory=list)


StreamEvent = Annotated[
    Union[StartEvent, TranslatingEvent, LocaleDoneEvent, ErrorEvent, SavingEvent, DoneEvent],
    Field(discriminator="kind"),
]

_event_adapter: TypeAdapter[StreamEvent] = TypeAdapter(StreamEvent)


def event_from_payload(kind: str, payload: Any) -> StreamEvent | None:
    """
    Build a typed event from a wire record.

    Returns None for unknown kinds and for payloads that don't fit the
    event's shape; callers treat both as "no event".
    """
    if not isinstance(payload, dict):
        return None
    try:
        return _event_adapter.validate_python({**payload, "kind": kind})
    except ValidationError:
        return None
