"""
Client-side state for one streaming translation session.

The consumer loop is the only writer: it applies each decoded event in
order. UI code reads snapshots (``statuses``, ``bundle_snapshot``) or
receives them through ``on_update``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable

from lingotour.core.events import (
    DoneEvent,
    ErrorEvent,
    LocaleDoneEvent,
    SavingEvent,
    StartEvent,
    StreamEvent,
    TranslatingEvent,
)
from lingotour.core.models import LocaleStatus, TranslationBundle
from lingotour.i18n.bundle import merge_locale, normalize_translations, snapshot
from lingotour.i18n.languages import TRANSLATABLE_LOCALES, parse_locale


@dataclass
class TranslationSession:
    """
    Merge state for one session.

    Usage:
        session = TranslationSession(bundle=entity.get("translations"))
        for event in events:
            session.apply(event)
        session.progress  # 0.0 .. 1.0
    """

    # Existing translations; stream results merge on top
    bundle: TranslationBundle = field(default_factory=dict)

    # Receives a bundle snapshot after every merge
    on_update: Callable[[TranslationBundle], None] | None = field(default=None, repr=False)

    active_locale: str | None = None
    selected_locale: str | None = None

    failed: bool = False
    error: str | None = None
    saving: bool = False
    finished: bool = False
    timed_out: bool = False
    translated_locales: list[str] = field(default_factory=list)

    _statuses: dict[str, LocaleStatus] = field(default_factory=dict, repr=False)

    def __post_init__(self):
        self.bundle = normalize_translations(self.bundle)
        self._statuses = {code: LocaleStatus.PENDING for code in TRANSLATABLE_LOCALES}

    # =========================================================================
    # Derived state
    # =========================================================================

    @property
    def statuses(self) -> dict[str, LocaleStatus]:
        return dict(self._statuses)

    def status(self, locale: str) -> LocaleStatus | None:
        return self._statuses.get(locale)

    @property
    def progress(self) -> float:
        """Fraction of canonical locales that are done."""
        done = sum(1 for s in self._statuses.values() if s == LocaleStatus.DONE)
        return done / len(self._statuses) if self._statuses else 0.0

    @property
    def pending_locales(self) -> list[str]:
        return [code for code, s in self._statuses.items() if s == LocaleStatus.PENDING]

    @property
    def is_translating(self) -> bool:
        return any(s == LocaleStatus.TRANSLATING for s in self._statuses.values())

    def bundle_snapshot(self) -> TranslationBundle:
        return snapshot(self.bundle)

    # =========================================================================
    # Transitions
    # =========================================================================

    def apply(self, event: StreamEvent) -> None:
        """Apply one event. Events for unknown locales are ignored."""
        if isinstance(event, StartEvent):
            for code in event.locales:
                if parse_locale(code) is not None:
                    self._statuses[code] = LocaleStatus.PENDING

        elif isinstance(event, TranslatingEvent):
            if parse_locale(event.locale) is None:
                return
            self._statuses[event.locale] = LocaleStatus.TRANSLATING
            self.active_locale = event.locale

        elif isinstance(event, LocaleDoneEvent):
            if parse_locale(event.locale) is None:
                return
            self._statuses[event.locale] = LocaleStatus.DONE
            if event.translation and merge_locale(self.bundle, event.locale, event.translation):
                self._publish()
            self.selected_locale = event.locale
            if self.active_locale == event.locale:
                self.active_locale = None

        elif isinstance(event, ErrorEvent):
            if event.is_terminal:
                self.failed = True
                self.error = event.error or "Translation failed"
                self.active_locale = None
                self.saving = False
                return
            if parse_locale(event.locale) is None:
                return
            self._statuses[event.locale] = LocaleStatus.ERROR
            if self.active_locale == event.locale:
                self.active_locale = None

        elif isinstance(event, SavingEvent):
            self.saving = True

        elif isinstance(event, DoneEvent):
            self.saving = False
            self.finished = True
            self.translated_locales = [
                code for code in event.translated_locales if parse_locale(code) is not None
            ]

    def fail(self, message: str) -> None:
        """Mark the session failed from outside the stream (HTTP error)."""
        self.failed = True
        self.error = message
        self.active_locale = None

    def _publish(self) -> None:
        if self.on_update is not None:
            self.on_update(self.bundle_snapshot())
