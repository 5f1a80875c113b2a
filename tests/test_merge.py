"""
Tests for the client-side merge state machine.
"""

import pytest
from lingotour.core.events import (
    DoneEvent,
    ErrorEvent,
    LocaleDoneEvent,
    SavingEvent,
    StartEvent,
    TranslatingEvent,
)
from lingotour.core.models import LocaleStatus
from lingotour.i18n.merge import TranslationSession


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def session():
    return TranslationSession()


# =============================================================================
# Status Tests
# =============================================================================


class TestStatuses:
    def test_all_pending_initially(self, session):
        assert session.statuses == {
            "ar": LocaleStatus.PENDING,
            "es": LocaleStatus.PENDING,
            "fr": LocaleStatus.PENDING,
            "de": LocaleStatus.PENDING,
        }
        assert session.progress == 0.0

    def test_translating_sets_active_locale(self, session):
        session.apply(TranslatingEvent(locale="es"))

        assert session.status("es") == LocaleStatus.TRANSLATING
        assert session.active_locale == "es"
        assert session.is_translating

    def test_statuses_is_a_copy(self, session):
        session.statuses["ar"] = LocaleStatus.DONE
        assert session.status("ar") == LocaleStatus.PENDING

    def test_progress_is_recomputed(self, session):
        session.apply(LocaleDoneEvent(locale="ar", translation={"title": "أ"}))
        assert session.progress == 0.25
        session.apply(ErrorEvent(locale="es"))
        assert session.progress == 0.25
        session.apply(LocaleDoneEvent(locale="fr", translation={"title": "F"}))
        assert session.progress == 0.5

    def test_start_resets_listed_locales(self, session):
        session.apply(ErrorEvent(locale="de"))
        session.apply(StartEvent(locales=["ar", "es", "fr", "de"], total=4))
        assert session.status("de") == LocaleStatus.PENDING

    def test_unknown_locales_are_ignored(self, session):
        session.apply(TranslatingEvent(locale="it"))
        session.apply(LocaleDoneEvent(locale="it", translation={"title": "Ciao"}))
        session.apply(ErrorEvent(locale="en"))

        assert "it" not in session.statuses
        assert session.bundle == {}
        assert session.active_locale is None
        assert not session.failed


# =============================================================================
# Merge Tests
# =============================================================================


class TestMerge:
    def test_done_done_error(self, session):
        session.apply(LocaleDoneEvent(locale="ar", translation={"title": "جولة"}))
        session.apply(LocaleDoneEvent(locale="es", translation={"title": "Tour"}))
        session.apply(ErrorEvent(locale="fr", error="bad JSON"))

        assert session.bundle == {"ar": {"title": "جولة"}, "es": {"title": "Tour"}}
        assert session.status("ar") == LocaleStatus.DONE
        assert session.status("es") == LocaleStatus.DONE
        assert session.status("fr") == LocaleStatus.ERROR
        assert session.status("de") == LocaleStatus.PENDING
        assert not session.failed

    def test_merge_keeps_seeded_locales(self):
        session = TranslationSession(bundle={"de": {"title": "Alt"}, "xx": {"title": "?"}})
        session.apply(LocaleDoneEvent(locale="es", translation={"title": "Hola"}))

        assert session.bundle == {"de": {"title": "Alt"}, "es": {"title": "Hola"}}

    def test_merge_replaces_only_that_locale(self):
        session = TranslationSession(bundle={"es": {"title": "Viejo"}, "fr": {"title": "Vieux"}})
        session.apply(LocaleDoneEvent(locale="es", translation={"title": "Nuevo"}))

        assert session.bundle == {"es": {"title": "Nuevo"}, "fr": {"title": "Vieux"}}

    def test_locale_done_selects_locale(self, session):
        session.apply(TranslatingEvent(locale="ar"))
        session.apply(LocaleDoneEvent(locale="ar", translation={"title": "أ"}))

        assert session.selected_locale == "ar"
        assert session.active_locale is None

    def test_empty_translation_is_not_merged(self, session):
        session.apply(LocaleDoneEvent(locale="fr", translation={}))

        assert session.status("fr") == LocaleStatus.DONE
        assert "fr" not in session.bundle

    def test_publishes_snapshots(self):
        published = []
        session = TranslationSession(on_update=published.append)

        session.apply(LocaleDoneEvent(locale="ar", translation={"highlights": ["أ"]}))
        session.apply(LocaleDoneEvent(locale="es", translation={"highlights": ["Uno"]}))
        session.bundle["ar"]["highlights"].append("ب")

        assert published == [
            {"ar": {"highlights": ["أ"]}},
            {"ar": {"highlights": ["أ"]}, "es": {"highlights": ["Uno"]}},
        ]


# =============================================================================
# Session Lifecycle Tests
# =============================================================================


class TestLifecycle:
    def test_terminal_error(self, session):
        session.apply(LocaleDoneEvent(locale="ar", translation={"title": "أ"}))
        session.apply(ErrorEvent(error="tour not found"))

        assert session.failed
        assert session.error == "tour not found"
        assert session.bundle == {"ar": {"title": "أ"}}

    def test_terminal_error_default_message(self, session):
        session.apply(ErrorEvent())
        assert session.error == "Translation failed"

    def test_saving_then_done(self, session):
        session.apply(SavingEvent(message="Saving translations to database..."))
        assert session.saving

        session.apply(DoneEvent(success=True, translated_locales=["ar", "fr", "zz"]))
        assert not session.saving
        assert session.finished
        assert session.translated_locales == ["ar", "fr"]
