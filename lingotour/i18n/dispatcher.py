"""
Streaming locale dispatcher.

Translates one entity locale by locale and yields an event for every
step as soon as it happens, so an editor sees the first language long
before the last one is finished.

Locales run strictly in canonical order, one provider call at a time.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from typing import AsyncIterator, Awaitable, Callable, Union

from lingotour.core.events import (
    DoneEvent,
    ErrorEvent,
    LocaleDoneEvent,
    SavingEvent,
    StartEvent,
    StreamEvent,
    TranslatingEvent,
)
from lingotour.core.models import TranslationBundle
from lingotour.core.registry import RegistryError, SchemaRegistry, get_registry
from lingotour.i18n.bundle import merge_locale, normalize_translations
from lingotour.i18n.fields import extract_fields
from lingotour.i18n.languages import LOCALE_NAMES, get_locale_name
from lingotour.i18n.translator import TranslationError, Translator
from lingotour.integrations.sentry import capture_exception
from lingotour.storage.base import MetadataStorage

logger = logging.getLogger(__name__)


# Returns True once the caller has gone away (sync or async)
StopCheck = Callable[[], Union[bool, Awaitable[bool]]]


class LocaleDispatcher:
    """
    Produces the event stream for one translation session.

    Usage:
        dispatcher = LocaleDispatcher(storage, translator)
        async for event in dispatcher.dispatch("tour", tour_id):
            yield encode_event(event)
    """

    def __init__(
        self,
        storage: MetadataStorage,
        translator: Translator,
        registry: SchemaRegistry | None = None,
        persist: bool = True,
    ):
        self.storage = storage
        self.translator = translator
        self.registry = registry or get_registry()
        self.persist = persist

    async def dispatch(
        self,
        entity_type: str,
        entity_id: str,
        should_stop: StopCheck | None = None,
    ) -> AsyncIterator[StreamEvent]:
        """
        Run one session.

        Every failure becomes an event: per-locale failures are reported
        with their locale and the loop continues; anything that makes the
        whole session pointless is a single top-level error, after which
        the stream ends.

        Locales already delivered are saved even when the caller closes
        or cancels the stream part way through.
        """
        events = self._run(entity_type, entity_id, should_stop)
        try:
            async for event in events:
                yield event
        except Exception as e:
            logger.error(f"Streaming translate error for {entity_type} {entity_id}: {e}")
            capture_exception(e, entity_type=entity_type, entity_id=entity_id)
            yield ErrorEvent(error=str(e) or "Translation failed")
        finally:
            # Runs _run's cleanup now rather than at garbage collection
            await events.aclose()

    async def _run(
        self,
        entity_type: str,
        entity_id: str,
        should_stop: StopCheck | None,
    ) -> AsyncIterator[StreamEvent]:
        try:
            schema = self.registry.get(entity_type)
        except RegistryError:
            yield ErrorEvent(error=f"Unknown entity type: {entity_type}")
            return

        record = await self.storage.get(schema.collection, entity_id)
        if record is None:
            yield ErrorEvent(error=f"{entity_type} not found")
            return

        fields = extract_fields(record, schema.fields)
        if not fields:
            yield ErrorEvent(error="No translatable content found")
            return

        locales = list(self.translator.locales)
        total = len(locales)
        yield StartEvent(
            locales=locales,
            locale_names={code: LOCALE_NAMES.get(code, code) for code in locales},
            total=total,
        )

        bundle: TranslationBundle = normalize_translations(record.get("translations"))
        translated: list[str] = []
        saved = False

        try:
            for index, locale in enumerate(locales):
                if should_stop is not None and await _stopped(should_stop):
                    logger.info(
                        f"Client left during {entity_type} {entity_id}; "
                        f"skipping {total - index} remaining locale(s)"
                    )
                    return

                locale_name = get_locale_name(locale)
                yield TranslatingEvent(locale=locale, locale_name=locale_name, index=index, total=total)

                try:
                    translation = await self.translator.translate_locale(
                        fields, schema.fields, entity_type, locale
                    )
                except TranslationError as e:
                    yield ErrorEvent(locale=locale, error=str(e))
                    continue

                merge_locale(bundle, locale, translation)
                translated.append(locale)
                yield LocaleDoneEvent(
                    locale=locale,
                    translation=translation,
                    locale_name=locale_name,
                    index=index,
                    total=total,
                )

            if self.persist and translated:
                yield SavingEvent(message="Saving translations to database...")
                saved = True
                await self._save(schema.collection, entity_id, bundle)
            yield DoneEvent(success=True, translated_locales=translated)
        finally:
            # Stopped, closed or cancelled early: keep what was already delivered
            if self.persist and translated and not saved:
                await asyncio.shield(
                    self._save_partial(schema.collection, entity_id, bundle, translated)
                )

    async def _save(self, collection: str, entity_id: str, bundle: TranslationBundle) -> None:
        updated = await self.storage.set_translations(collection, entity_id, bundle)
        if not updated:
            raise RuntimeError(f"Failed to save translations for {entity_id}")

    async def _save_partial(
        self,
        collection: str,
        entity_id: str,
        bundle: TranslationBundle,
        translated: list[str],
    ) -> None:
        try:
            await self._save(collection, entity_id, bundle)
        except Exception as e:
            logger.warning(f"Could not save partial translations for {entity_id}: {e}")
            capture_exception(e, entity_id=entity_id)
            return
        logger.info(f"Saved {', '.join(translated)} for {entity_id} after the stream ended early")


async def _stopped(should_stop: StopCheck) -> bool:
    result = should_stop()
    if inspect.isawaitable(result):
        result = await result
    return bool(result)
