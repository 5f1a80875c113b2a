"""
Internationalization - LLM-powered translation of catalog content.

Design:
1. English is the source; ar, es, fr, de are the targets (in that order)
2. Batch: one provider call for every locale, never raises
3. Streaming: one provider call per locale, each result streamed as it lands
4. Provider output is filtered through the canonical locale set

Usage:
    from lingotour.i18n import Translator, LocaleDispatcher, TranslationStreamClient

    # Batch
    bundle = await Translator().translate(record, schema.fields, "tour")

    # Streaming (server)
    async for event in LocaleDispatcher(storage, translator).dispatch("tour", tour_id):
        yield encode_event(event)

    # Streaming (client)
    session = await TranslationStreamClient(http).translate("tour", tour_id)
"""

from lingotour.i18n.languages import (
    Locale,
    SOURCE_LOCALE,
    LOCALE_NAMES,
    RTL_LOCALES,
    TRANSLATABLE_LOCALES,
    get_locale_name,
    describe_locales,
    parse_locale,
    is_rtl,
)
from lingotour.i18n.fields import extract_fields
from lingotour.i18n.prompts import SYSTEM_PROMPT, build_translation_prompt
from lingotour.i18n.bundle import (
    parse_bundle,
    normalize_translations,
    strip_empty_locales,
    count_filled_fields,
)
from lingotour.i18n.translator import (
    Translator,
    TranslationError,
    get_translator,
)
from lingotour.i18n.autotranslate import auto_translate_entity
from lingotour.i18n.dispatcher import LocaleDispatcher
from lingotour.i18n.framing import EventStreamDecoder, encode_event, iter_events
from lingotour.i18n.merge import TranslationSession
from lingotour.i18n.consumer import TranslationStreamClient, consume_stream

__all__ = [
    # Locales
    "Locale",
    "SOURCE_LOCALE",
    "LOCALE_NAMES",
    "RTL_LOCALES",
    "TRANSLATABLE_LOCALES",
    "get_locale_name",
    "describe_locales",
    "parse_locale",
    "is_rtl",
    # Extraction and prompts
    "extract_fields",
    "SYSTEM_PROMPT",
    "build_translation_prompt",
    # Bundles
    "parse_bundle",
    "normalize_translations",
    "strip_empty_locales",
    "count_filled_fields",
    # Batch
    "Translator",
    "TranslationError",
    "get_translator",
    "auto_translate_entity",
    # Streaming
    "LocaleDispatcher",
    "EventStreamDecoder",
    "encode_event",
    "iter_events",
    "TranslationSession",
    "TranslationStreamClient",
    "consume_stream",
]
