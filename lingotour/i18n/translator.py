"""
LLM-powered entity translator.

Translates the English field set of a catalog entity into the canonical
target locales, either all at once (one provider call) or one locale at
a time for the streaming dispatcher.
"""

from __future__ import annotations

import json
import logging

from lingotour.core.models import FieldDef, FieldSet, LocaleTranslation, TranslationBundle
from lingotour.i18n.bundle import filter_bundle, parse_bundle
from lingotour.i18n.fields import extract_fields
from lingotour.i18n.languages import TRANSLATABLE_LOCALES, parse_locale
from lingotour.i18n.prompts import SYSTEM_PROMPT, build_translation_prompt
from lingotour.integrations.sentry import capture_exception
from lingotour.services.ai.client import CompletionProvider, get_provider

logger = logging.getLogger(__name__)


class TranslationError(Exception):
    """A provider call failed or produced nothing usable."""

    def __init__(self, message: str, locale: str | None = None):
        super().__init__(message)
        self.locale = locale


class Translator:
    """
    Main translation service.

    Usage:
        translator = Translator(provider)

        # All locales in one call; never raises, {} on any failure
        bundle = await translator.translate(fields, schema.fields, "tour")

        # One locale; raises TranslationError on failure
        es = await translator.translate_locale(fields, schema.fields, "tour", "es")
    """

    def __init__(
        self,
        provider: CompletionProvider | None = None,
        locales: list[str] | None = None,
    ):
        self._provider = provider
        self.locales = list(locales) if locales is not None else list(TRANSLATABLE_LOCALES)

    @property
    def provider(self) -> CompletionProvider:
        if self._provider is None:
            self._provider = get_provider()
        return self._provider

    async def translate(
        self,
        fields: FieldSet,
        field_defs: list[FieldDef],
        entity_type: str,
    ) -> TranslationBundle:
        """
        Translate a field set into every target locale with one provider call.

        Translation failure must never break the surrounding operation
        (e.g. saving the entity), so every failure path returns an empty
        bundle instead of raising.

        Args:
            fields: English values (filtered again through field_defs)
            field_defs: Translatable fields of the entity type
            entity_type: Context for the prompt ("tour", ...)

        Returns:
            Bundle of canonical locales that came back as objects
        """
        to_translate = extract_fields(fields, field_defs)
        if not to_translate:
            return {}

        prompt = build_translation_prompt(to_translate, entity_type, self.locales, field_defs)

        try:
            raw = await self.provider.complete_json(SYSTEM_PROMPT, prompt)
        except Exception as e:
            logger.warning(f"Auto-translate failed for {entity_type}: {e}")
            capture_exception(e, entity_type=entity_type)
            return {}

        bundle = parse_bundle(raw, self.locales)
        missing = [code for code in self.locales if code not in bundle]
        if missing:
            logger.info(f"Translation for {entity_type} is missing locales: {', '.join(missing)}")
        return bundle

    async def translate_locale(
        self,
        fields: FieldSet,
        field_defs: list[FieldDef],
        entity_type: str,
        locale: str,
    ) -> LocaleTranslation:
        """
        Translate a field set into a single locale.

        Raises:
            TranslationError: provider failure, empty body, invalid JSON,
                or no usable object for the locale
        """
        if parse_locale(locale) is None:
            raise TranslationError(f"Unsupported locale: {locale}", locale)

        to_translate = extract_fields(fields, field_defs)
        if not to_translate:
            raise TranslationError("No translatable content", locale)

        prompt = build_translation_prompt(to_translate, entity_type, [locale], field_defs)

        try:
            raw = await self.provider.complete_json(SYSTEM_PROMPT, prompt)
        except Exception as e:
            logger.warning(f"Translation to {locale} failed for {entity_type}: {e}")
            capture_exception(e, entity_type=entity_type, locale=locale)
            raise TranslationError(f"Provider error: {e}", locale) from e

        return parse_locale_translation(raw, locale, set(to_translate))


def parse_locale_translation(
    raw: str | None,
    locale: str,
    source_keys: set[str],
) -> LocaleTranslation:
    """
    Extract one locale's fields from a single-locale response.

    Accepts ``{"<locale>": {...}}``. A bare field object is accepted too
    when every key is one of the source fields, since models asked for a
    single locale sometimes drop the wrapper.
    """
    if not raw:
        raise TranslationError("Empty response", locale)

    try:
        parsed = json.loads(raw)
    except (TypeError, ValueError) as e:
        raise TranslationError("Invalid JSON in response", locale) from e

    bundle = filter_bundle(parsed, [locale])
    if locale in bundle:
        translation = bundle[locale]
    elif isinstance(parsed, dict) and parsed and set(parsed) <= source_keys:
        translation = parsed
    else:
        raise TranslationError(f"Response has no object for {locale}", locale)

    if not translation:
        raise TranslationError(f"Empty translation for {locale}", locale)
    return translation


# =============================================================================
# Module-level convenience
# =============================================================================


_translator: Translator | None = None


def get_translator() -> Translator:
    """Get or create the global translator instance."""
    global _translator
    if _translator is None:
        _translator = Translator()
    return _translator
