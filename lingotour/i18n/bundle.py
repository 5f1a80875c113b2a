"""
Translation bundle helpers.

A bundle maps locale codes to translated field sets. Every way into a
bundle goes through the canonical locale set: keys the provider (or a
stored record) invents are dropped here and never stored.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Mapping

from lingotour.core.models import LocaleTranslation, TranslationBundle
from lingotour.i18n.fields import has_content
from lingotour.i18n.languages import TRANSLATABLE_LOCALES, parse_locale

logger = logging.getLogger(__name__)


def parse_bundle(raw: str | None, locales: list[str] | None = None) -> TranslationBundle:
    """
    Parse provider output into a bundle.

    Never raises: a missing body, invalid JSON or a non-object document
    all produce an empty bundle. Within a valid document, a top-level key
    survives only if it is a canonical locale (and in ``locales`` when
    given) and its value is an object.
    """
    if not raw:
        return {}

    try:
        parsed = json.loads(raw)
    except (TypeError, ValueError):
        logger.warning("Provider returned invalid JSON")
        return {}

    return filter_bundle(parsed, locales)


def filter_bundle(parsed: Any, locales: list[str] | None = None) -> TranslationBundle:
    """Keep only canonical (and requested) locales with object values."""
    if not isinstance(parsed, Mapping):
        return {}

    allowed = set(locales) if locales is not None else None
    bundle: TranslationBundle = {}

    # Iterate the canonical set, not the input keys
    for locale in TRANSLATABLE_LOCALES:
        if allowed is not None and locale not in allowed:
            continue
        value = parsed.get(locale)
        if isinstance(value, Mapping):
            bundle[locale] = dict(value)

    dropped = [k for k in parsed if parse_locale(k) is None]
    if dropped:
        logger.debug(f"Dropped non-canonical locale keys: {dropped}")

    return bundle


def normalize_translations(value: Any) -> TranslationBundle:
    """
    Coerce a stored ``translations`` attribute into a plain bundle.

    None and non-mappings become an empty bundle.
    """
    if value is None:
        return {}
    return filter_bundle(value)


def strip_empty_locales(bundle: TranslationBundle) -> TranslationBundle:
    """Remove locales where every value is empty."""
    return {
        locale: fields
        for locale, fields in bundle.items()
        if any(has_content(v) for v in fields.values())
    }


def count_filled_fields(bundle: TranslationBundle, locale: str) -> int:
    """Number of fields with content for one locale."""
    fields = bundle.get(locale)
    if not fields:
        return 0
    return sum(1 for v in fields.values() if has_content(v))


def merge_locale(
    bundle: TranslationBundle,
    locale: str,
    translation: LocaleTranslation,
) -> bool:
    """
    Merge one locale's translation into a bundle in place.

    Only that locale's entry is replaced. Returns False (and leaves the
    bundle untouched) for non-canonical locales.
    """
    if parse_locale(locale) is None:
        return False
    bundle[locale] = dict(translation)
    return True


def snapshot(bundle: TranslationBundle) -> TranslationBundle:
    """Copy of a bundle that later merges won't mutate."""
    return {
        locale: {k: list(v) if isinstance(v, list) else v for k, v in fields.items()}
        for locale, fields in bundle.items()
    }
