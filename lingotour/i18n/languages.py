"""
Canonical target locales and utilities.

English is the source language of all catalog content and is never a
translation target. The order of TRANSLATABLE_LOCALES is the order in
which locales are translated and streamed.
"""

from enum import Enum


SOURCE_LOCALE = "en"


class Locale(str, Enum):
    """Locales eligible for translation."""

    AR = "ar"      # Arabic - RTL
    ES = "es"      # Spanish
    FR = "fr"      # French
    DE = "de"      # German


# Human-readable names
LOCALE_NAMES: dict[str, str] = {
    "ar": "Arabic",
    "es": "Spanish",
    "fr": "French",
    "de": "German",
}


# RTL locales (need special UI handling)
RTL_LOCALES: list[Locale] = [
    Locale.AR,
]


# Canonical, ordered list of target locale codes
TRANSLATABLE_LOCALES: list[str] = [locale.value for locale in Locale]


# =============================================================================
# Utilities
# =============================================================================


def get_locale_name(code: str) -> str:
    """Get human-readable locale name."""
    return LOCALE_NAMES.get(code.lower(), code)


def normalize_locale_code(code: str) -> str:
    """Normalize a locale code to its canonical form."""
    code = code.lower().strip().replace("_", "-")

    # Region subtags are not distinguished ("es-MX" -> "es")
    if "-" in code:
        code = code.split("-", 1)[0]

    variants = {
        "arabic": "ar",
        "spanish": "es",
        "french": "fr",
        "german": "de",
    }

    return variants.get(code, code)


def parse_locale(code: object) -> Locale | None:
    """
    Map a raw key onto the canonical locale set.

    Returns None for anything outside the set, including non-strings.
    Keys are matched exactly: provider output must use canonical codes.
    """
    if not isinstance(code, str):
        return None
    try:
        return Locale(code)
    except ValueError:
        return None


def is_rtl(code: str) -> bool:
    """Check if locale is right-to-left."""
    return normalize_locale_code(code) in [locale.value for locale in RTL_LOCALES]


def describe_locales(locales: list[str] | None = None) -> list[dict[str, object]]:
    """Locale metadata for UIs (tabs, direction)."""
    return [
        {
            "code": code,
            "name": get_locale_name(code),
            "rtl": is_rtl(code),
        }
        for code in (locales if locales is not None else TRANSLATABLE_LOCALES)
    ]
