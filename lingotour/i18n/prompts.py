"""
Translation prompts.

Builds the single instruction sent to the text-generation provider for a
field set and a list of target locales.
"""

from __future__ import annotations

import json

from lingotour.core.models import FieldDef, FieldSet
from lingotour.i18n.languages import get_locale_name, is_rtl


SYSTEM_PROMPT = "You are a translation API. Return only valid JSON."

SEO_FIELDS = ("meta_title", "meta_description")


def build_translation_prompt(
    fields: FieldSet,
    entity_type: str,
    locales: list[str],
    field_defs: list[FieldDef] | None = None,
) -> str:
    """
    Build the user prompt for translating ``fields`` into ``locales``.

    Args:
        fields: English values to translate
        entity_type: Free-text context ("tour", "destination", ...)
        locales: Target locale codes; the response must use exactly these keys
        field_defs: Optional definitions, used for length limits

    Returns:
        Prompt text
    """
    locale_list = ", ".join(f"{code} ({get_locale_name(code)})" for code in locales)

    rules = [
        "Keep proper nouns (city names, brand names, landmarks) in their commonly "
        "known local form (e.g. Cairo → القاهرة in Arabic)",
    ]

    rtl = [code for code in locales if is_rtl(code)]
    if rtl:
        names = ", ".join(f"{get_locale_name(code)} ({code})" for code in rtl)
        rules.append(f"For {names}, produce proper RTL text")

    rules.append("Keep translations natural and fluent, not literal word-for-word")

    seo = [key for key in SEO_FIELDS if key in fields]
    if seo:
        rules.append(f"For SEO fields ({', '.join(seo)}), optimize for the target language")

    lists = [key for key, value in fields.items() if isinstance(value, list)]
    if lists:
        rules.append(
            "Array fields must remain arrays with the same number of items, "
            "each item translated in the same position"
        )

    limits = _length_limits(fields, field_defs)
    if limits:
        rules.append(f"Respect maximum lengths in characters: {limits}")

    shape = ", ".join(f'"{code}": {{ ...fields }}' for code in locales)
    rules.append(
        f"Return ONLY a JSON object with exactly these top-level keys: {{ {shape} }}"
    )

    rule_text = "\n".join(f"- {rule}" for rule in rules)

    return (
        f"You are a professional translator for a tour booking website. "
        f"Translate the following English {entity_type} content into these locales: {locale_list}.\n"
        f"\n"
        f"Content to translate:\n"
        f"{json.dumps(fields, indent=2, ensure_ascii=False)}\n"
        f"\n"
        f"Rules:\n"
        f"{rule_text}"
    )


def _length_limits(fields: FieldSet, field_defs: list[FieldDef] | None) -> str:
    if not field_defs:
        return ""
    limits = [
        f"{d.key} ≤ {d.max_length}" + (" per item" if d.is_list else "")
        for d in field_defs
        if d.max_length and d.key in fields
    ]
    return ", ".join(limits)
