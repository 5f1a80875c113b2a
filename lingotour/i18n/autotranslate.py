"""
One-shot translation of a stored entity.

Used by the non-streaming admin endpoint and after an editor saves an
entity: fetch, translate every locale in one call, write back.
"""

from __future__ import annotations

import logging

from lingotour.core.models import EntitySchema, TranslationBundle
from lingotour.i18n.bundle import normalize_translations, strip_empty_locales
from lingotour.i18n.translator import Translator
from lingotour.storage.base import EntityNotFoundError, MetadataStorage

logger = logging.getLogger(__name__)


async def auto_translate_entity(
    storage: MetadataStorage,
    schema: EntitySchema,
    translator: Translator,
    entity_id: str,
) -> TranslationBundle:
    """
    Translate an entity and persist the result.

    Returns the bundle that was produced (possibly empty). An empty
    bundle is never written, so an entity without translations stays
    without them.

    Raises:
        EntityNotFoundError: no record with that ID
    """
    record = await storage.get(schema.collection, entity_id)
    if record is None:
        raise EntityNotFoundError(schema.entity_type, entity_id)

    bundle = strip_empty_locales(await translator.translate(record, schema.fields, schema.entity_type))
    if not bundle:
        logger.info(f"No translations produced for {schema.entity_type} {entity_id}")
        return {}

    merged = normalize_translations(record.get("translations"))
    merged.update(bundle)
    await storage.set_translations(schema.collection, entity_id, merged)

    logger.info(
        f"Translated {schema.entity_type} {entity_id} into {', '.join(bundle)}"
    )
    return bundle
