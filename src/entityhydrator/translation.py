"""
Locale-sensitive translation resolution.

Translatable entities carry their locale-specific values in a
``translations`` collection. Resolving a translation copies the selected
translation's fields onto the same-named fields of the entity itself; the
``translations`` collection is left intact.

Selection order: the requested language, then the configured default
language, then the channel's default language, then the first translation.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from entityhydrator.context import RequestContext
from entityhydrator.entities.base import GraphModel, TranslatableEntity, Translation
from entityhydrator.entities.metadata import EntityMetadata
from entityhydrator.paths import RelationNode, iter_reached
from entityhydrator.types import LanguageCode

logger = logging.getLogger(__name__)

# Fields of a translation that are never projected onto the owner
_TRANSLATION_KEYS = frozenset({"id", "language_code"})


def select_translation(
    translations: Sequence[Translation],
    language_codes: Sequence[LanguageCode],
) -> Translation | None:
    """
    Pick the translation for the first matching language code.

    Falls back to the first translation when none of the codes match.

    Returns:
        The selected translation, or None if there are no translations
    """
    if not translations:
        return None
    for code in language_codes:
        for translation in translations:
            if translation.language_code == code:
                return translation
    return translations[0]


def translate_entity(entity: TranslatableEntity, language_codes: Sequence[LanguageCode]) -> bool:
    """
    Project the best matching translation onto ``entity``.

    Returns:
        True if a translation was applied, False if the entity has no
        loaded translations
    """
    translations = getattr(entity, "translations", None)
    if not translations:
        return False

    translation = select_translation(translations, language_codes)
    if translation is None:
        return False

    owner_fields = type(entity).model_fields
    metadata = EntityMetadata.for_model(type(translation))
    for name in metadata.scalar_fields:
        if name in _TRANSLATION_KEYS or name not in owner_fields:
            continue
        setattr(entity, name, getattr(translation, name))
    entity.language_code = translation.language_code
    return True


class TranslationResolver:
    """
    Applies translations to every translatable entity reached by a request.

    Example:
        >>> resolver = TranslationResolver(default_language_code="en")
        >>> resolver.translate(ctx, product, tree)
    """

    def __init__(self, default_language_code: LanguageCode) -> None:
        self._default_language_code = default_language_code

    def language_codes(self, ctx: RequestContext) -> list[LanguageCode]:
        """Language codes in order of preference for ``ctx``."""
        codes: list[LanguageCode] = []
        for code in (
            ctx.language_code,
            self._default_language_code,
            ctx.channel.default_language_code,
        ):
            if code and code not in codes:
                codes.append(code)
        return codes

    def translate(self, ctx: RequestContext, root: GraphModel, tree: RelationNode) -> int:
        """
        Translate the root and every translatable entity along ``tree``.

        Returns:
            Number of entities a translation was applied to
        """
        codes = self.language_codes(ctx)
        translated = 0
        for model in iter_reached(root, tree):
            if isinstance(model, TranslatableEntity) and translate_entity(model, codes):
                translated += 1
        logger.debug(
            "Applied translations to %d entities",
            translated,
            extra={"entity_type": type(root).__name__, "language_codes": codes},
        )
        return translated
