"""
Point d'entrée unique vers le traducteur externe.

    translate(text, target_language, context) -> str

`context` : "category" | "foodItem" | "customInput".
Toute erreur remonte en TranslationFailed ; les éventuels retries sont
l'affaire du backend (client OpenAI), jamais de l'appelant.
"""
import logging

from django.conf import settings

from ..exceptions import TranslationFailed
from .deepl import deepl_translate, deepl_translate_many
from .openai_translator import OpenAiTranslator

logger = logging.getLogger(__name__)

CONTEXTS = ("category", "foodItem", "customInput")


def translate(text: str, target_language: str, context: str) -> str:
    if context not in CONTEXTS:
        raise ValueError(f"Unknown translation context: {context!r}")
    if not (text or "").strip():
        raise TranslationFailed("Nothing to translate")

    backend = getattr(settings, "TRANSLATION_BACKEND", "deepl")
    logger.debug("translate: backend=%s target=%s context=%s", backend, target_language, context)

    if backend == "deepl":
        result = deepl_translate(text, target_language, context)
    elif backend == "openai":
        result = OpenAiTranslator().translate(text, target_language, context)
    else:
        raise TranslationFailed(f"Unknown translation backend: {backend!r}")

    if not result:
        raise TranslationFailed("Translation failed - empty response")
    return result


def translate_many(texts: list[str], target_language: str, context: str = "customInput") -> list[str]:
    """
    Traduit une liste de textes, même ordre en sortie.
    Les textes vides ne partent pas chez le traducteur et restent vides.
    """
    indexed = [(i, t.strip()) for i, t in enumerate(texts) if (t or "").strip()]
    out = [""] * len(texts)
    if not indexed:
        return out

    backend = getattr(settings, "TRANSLATION_BACKEND", "deepl")
    if backend == "deepl":
        # 1 seul appel DeepL pour tout le lot
        results = deepl_translate_many(
            [t for _, t in indexed],
            settings.PANTRY_DEFAULT_LANGUAGE,
            target_language,
            context=context,
        )
    else:
        results = [translate(t, target_language, context) for _, t in indexed]

    for (i, _), translated in zip(indexed, results):
        out[i] = translated
    return out
