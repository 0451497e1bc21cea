"""
Génération des traductions automatiques.

Une exécution = une entité (catégorie ou article) x toutes les langues actives
sauf la langue par défaut. Les langues sont traitées une par une, dans l'ordre
des codes, avec une pause fixe entre deux appels au traducteur. L'échec d'une
langue est journalisé et noté dans le résultat, il n'interrompt jamais la boucle.

Ces fonctions sont appelées depuis les tâches Celery (translation.tasks),
jamais directement dans une requête HTTP.
"""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable

from django.conf import settings
from language.models import Language

from .exceptions import TranslationFailed
from .models import Translation
from .services.translator import translate
from .store import ENTITY_MODELS, find_translation, get_entity, upsert_translation

logger = logging.getLogger(__name__)

Translator = Callable[[str, str, str], str]

TRANSLATED_TEXT_MAX_LENGTH = Translation._meta.get_field("translated_text").max_length


@dataclass
class TranslationOutcome:
    SUCCESS = "success"
    FAILURE = "failure"
    SKIPPED = "skipped"

    entity_type: str
    entity_id: int
    language_code: str
    status: str
    translation: Translation | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.status != self.FAILURE

    def as_dict(self) -> dict:
        return {
            "entity_type": str(self.entity_type),
            "entity_id": self.entity_id,
            "language_code": self.language_code,
            "status": self.status,
            "translation_id": self.translation.pk if self.translation else None,
            "error": self.error,
        }


class _Throttle:
    """Pause fixe entre deux appels consécutifs au traducteur."""

    def __init__(self, delay: float):
        self.delay = delay
        self._calls = 0

    def wait(self) -> None:
        if self._calls and self.delay > 0:
            time.sleep(self.delay)
        self._calls += 1


def _target_languages():
    return Language.active_objects.exclude(code=settings.PANTRY_DEFAULT_LANGUAGE).order_by("code")


def _translate_into(entity, entity_type: str, language: Language, translator: Translator,
                    throttle: _Throttle) -> TranslationOutcome:
    outcome = TranslationOutcome(
        entity_type=entity_type,
        entity_id=entity.pk,
        language_code=language.code,
        status=TranslationOutcome.SUCCESS,
    )

    if getattr(settings, "TRANSLATION_PRESERVE_MANUAL", True):
        existing = find_translation(entity_type, entity.pk, language)
        if existing is not None and not existing.is_automatic:
            logger.info(
                "translations: keep manual translation entity_type=%s entity_id=%s language=%s",
                entity_type, entity.pk, language.code,
            )
            outcome.status = TranslationOutcome.SKIPPED
            outcome.translation = existing
            return outcome

    throttle.wait()
    try:
        text = translator(entity.name, language.code, entity_type)
        text = (text or "").strip()
        if not text:
            raise TranslationFailed("empty translation")
        if len(text) > TRANSLATED_TEXT_MAX_LENGTH:
            raise TranslationFailed(f"translation too long ({len(text)} > {TRANSLATED_TEXT_MAX_LENGTH} characters)")
        translation, created = upsert_translation(entity_type, entity.pk, language, text, is_automatic=True)
    except Exception as e:
        logger.warning(
            "translations: failed entity_type=%s entity_id=%s language=%s reason=%s",
            entity_type, entity.pk, language.code, e,
            exc_info=not isinstance(e, TranslationFailed),
        )
        outcome.status = TranslationOutcome.FAILURE
        outcome.error = str(e) or e.__class__.__name__
        return outcome

    logger.info(
        "translations: %s entity_type=%s entity_id=%s language=%s translation_id=%s",
        "created" if created else "updated", entity_type, entity.pk, language.code, translation.pk,
    )
    outcome.translation = translation
    return outcome


def generate_automatic_translations(entity_type: str, entity_id: int, *,
                                    translator: Translator | None = None) -> list[TranslationOutcome]:
    """
    (Re)génère la traduction de `entity_type#entity_id` dans chaque langue active.

    Lève EntityNotFound si l'entité n'existe plus ; toute autre erreur est
    isolée par langue et rendue sous forme de TranslationOutcome(status="failure").
    """
    translator = translator or translate
    entity = get_entity(entity_type, entity_id)
    throttle = _Throttle(getattr(settings, "TRANSLATION_REQUEST_DELAY", 0))

    outcomes = [
        _translate_into(entity, entity_type, language, translator, throttle)
        for language in _target_languages()
    ]

    logger.info(
        "translations: run done entity_type=%s entity_id=%s success=%s failure=%s skipped=%s",
        entity_type, entity_id,
        sum(o.status == TranslationOutcome.SUCCESS for o in outcomes),
        sum(o.status == TranslationOutcome.FAILURE for o in outcomes),
        sum(o.status == TranslationOutcome.SKIPPED for o in outcomes),
    )
    return outcomes


def generate_translations_for_language(language_id: int, *,
                                       translator: Translator | None = None) -> list[TranslationOutcome]:
    """
    Balayage déclenché par l'activation d'une langue : toutes les catégories
    puis tous les articles. Rien à faire si la langue est absente, inactive ou
    si c'est la langue par défaut.
    """
    translator = translator or translate
    language = Language.objects.filter(pk=language_id).first()
    if language is None or not language.active or language.is_default:
        logger.info("translations: sweep skipped language_id=%s", language_id)
        return []

    throttle = _Throttle(getattr(settings, "TRANSLATION_REQUEST_DELAY", 0))
    outcomes = []
    for entity_type, model in ENTITY_MODELS.items():
        for entity in model.objects.order_by("pk").iterator():
            outcomes.append(_translate_into(entity, entity_type, language, translator, throttle))

    logger.info(
        "translations: sweep done language=%s entities=%s failure=%s",
        language.code, len(outcomes), sum(o.status == TranslationOutcome.FAILURE for o in outcomes),
    )
    return outcomes
