"""
Accès aux traductions, clé = (entité, langue).
"""
import logging

from category.models import Category
from core.models import EntityType
from django.db import IntegrityError, transaction
from fooditem.models import FoodItem
from language.models import Language

from .exceptions import EntityNotFound
from .models import Translation

logger = logging.getLogger(__name__)

ENTITY_MODELS = {
    EntityType.CATEGORY: Category,
    EntityType.FOOD_ITEM: FoodItem,
}

ENTITY_FIELDS = {
    EntityType.CATEGORY: "category_id",
    EntityType.FOOD_ITEM: "food_item_id",
}


def _entity_field(entity_type: str) -> str:
    try:
        return ENTITY_FIELDS[entity_type]
    except KeyError:
        raise ValueError(f"Unknown entity type: {entity_type!r}")


def get_entity(entity_type: str, entity_id: int) -> Category | FoodItem:
    model = ENTITY_MODELS.get(entity_type)
    if model is None:
        raise ValueError(f"Unknown entity type: {entity_type!r}")
    try:
        return model.objects.get(pk=entity_id)
    except model.DoesNotExist:
        raise EntityNotFound(entity_type, entity_id)


def find_translation(entity_type: str, entity_id: int, language: Language) -> Translation | None:
    lookup = {_entity_field(entity_type): entity_id, "language": language}
    return Translation.objects.filter(**lookup).first()


def upsert_translation(
        entity_type: str,
        entity_id: int,
        language: Language,
        text: str,
        is_automatic: bool,
) -> tuple[Translation, bool]:
    """
    Crée la traduction si absente, sinon met à jour le texte + is_automatic.
    Si une autre tâche insère la même clé entre-temps, on retombe sur un update.
    """
    lookup = {_entity_field(entity_type): entity_id, "language": language}
    defaults = {"translated_text": text, "is_automatic": is_automatic}

    try:
        with transaction.atomic():
            translation, created = Translation.objects.update_or_create(defaults=defaults, **lookup)
    except IntegrityError:
        logger.info(
            "upsert_translation: concurrent insert entity_type=%s entity_id=%s language=%s, retry as update",
            entity_type, entity_id, language.code,
        )
        translation = Translation.objects.get(**lookup)
        translation.translated_text = text
        translation.is_automatic = is_automatic
        translation.save(update_fields=["translated_text", "is_automatic", "updated_at"])
        created = False

    return translation, created


def delete_translation(pk: int) -> bool:
    deleted, _ = Translation.objects.filter(pk=pk).delete()
    return bool(deleted)
