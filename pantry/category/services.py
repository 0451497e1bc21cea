import logging

from core.models import EntityType
from core.validation import validate_name
from django.db import transaction
from django.db.models import ProtectedError
from translation.tasks import schedule_automatic_translations

from .models import Category

logger = logging.getLogger(__name__)


def create_category(*, name: str) -> Category:
    normalized = validate_name(name, EntityType.CATEGORY)

    with transaction.atomic():
        category = Category.objects.create(name=normalized)
        schedule_automatic_translations(EntityType.CATEGORY, category.pk)

    logger.info("create_category: created category_id=%s name=%r", category.pk, category.name)
    return category


def update_category(category: Category, *, name: str | None = None) -> Category:
    if name is None:
        return category

    normalized = validate_name(name, EntityType.CATEGORY, existing_id=category.pk)
    if normalized == category.name:
        logger.info("update_category: name unchanged category_id=%s", category.pk)
        return category

    with transaction.atomic():
        category.name = normalized
        category.save(update_fields=["name", "updated_at"])
        schedule_automatic_translations(EntityType.CATEGORY, category.pk)

    logger.info("update_category: renamed category_id=%s name=%r", category.pk, category.name)
    return category


def delete_category(category: Category) -> None:
    """Traductions supprimées en cascade ; refusé si des articles y sont rattachés."""
    pk = category.pk
    try:
        category.delete()
    except ProtectedError as e:
        logger.info("delete_category: refused category_id=%s, still used by %s food item(s)",
                    pk, len(e.protected_objects))
        raise ProtectedError("Category is used by food items", e.protected_objects) from e
    logger.info("delete_category: deleted category_id=%s", pk)
