import logging

from core.models import EntityType, PantrySettings
from core.validation import validate_item_limit, validate_name
from django.db import transaction
from translation.tasks import schedule_automatic_translations

from .models import FoodItem, FoodItemCustomField

logger = logging.getLogger(__name__)


def _replace_custom_fields(food_item: FoodItem, custom_fields) -> None:
    food_item.custom_fields.all().delete()
    FoodItemCustomField.objects.bulk_create([
        FoodItemCustomField(food_item=food_item, key=cf["key"], value=cf.get("value", ""))
        for cf in custom_fields
    ])


def create_food_item(*, name: str, category, custom_fields=None, **attrs) -> FoodItem:
    normalized = validate_name(name, EntityType.FOOD_ITEM)
    if "item_limit" in attrs:
        attrs["item_limit"] = validate_item_limit(attrs["item_limit"], PantrySettings.load().global_upper_limit)

    with transaction.atomic():
        food_item = FoodItem.objects.create(name=normalized, category=category, **attrs)
        if custom_fields:
            _replace_custom_fields(food_item, custom_fields)
        schedule_automatic_translations(EntityType.FOOD_ITEM, food_item.pk)

    logger.info("create_food_item: created food_item_id=%s name=%r category_id=%s",
                food_item.pk, food_item.name, food_item.category_id)
    return food_item


def update_food_item(food_item: FoodItem, *, name: str | None = None, custom_fields=None, **attrs) -> FoodItem:
    """
    Met à jour uniquement les champs fournis.
    La traduction n'est relancée que si le nom normalisé change.
    """
    renamed = False
    if name is not None:
        normalized = validate_name(name, EntityType.FOOD_ITEM, existing_id=food_item.pk)
        renamed = normalized != food_item.name
        attrs["name"] = normalized

    if "item_limit" in attrs:
        attrs["item_limit"] = validate_item_limit(attrs["item_limit"], PantrySettings.load().global_upper_limit)

    with transaction.atomic():
        for attr, value in attrs.items():
            setattr(food_item, attr, value)
        food_item.save()

        if custom_fields is not None:
            _replace_custom_fields(food_item, custom_fields)

        if renamed:
            schedule_automatic_translations(EntityType.FOOD_ITEM, food_item.pk)

    logger.info("update_food_item: updated food_item_id=%s renamed=%s fields=%s",
                food_item.pk, renamed, sorted(attrs))
    return food_item


def delete_food_item(food_item: FoodItem) -> None:
    pk = food_item.pk
    food_item.delete()
    logger.info("delete_food_item: deleted food_item_id=%s", pk)
