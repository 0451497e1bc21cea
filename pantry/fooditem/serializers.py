from category.models import Category
from rest_framework import serializers
from translation.serializers import TranslationInlineSerializer

from .models import FoodItem, FoodItemCustomField
from .services import create_food_item, update_food_item

FOOD_ITEM_FIELDS = [
    "image_url",
    "thumbnail_url",
    "item_limit",
    "limit_type",
    "in_stock",
    "must_go",
    "low_supply",
    "kosher",
    "halal",
    "vegetarian",
    "vegan",
    "gluten_free",
    "organic",
    "ready_to_eat",
]


class FoodItemCustomFieldSerializer(serializers.ModelSerializer):
    class Meta:
        model = FoodItemCustomField
        fields = ["key", "value"]


class FoodItemReadSerializer(serializers.ModelSerializer):
    category_name = serializers.CharField(source="category.name", read_only=True)
    custom_fields = FoodItemCustomFieldSerializer(many=True, read_only=True)
    translations = TranslationInlineSerializer(many=True, read_only=True)

    class Meta:
        model = FoodItem
        fields = [
            "id",
            "name",
            "category",
            "category_name",
            *FOOD_ITEM_FIELDS,
            "custom_fields",
            "translations",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class FoodItemWriteSerializer(serializers.ModelSerializer):
    """
    Ecriture:
    - name : validé / normalisé par fooditem.services
    - category_id : catégorie existante
    - item_limit : borné par PantrySettings.global_upper_limit (service)
    - custom_fields : [{"key": "...", "value": "..."}] (remplace la liste existante)
    """
    name = serializers.CharField(max_length=255, trim_whitespace=False)
    category_id = serializers.PrimaryKeyRelatedField(
        source="category",
        queryset=Category.objects.all(),
    )
    # borne haute vérifiée au service (dépend du réglage global)
    item_limit = serializers.IntegerField(required=False)
    custom_fields = FoodItemCustomFieldSerializer(many=True, required=False)

    class Meta:
        model = FoodItem
        fields = [
            "id",
            "name",
            "category_id",
            *FOOD_ITEM_FIELDS,
            "custom_fields",
        ]
        read_only_fields = ["id"]

    def create(self, validated_data):
        return create_food_item(**validated_data)

    def update(self, instance, validated_data):
        return update_food_item(instance, **validated_data)
