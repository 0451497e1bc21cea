from rest_framework import serializers
from translation.serializers import TranslationInlineSerializer

from .models import Category
from .services import create_category, update_category


class CategoryReadSerializer(serializers.ModelSerializer):
    translations = TranslationInlineSerializer(many=True, read_only=True)
    food_item_count = serializers.SerializerMethodField()

    class Meta:
        model = Category
        fields = [
            "id",
            "name",
            "translations",
            "food_item_count",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields

    def get_food_item_count(self, obj: Category) -> int:
        return obj.food_items.count()


class CategoryWriteSerializer(serializers.ModelSerializer):
    """
    Le nom est validé/normalisé par category.services (core.validation.validate_name),
    pas ici : une NameValidationError devient un 400 {"name": [...]} dans le viewset.
    """

    # pas de UniqueValidator auto : l'unicité (insensible à la casse, catégories + articles) est gérée au service
    name = serializers.CharField(max_length=255, trim_whitespace=False)

    class Meta:
        model = Category
        fields = ["id", "name"]
        read_only_fields = ["id"]

    def create(self, validated_data):
        return create_category(name=validated_data["name"])

    def update(self, instance, validated_data):
        return update_category(instance, name=validated_data.get("name"))
