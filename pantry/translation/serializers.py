from core.models import EntityType
from language.models import Language
from rest_framework import serializers

from .models import Translation


class TranslationInlineSerializer(serializers.ModelSerializer):
    """Traduction embarquée dans une catégorie / un article."""

    language_code = serializers.CharField(source="language.code", read_only=True)

    class Meta:
        model = Translation
        fields = ["id", "language_code", "translated_text", "is_automatic"]
        read_only_fields = fields


class TranslationReadSerializer(serializers.ModelSerializer):
    language_code = serializers.CharField(source="language.code", read_only=True)
    entity_type = serializers.CharField(read_only=True)
    entity_id = serializers.IntegerField(read_only=True)

    class Meta:
        model = Translation
        fields = [
            "id",
            "entity_type",
            "entity_id",
            "category",
            "food_item",
            "language",
            "language_code",
            "translated_text",
            "is_automatic",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class TranslationUpdateSerializer(serializers.ModelSerializer):
    """Edition manuelle du texte : la ligne passe en is_automatic=False (vue)."""

    class Meta:
        model = Translation
        fields = ["translated_text"]

    def validate_translated_text(self, value):
        value = (value or "").strip()
        if not value:
            raise serializers.ValidationError("Translated text is required")
        return value


class ManualTranslationSerializer(serializers.Serializer):
    """
    POST /api/translation/category/{id}/ | food-item/{id}/
    Upsert manuel (entité, langue).
    """

    language = serializers.SlugRelatedField(slug_field="code", queryset=Language.objects.all())
    translated_text = serializers.CharField(max_length=255)

    def validate_translated_text(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError("Translated text is required")
        return value

    def validate_language(self, language):
        if language.is_default:
            raise serializers.ValidationError("The default language is not a translation target")
        return language


class GenerateTranslationsSerializer(serializers.Serializer):
    entity_type = serializers.ChoiceField(choices=EntityType.choices)
    entity_id = serializers.IntegerField(min_value=1)


class TranslateRequestSerializer(serializers.Serializer):
    target = serializers.CharField(max_length=10)  # ex: "es"
    texts = serializers.ListField(
        child=serializers.CharField(allow_blank=True, trim_whitespace=False),
        allow_empty=False,
        max_length=50,
    )

    def validate_target(self, value):
        return value.strip().lower()


class TranslateResponseSerializer(serializers.Serializer):
    translations = serializers.ListField(child=serializers.CharField(allow_blank=True))
