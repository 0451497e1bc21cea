from django.db import transaction
from rest_framework import serializers

from .models import Language
from .services import add_language, set_language_active


class LanguageReadSerializer(serializers.ModelSerializer):
    is_default = serializers.BooleanField(read_only=True)

    class Meta:
        model = Language
        fields = [
            "id",
            "code",
            "name",
            "active",
            "is_default",
        ]
        read_only_fields = fields


class LanguageWriteSerializer(serializers.ModelSerializer):
    """
    - create : language.services.add_language (nom par défaut si absent)
    - update : nom modifiable, `active` passe par set_language_active
      (balayage des traductions si la langue devient active)
    """

    class Meta:
        model = Language
        fields = [
            "id",
            "code",
            "name",
            "active",
        ]
        read_only_fields = ["id"]
        extra_kwargs = {
            "name": {"required": False, "allow_blank": True},
        }

    def validate_code(self, value: str) -> str:
        v = (value or "").strip().lower()

        # codes ISO courts (fr, es, zh) ou régionaux (pt-br)
        if len(v) < 2 or len(v) > 10:
            raise serializers.ValidationError("Code de langue invalide (ex: fr, es, zh).")
        if self.instance is not None and self.instance.is_default and v != self.instance.code:
            raise serializers.ValidationError("Le code de la langue par défaut ne peut pas changer.")
        return v

    def create(self, validated_data):
        return add_language(
            validated_data["code"],
            name=validated_data.get("name"),
            active=validated_data.get("active", True),
        )

    def update(self, instance, validated_data):
        active = validated_data.pop("active", None)

        with transaction.atomic():
            fields = []
            for attr in ("code", "name"):
                value = (validated_data.get(attr) or "").strip()
                if value and value != getattr(instance, attr):
                    setattr(instance, attr, value)
                    fields.append(attr)
            if fields:
                instance.save(update_fields=fields)

            if active is not None:
                set_language_active(instance, active)
        return instance


class LanguageStateSerializer(serializers.Serializer):
    code = serializers.CharField(max_length=10)
    active = serializers.BooleanField()

    def validate_code(self, value: str) -> str:
        return value.strip().lower()


class LanguageBulkUpdateSerializer(serializers.Serializer):
    languages = LanguageStateSerializer(many=True, allow_empty=False)


class LanguageBulkUpdateResponseSerializer(serializers.Serializer):
    changed = LanguageReadSerializer(many=True)
