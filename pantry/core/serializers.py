from rest_framework import serializers


class NamePreviewRequestSerializer(serializers.Serializer):
    value = serializers.CharField(allow_blank=True, trim_whitespace=False)


class NamePreviewResponseSerializer(serializers.Serializer):
    value = serializers.CharField(allow_blank=True)
    warnings = serializers.ListField(child=serializers.CharField())
