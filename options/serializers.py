from rest_framework import serializers

from options.models import Option
from options.services import decode_value


class OptionSerializer(serializers.ModelSerializer):
    """Serializer for options with metadata; the value is returned decoded."""

    value = serializers.SerializerMethodField()

    class Meta:
        model = Option
        fields = [
            "name",
            "value",
            "autoload",
            "version",
            "updated_at",
            "created_at",
        ]
        read_only_fields = ["version", "updated_at", "created_at"]

    def get_value(self, obj):
        return decode_value(obj.value)


class OptionWriteSerializer(serializers.Serializer):
    """Serializer for writing/updating option values."""

    value = serializers.JSONField(
        help_text="Any JSON value to store for the option.",
    )
    autoload = serializers.BooleanField(
        required=False,
        help_text="Whether the option is loaded on every request. Unchanged if omitted.",
    )
