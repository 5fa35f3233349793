"""
Configuration Export Serializers
"""
from rest_framework import serializers


class AllowListUpdateSerializer(serializers.Serializer):
    """
    Replacement allow-list submitted by an administrator.

    Accepts a list of names or a checkbox-style mapping of name to value.
    Falsy entries (``0``, ``false``, ``''``, ``null``) stand for unchecked
    boxes and are dropped; every other entry must name a known configuration
    object.
    """

    selected_configs = serializers.JSONField(
        help_text="Complete list (or checkbox mapping) of configuration names to expose"
    )

    def validate_selected_configs(self, value):
        if isinstance(value, dict):
            value = list(value.values())
        elif not isinstance(value, list):
            raise serializers.ValidationError(
                "Expected a list of configuration names or a checkbox mapping."
            )

        names = [name for name in value if name]
        if any(not isinstance(name, str) for name in names):
            raise serializers.ValidationError("Configuration names must be strings.")

        catalog = set(self.context.get('catalog', []))
        unknown = [name for name in names if name not in catalog]
        if unknown:
            raise serializers.ValidationError(
                f"Unknown configuration names: {', '.join(unknown)}"
            )
        return names


class AllowListSettingsSerializer(serializers.Serializer):
    """Admin view of the allow-list alongside the full catalog."""

    catalog = serializers.ListField(child=serializers.CharField(), read_only=True)
    selected_configs = serializers.ListField(child=serializers.CharField(), read_only=True)
