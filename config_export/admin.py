"""
Configuration Export Django Admin Configuration
"""
import json

from django.contrib import admin
from django.db.models import BooleanField, Case, Value, When
from django.utils.html import format_html

from .models import ConfigObject, SETTINGS_CONFIG_NAME
from .services import AllowListManager


@admin.register(ConfigObject)
class ConfigObjectAdmin(admin.ModelAdmin):
    """Admin interface for configuration objects."""

    list_display = ['name', 'is_exposed', 'updated_at']
    search_fields = ['name']
    readonly_fields = ['created_at', 'updated_at', 'data_preview']

    fieldsets = (
        (None, {
            'fields': ('name', 'data')
        }),
        ('Metadata', {
            'fields': ('data_preview', 'created_at', 'updated_at'),
            'classes': ('collapse',)
        }),
    )

    def get_queryset(self, request):
        selection = AllowListManager().get_selection()
        return super().get_queryset(request).annotate(
            exposed=Case(
                When(name__in=selection, then=Value(True)),
                default=Value(False),
                output_field=BooleanField(),
            )
        )

    def is_exposed(self, obj):
        """Whether the object is on the export allow-list."""
        return obj.exposed
    is_exposed.boolean = True
    is_exposed.admin_order_field = 'exposed'
    is_exposed.short_description = 'Exposed'

    def data_preview(self, obj):
        return format_html('<pre>{}</pre>', json.dumps(obj.data, indent=2, sort_keys=True))
    data_preview.short_description = 'Formatted data'

    def has_delete_permission(self, request, obj=None):
        """The export settings record cannot be deleted."""
        if obj is not None and obj.name == SETTINGS_CONFIG_NAME:
            return False
        return super().has_delete_permission(request, obj)
