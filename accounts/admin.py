from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from django.contrib.auth import get_user_model
from django.contrib import admin

User = get_user_model()


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    """Admin interface for the custom User model."""

    list_display = (
        'username', 'email', 'first_name', 'last_name',
        'contact_enabled', 'is_active', 'is_staff', 'date_joined'
    )
    list_filter = ('contact_enabled', 'is_active', 'is_staff', 'date_joined')
    search_fields = ('username', 'email', 'first_name', 'last_name')
    ordering = ('-date_joined',)

    fieldsets = BaseUserAdmin.fieldsets + (
        ('Contact Settings', {
            'fields': ('contact_enabled',)
        }),
    )

    add_fieldsets = BaseUserAdmin.add_fieldsets + (
        ('Contact Settings', {
            'fields': ('email', 'contact_enabled')
        }),
    )
