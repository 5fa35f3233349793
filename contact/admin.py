"""
Contact Management Django Admin Configuration
"""
from django.contrib import admin
from .models import ContactMessage


@admin.register(ContactMessage)
class ContactMessageAdmin(admin.ModelAdmin):
    """Admin interface for contact messages."""

    list_display = [
        'id', 'name', 'mail', 'recipient', 'subject', 'copy', 'created_at'
    ]

    list_filter = [
        'contact_form', 'copy', 'created_at'
    ]

    search_fields = [
        'name', 'mail', 'subject', 'message', 'recipient__username'
    ]

    readonly_fields = [
        'contact_form', 'subject', 'message', 'copy', 'recipient', 'sender',
        'name', 'mail', 'ip_address', 'created_at'
    ]

    fieldsets = (
        ('Message', {
            'fields': ('contact_form', 'subject', 'message', 'copy')
        }),
        ('Parties', {
            'fields': ('recipient', 'sender', 'name', 'mail')
        }),
        ('Tracking', {
            'fields': ('ip_address', 'created_at'),
            'classes': ('collapse',)
        }),
    )

    def has_add_permission(self, request):
        """Messages are only created through the contact API."""
        return False
