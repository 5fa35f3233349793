"""
Contact Management Serializers
"""
from rest_framework import serializers
from .models import ContactMessage


class ContactMessageSerializer(serializers.ModelSerializer):
    """
    Stored contact message as seen by staff.
    """

    recipient_name = serializers.SerializerMethodField()

    class Meta:
        model = ContactMessage
        fields = [
            'id', 'contact_form', 'subject', 'message', 'copy',
            'recipient', 'recipient_name', 'sender', 'name', 'mail',
            'ip_address', 'created_at'
        ]
        read_only_fields = fields

    def get_recipient_name(self, obj):
        return obj.recipient.get_username()
