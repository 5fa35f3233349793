"""
Contact Management Models

Database schema for personal contact form messages.
"""
from django.conf import settings
from django.db import models


class ContactMessage(models.Model):
    """
    A message sent to a user through a contact form.

    The record is kept even when email delivery fails.
    """

    CONTACT_FORM_CHOICES = [
        ('personal', 'Personal contact form'),
    ]

    contact_form = models.CharField(
        max_length=32,
        choices=CONTACT_FORM_CHOICES,
        default='personal',
        help_text="Contact form the message was submitted through"
    )

    # Message Details
    subject = models.CharField(
        max_length=100,
        help_text="Subject line of the message"
    )

    message = models.TextField(
        help_text="The message body"
    )

    copy = models.BooleanField(
        default=False,
        help_text="Whether the sender asked for a copy of the message"
    )

    # Parties
    recipient = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='received_contact_messages',
        help_text="User the message is addressed to"
    )

    sender = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='sent_contact_messages',
        help_text="Authenticated user who sent the message"
    )

    name = models.CharField(
        max_length=150,
        help_text="Sender's account name at the time of sending"
    )

    mail = models.EmailField(
        max_length=254,
        blank=True,
        default='',
        help_text="Sender's email address at the time of sending"
    )

    # Tracking
    ip_address = models.GenericIPAddressField(
        null=True,
        blank=True,
        help_text="IP address of the submitter"
    )

    created_at = models.DateTimeField(
        auto_now_add=True,
        db_index=True,
        help_text="When the message was submitted"
    )

    class Meta:
        db_table = 'contact_messages'
        ordering = ['-created_at']
        verbose_name = 'Contact Message'
        verbose_name_plural = 'Contact Messages'
        indexes = [
            models.Index(fields=['recipient', 'created_at'], name='contact_msg_recipient_idx'),
        ]

    def __str__(self):
        return f"{self.name} -> {self.recipient_id}: {self.subject}"
