"""
Contact Relay Service

Validates a personal contact submission, stores it and sends the emails.
"""
import logging
from collections.abc import Mapping

from django.contrib.auth import get_user_model

from .exceptions import ValidationFailed, DeliveryFailed
from .mail_handler import ContactMailHandler
from .models import ContactMessage

logger = logging.getLogger(__name__)

User = get_user_model()

REQUIRED_FIELDS = ('recipient', 'subject', 'message')

SUCCESS_MESSAGE = 'Your contact form has been successfully submitted.'

SUBJECT_MAX_LENGTH = ContactMessage._meta.get_field('subject').max_length


class ContactRelayService:
    """Relay a contact submission from the current user to another user."""

    def __init__(self, mail_handler=None):
        self.mail_handler = mail_handler or ContactMailHandler()

    def submit(self, contact_data, sender, ip_address=None):
        """
        Store and deliver a contact message.

        Args:
            contact_data: Decoded request body with recipient, subject,
                message and optionally copy
            sender: The authenticated user sending the message
            ip_address: Client IP address for the record

        Returns:
            ContactMessage: The stored message

        Raises:
            ValidationFailed: Missing fields, unknown recipient, or the
                recipient has disabled their contact form
            DeliveryFailed: The email could not be sent; the message
                record is kept
        """
        if not isinstance(contact_data, Mapping) or not all(
            contact_data.get(field) for field in REQUIRED_FIELDS
        ):
            raise ValidationFailed('Recipient, subject, or message details are missing.')

        if len(str(contact_data['subject'])) > SUBJECT_MAX_LENGTH:
            raise ValidationFailed(
                f'The subject cannot be longer than {SUBJECT_MAX_LENGTH} characters.'
            )

        recipient = self._load_recipient(contact_data['recipient'])
        if recipient is None:
            raise ValidationFailed(
                'Recipient does not exist. Please provide a valid recipient(user) ID.'
            )

        if not recipient.contact_enabled:
            raise ValidationFailed(
                'The provided recipient has disabled the option to be contacted. '
                'Please contact the administrator.'
            )

        message = ContactMessage.objects.create(
            contact_form='personal',
            subject=str(contact_data['subject']),
            message=str(contact_data['message']),
            copy=contact_data.get('copy') is not None,
            recipient=recipient,
            sender=sender,
            name=sender.get_username(),
            mail=sender.email or '',
            ip_address=ip_address,
        )

        try:
            self.mail_handler.send_mail_messages(message, sender)
        except Exception as e:
            logger.error(f'Failed to send email to "{contact_data["recipient"]}".')
            raise DeliveryFailed(str(e) or None) from e

        return message

    def _load_recipient(self, recipient_id):
        """Load the recipient by an integer or all-digit string ID."""
        if isinstance(recipient_id, str) and recipient_id.isascii() and recipient_id.isdigit():
            recipient_id = int(recipient_id)
        # bool is an int subclass; true must not load user 1
        if isinstance(recipient_id, bool) or not isinstance(recipient_id, int):
            return None
        return User.objects.filter(pk=recipient_id).first()
