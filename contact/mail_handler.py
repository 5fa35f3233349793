"""
Contact Mail Handler

Sends the emails for a stored contact message: the message itself to the
recipient and, when requested, a copy to the sender. Delivery is synchronous
so transport errors reach the caller.
"""
import logging

from django.conf import settings
from django.core.mail import EmailMessage

logger = logging.getLogger(__name__)


class ContactMailHandler:
    """Deliver personal contact messages by email."""

    def __init__(self):
        self.from_email = getattr(settings, 'CONTACT_EMAIL_FROM', settings.DEFAULT_FROM_EMAIL)
        self.site_name = getattr(settings, 'SITE_NAME', 'Site')

    def send_mail_messages(self, message, sender):
        """
        Send the emails for a contact message.

        Args:
            message: The saved ContactMessage
            sender: The user who submitted the message

        Raises:
            Any exception raised by the email backend.
        """
        recipient = message.recipient
        subject = f"[{self.site_name}] {message.subject}"

        self._send(
            subject=subject,
            body=self._recipient_body(message, recipient),
            to=recipient.email,
            reply_to=message.mail,
        )

        if message.copy and message.mail:
            self._send(
                subject=subject,
                body=self._copy_body(message, recipient),
                to=message.mail,
            )

        logger.info(
            f"{message.name} ({message.mail or 'no email'}) sent "
            f"{recipient.get_username()} an email."
        )

    def _send(self, subject, body, to, reply_to=None):
        email = EmailMessage(
            subject=subject,
            body=body,
            from_email=self.from_email,
            to=[to],
            reply_to=[reply_to] if reply_to else None,
        )
        email.send(fail_silently=False)

    def _recipient_body(self, message, recipient):
        return f"""Hello {recipient.get_username()},

{message.name} has sent you a message via your contact form at {self.site_name}.

If you don't want to receive such emails, you can turn off your contact form in your account settings.

Message:

{message.message}
"""

    def _copy_body(self, message, recipient):
        return f"""This is a copy of the message you sent to {recipient.get_username()} via {self.site_name}.

Subject: {message.subject}

Message:

{message.message}
"""
