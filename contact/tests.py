"""
Tests for the personal contact relay
"""
from smtplib import SMTPException
from unittest.mock import patch

import pytest
from django.contrib.auth import get_user_model
from rest_framework import status

from contact.exceptions import ValidationFailed
from contact.models import ContactMessage
from contact.services import ContactRelayService
from contact.views import get_client_ip

User = get_user_model()

URL = '/api/contact-user'


@pytest.fixture
def sender(db):
    return User.objects.create_user(
        username='alice',
        email='alice@example.com',
        password='testpass123',
    )


@pytest.fixture
def recipient(db):
    return User.objects.create_user(
        id=42,
        username='bob',
        email='bob@example.com',
        password='testpass123',
        contact_enabled=True,
    )


@pytest.fixture
def opted_out_recipient(db):
    return User.objects.create_user(
        username='carol',
        email='carol@example.com',
        password='testpass123',
        contact_enabled=False,
    )


@pytest.fixture
def sender_client(api_client, sender):
    api_client.force_authenticate(user=sender)
    return api_client


class TestContactUserSubmission:
    """POST /api/contact-user"""

    def test_submit_valid_contact_message(self, sender_client, sender, recipient, mailoutbox):
        data = {'recipient': '42', 'subject': 'Hi', 'message': 'Hello'}

        response = sender_client.post(URL, data, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert response.data == {'message': 'Your contact form has been successfully submitted.'}

        message = ContactMessage.objects.get()
        assert message.contact_form == 'personal'
        assert message.recipient == recipient
        assert message.sender == sender
        assert message.subject == 'Hi'
        assert message.message == 'Hello'
        assert message.name == 'alice'
        assert message.mail == 'alice@example.com'
        assert message.copy is False

        assert len(mailoutbox) == 1
        assert mailoutbox[0].to == ['bob@example.com']
        assert mailoutbox[0].reply_to == ['alice@example.com']
        assert 'Hi' in mailoutbox[0].subject
        assert 'Hello' in mailoutbox[0].body

    def test_copy_sends_second_mail_to_sender(self, sender_client, recipient, mailoutbox):
        data = {'recipient': 42, 'subject': 'Hi', 'message': 'Hello', 'copy': True}

        response = sender_client.post(URL, data, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert ContactMessage.objects.get().copy is True
        assert [mail.to for mail in mailoutbox] == [['bob@example.com'], ['alice@example.com']]

    def test_copy_key_present_with_false_value_still_requests_copy(self, sender_client, recipient, mailoutbox):
        data = {'recipient': 42, 'subject': 'Hi', 'message': 'Hello', 'copy': False}

        sender_client.post(URL, data, format='json')

        assert ContactMessage.objects.get().copy is True

    def test_missing_subject(self, sender_client, recipient, mailoutbox):
        data = {'recipient': '42', 'message': 'Hello'}

        response = sender_client.post(URL, data, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['detail'] == 'Recipient, subject, or message details are missing.'
        assert ContactMessage.objects.count() == 0
        assert len(mailoutbox) == 0

    def test_empty_message(self, sender_client, recipient):
        data = {'recipient': '42', 'subject': 'Hi', 'message': ''}

        response = sender_client.post(URL, data, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert ContactMessage.objects.count() == 0

    def test_unknown_recipient(self, sender_client, db):
        data = {'recipient': '9999', 'subject': 'Hi', 'message': 'Hello'}

        response = sender_client.post(URL, data, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['detail'] == (
            'Recipient does not exist. Please provide a valid recipient(user) ID.'
        )
        assert ContactMessage.objects.count() == 0

    def test_non_numeric_recipient(self, sender_client, db):
        data = {'recipient': 'bob', 'subject': 'Hi', 'message': 'Hello'}

        response = sender_client.post(URL, data, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'does not exist' in response.data['detail']

    @pytest.mark.parametrize('recipient_id', [42.9, True, '42.9', ' 42', [42]])
    def test_recipient_id_must_be_whole_number(self, sender_client, recipient, mailoutbox, recipient_id):
        data = {'recipient': recipient_id, 'subject': 'Hi', 'message': 'Hello'}

        response = sender_client.post(URL, data, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'does not exist' in response.data['detail']
        assert ContactMessage.objects.count() == 0
        assert len(mailoutbox) == 0

    def test_forwarded_for_address_is_stored(self, sender_client, recipient):
        data = {'recipient': 42, 'subject': 'Hi', 'message': 'Hello'}

        sender_client.post(URL, data, format='json', HTTP_X_FORWARDED_FOR='203.0.113.5, 10.0.0.1')

        assert ContactMessage.objects.get().ip_address == '203.0.113.5'

    def test_invalid_forwarded_for_falls_back_to_remote_addr(self, sender_client, recipient):
        data = {'recipient': 42, 'subject': 'Hi', 'message': 'Hello'}

        response = sender_client.post(URL, data, format='json', HTTP_X_FORWARDED_FOR='not-an-ip')

        assert response.status_code == status.HTTP_200_OK
        assert ContactMessage.objects.get().ip_address == '127.0.0.1'

    def test_recipient_opted_out(self, sender_client, opted_out_recipient, mailoutbox):
        data = {'recipient': opted_out_recipient.pk, 'subject': 'Hi', 'message': 'Hello'}

        response = sender_client.post(URL, data, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'disabled the option to be contacted' in response.data['detail']
        assert ContactMessage.objects.count() == 0
        assert len(mailoutbox) == 0

    def test_subject_too_long(self, sender_client, recipient):
        data = {'recipient': 42, 'subject': 'x' * 101, 'message': 'Hello'}

        response = sender_client.post(URL, data, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert ContactMessage.objects.count() == 0

    def test_mail_failure_keeps_message_and_returns_server_error(self, sender_client, recipient):
        data = {'recipient': '42', 'subject': 'Hi', 'message': 'Hello'}

        with patch('contact.mail_handler.EmailMessage.send', side_effect=SMTPException('Connection refused')):
            response = sender_client.post(URL, data, format='json')

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert response.data['detail'] == 'Connection refused'
        assert ContactMessage.objects.count() == 1

    def test_mail_failure_is_logged(self, sender_client, recipient, caplog):
        data = {'recipient': '42', 'subject': 'Hi', 'message': 'Hello'}

        with patch('contact.mail_handler.EmailMessage.send', side_effect=SMTPException('boom')):
            sender_client.post(URL, data, format='json')

        assert 'Failed to send email to "42".' in caplog.text

    def test_requires_authentication(self, api_client, recipient):
        data = {'recipient': '42', 'subject': 'Hi', 'message': 'Hello'}

        response = api_client.post(URL, data, format='json')

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert ContactMessage.objects.count() == 0


class TestContactRelayService:
    """Service-level behaviour with an injected mail handler."""

    def test_uses_injected_mail_handler(self, sender, recipient):
        class RecordingMailHandler:
            def __init__(self):
                self.sent = []

            def send_mail_messages(self, message, sender):
                self.sent.append((message, sender))

        handler = RecordingMailHandler()
        message = ContactRelayService(mail_handler=handler).submit(
            {'recipient': 42, 'subject': 'Hi', 'message': 'Hello'},
            sender=sender,
            ip_address='10.0.0.1',
        )

        assert handler.sent == [(message, sender)]
        assert message.ip_address == '10.0.0.1'

    def test_non_mapping_payload_is_rejected(self, sender):
        with pytest.raises(ValidationFailed):
            ContactRelayService().submit(['42', 'Hi', 'Hello'], sender=sender)


class TestGetClientIp:
    """Client address recorded with each message."""

    def test_no_valid_address_returns_none(self, rf):
        request = rf.post(URL, HTTP_X_FORWARDED_FOR='garbage', REMOTE_ADDR='also-garbage')
        assert get_client_ip(request) is None

    def test_ipv6_forwarded_address(self, rf):
        request = rf.post(URL, HTTP_X_FORWARDED_FOR='2001:db8::1')
        assert get_client_ip(request) == '2001:db8::1'


class TestContactMessageList:
    """GET /api/admin/contact-messages"""

    url = '/api/admin/contact-messages'

    @pytest.fixture
    def stored_message(self, sender, recipient):
        return ContactMessage.objects.create(
            subject='Hi',
            message='Hello',
            recipient=recipient,
            sender=sender,
            name=sender.username,
            mail=sender.email,
        )

    def test_staff_can_list_messages(self, staff_client, stored_message):
        response = staff_client.get(self.url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data['count'] == 1
        result = response.data['results'][0]
        assert result['subject'] == 'Hi'
        assert result['recipient_name'] == 'bob'

    def test_filter_by_recipient(self, staff_client, stored_message, opted_out_recipient):
        response = staff_client.get(self.url, {'recipient': opted_out_recipient.pk})

        assert response.status_code == status.HTTP_200_OK
        assert response.data['count'] == 0

    def test_non_staff_forbidden(self, user_client, stored_message):
        response = user_client.get(self.url)
        assert response.status_code == status.HTTP_403_FORBIDDEN
