"""
Contact Management Views

API endpoints for the personal contact relay and staff message listing.
"""
from rest_framework import generics, filters
from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated, IsAdminUser
from django_filters.rest_framework import DjangoFilterBackend
from django.core.exceptions import ValidationError
from django.core.validators import validate_ipv46_address

from .models import ContactMessage
from .serializers import ContactMessageSerializer
from .services import ContactRelayService, SUCCESS_MESSAGE


def get_client_ip(request):
    """
    Get client IP address from request.

    Falls back to REMOTE_ADDR when the forwarded address is not a valid
    IPv4/IPv6 address, and to None when neither is.
    """
    x_forwarded_for = request.META.get('HTTP_X_FORWARDED_FOR', '')
    candidates = [x_forwarded_for.split(',')[0].strip(), request.META.get('REMOTE_ADDR')]
    for ip in candidates:
        if not ip:
            continue
        try:
            validate_ipv46_address(ip)
        except ValidationError:
            continue
        return ip
    return None


class ContactUserView(APIView):
    """
    Send a message to a user through their personal contact form.

    POST /api/contact-user

    Body: {"recipient": "<user id>", "subject": "...", "message": "...", "copy": true}
    """

    permission_classes = [IsAuthenticated]
    service_class = ContactRelayService

    def post(self, request):
        self.service_class().submit(
            request.data,
            sender=request.user,
            ip_address=get_client_ip(request),
        )
        return Response({'message': SUCCESS_MESSAGE})


class ContactMessageListView(generics.ListAPIView):
    """
    List stored contact messages (staff only).

    GET /api/admin/contact-messages

    Query Parameters:
    - recipient: Filter by recipient user ID
    - contact_form: Filter by contact form
    - copy: Filter by whether a copy was requested
    - search: Search in subject, message, sender name or email
    - page: Page number (default: 1)
    """

    permission_classes = [IsAdminUser]
    serializer_class = ContactMessageSerializer
    filter_backends = [DjangoFilterBackend, filters.SearchFilter, filters.OrderingFilter]
    filterset_fields = ['recipient', 'contact_form', 'copy']
    search_fields = ['subject', 'message', 'name', 'mail']
    ordering_fields = ['created_at', 'subject']
    ordering = ['-created_at']

    def get_queryset(self):
        return ContactMessage.objects.select_related('recipient')
