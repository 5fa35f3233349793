"""
Contact Relay Exceptions
"""
from rest_framework import exceptions, status


class ValidationFailed(exceptions.APIException):
    """Missing fields, unknown recipient, or recipient opted out."""
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'The contact message could not be validated.'
    default_code = 'validation_failed'


class DeliveryFailed(exceptions.APIException):
    """The mail transport failed after the message was stored."""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = 'The contact message could not be delivered.'
    default_code = 'delivery_failed'
