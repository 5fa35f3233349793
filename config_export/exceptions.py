"""
Configuration Export Exceptions

Client errors raised by the export gate. DRF renders them as
``{"detail": "..."}`` with a 400 status.
"""
from rest_framework import exceptions, status


class NotExposed(exceptions.APIException):
    """The requested configuration is not on the export allow-list."""
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'The configuration is not exposed for viewing.'
    default_code = 'not_exposed'

    def __init__(self, config_name, detail=None, code=None):
        self.config_name = config_name
        if detail is None:
            detail = f'The configuration ({config_name}) is not exposed for viewing.'
        super().__init__(detail=detail, code=code)


class NothingExposed(exceptions.APIException):
    """The administrator has not allowed any configuration to be exported."""
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'No configurations have been allowed for viewing by the site administrator.'
    default_code = 'nothing_exposed'
