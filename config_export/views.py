"""
Configuration Export Views

Read-only API endpoints backed by the export gate. Responses are cached
under cache tags and go stale as soon as the allow-list is saved.
"""
from rest_framework.views import APIView
from rest_framework.response import Response

from .cache_tags import cache_tagged_response
from .services import ConfigurationExportGate


class ConfigurationExportGateMixin:
    """Gives a view its export gate and the tags of its responses."""

    gate_class = ConfigurationExportGate

    def get_gate(self):
        return self.gate_class()

    def get_cache_tags(self, **kwargs):
        return self.get_gate().cache_tags(kwargs.get('config_name'))


class ConfigurationListView(ConfigurationExportGateMixin, APIView):
    """
    List configurations allowed for export.

    GET /api/allowed-configs

    Returns 400 when the administrator has not allowed any configuration.
    """

    @cache_tagged_response()
    def get(self, request):
        return Response(self.get_gate().get_all())


class ConfigurationExportView(ConfigurationExportGateMixin, APIView):
    """
    Export the raw content of one allowed configuration.

    GET /api/configuration-export/:config_name

    Response: {"<config_name>": {...raw content...}}
    """

    @cache_tagged_response()
    def get(self, request, config_name):
        return Response(self.get_gate().get_one(config_name))
