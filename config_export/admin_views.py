"""
Configuration Export Admin Views

Allow-list management for site administrators:
- JSON API (GET / PUT) for front-end admin tools
- HTML checkbox form inside the Django admin
"""
from django.contrib import admin, messages
from django.contrib.admin.views.decorators import staff_member_required
from django.shortcuts import redirect, render
from rest_framework import status
from rest_framework.permissions import IsAdminUser
from rest_framework.response import Response
from rest_framework.views import APIView

from .forms import ConfigExportSettingsForm
from .serializers import AllowListSettingsSerializer, AllowListUpdateSerializer
from .services import AllowListManager


class ConfigExportSettingsView(APIView):
    """
    GET /api/admin/config-export/settings
    PUT /api/admin/config-export/settings

    Read or replace the export allow-list (staff only). PUT always replaces
    the whole list; there is no partial update.
    """
    permission_classes = [IsAdminUser]

    def get_manager(self):
        return AllowListManager()

    def _settings_response(self, manager):
        serializer = AllowListSettingsSerializer({
            'catalog': manager.list_catalog(),
            'selected_configs': manager.get_selection(),
        })
        return Response(serializer.data)

    def get(self, request):
        return self._settings_response(self.get_manager())

    def put(self, request):
        manager = self.get_manager()
        serializer = AllowListUpdateSerializer(
            data=request.data,
            context={'catalog': manager.list_catalog()}
        )

        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        manager.set_selection(serializer.validated_data['selected_configs'])
        return self._settings_response(manager)


@staff_member_required
def config_export_settings_form(request):
    """
    Settings form listing a checkbox for every configuration name.
    """
    manager = AllowListManager()
    catalog = manager.list_catalog()

    if request.method == 'POST':
        form = ConfigExportSettingsForm(request.POST, catalog=catalog)
        if form.is_valid():
            manager.set_selection(form.cleaned_data['configurations'])
            messages.success(request, 'The configuration options have been saved.')
            return redirect('config_export_form:settings-form')
    else:
        form = ConfigExportSettingsForm(catalog=catalog, selected=manager.get_selection())

    context = {
        **admin.site.each_context(request),
        'title': 'Configuration export settings',
        'form': form,
    }
    return render(request, 'config_export/settings_form.html', context)
