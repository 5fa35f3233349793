"""
Configuration Export Admin URL Configuration

API endpoint and HTML settings form for managing the export allow-list.
"""
from django.urls import path
from .admin_views import ConfigExportSettingsView, config_export_settings_form

app_name = 'config_export_admin'

# Mounted under /api/admin/config-export/
urlpatterns = [
    path('settings', ConfigExportSettingsView.as_view(), name='settings'),
]

# Mounted under /admin/config-export/
form_urlpatterns = [
    path('settings/', config_export_settings_form, name='settings-form'),
]
