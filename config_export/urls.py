"""
Configuration Export URL Configuration
"""
from django.urls import path
from .views import ConfigurationListView, ConfigurationExportView

app_name = 'config_export'

urlpatterns = [
    path('allowed-configs', ConfigurationListView.as_view(), name='allowed-configs'),
    path('configuration-export/<str:config_name>', ConfigurationExportView.as_view(), name='configuration-export'),
]
