"""
URL configuration for core project.

The `urlpatterns` list routes URLs to views. For more information please see:
    https://docs.djangoproject.com/en/5.2/topics/http/urls/
"""
from django.contrib import admin
from django.urls import path, include
from django.views.generic import RedirectView
from rest_framework_simplejwt.views import TokenObtainPairView, TokenRefreshView

# Import configuration export URL patterns
from config_export.urls import urlpatterns as config_export_urls
from config_export.admin_urls import urlpatterns as config_export_admin_urls
from config_export.admin_urls import form_urlpatterns as config_export_form_urls

# Import contact URL patterns
from contact.urls import urlpatterns as contact_urls

urlpatterns = [
    path('', RedirectView.as_view(url='/admin/', permanent=False)),
    # Custom admin pages must be matched before the admin site's catch-all.
    path('admin/config-export/', include((config_export_form_urls, 'config_export_form'))),
    path('admin/', admin.site.urls),
    path('api/auth/token/', TokenObtainPairView.as_view(), name='token_obtain_pair'),
    path('api/auth/token/refresh/', TokenRefreshView.as_view(), name='token_refresh'),
    path('api/', include((config_export_urls, 'config_export'))),  # Allowed configs + export
    path('api/', include((contact_urls, 'contact'))),  # Personal contact relay
    path('api/admin/', include('contact.admin_urls')),  # Stored contact messages (staff)
    path('api/admin/config-export/', include((config_export_admin_urls, 'config_export_admin'))),  # Allow-list management (staff)
]
