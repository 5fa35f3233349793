"""
Contact Management URL Configuration
"""
from django.urls import path
from .views import ContactUserView

app_name = 'contact'

urlpatterns = [
    path('contact-user', ContactUserView.as_view(), name='contact-user'),
]
