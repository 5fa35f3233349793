"""
Contact Management Admin URL Configuration

Separate admin URLs for contact message review.
"""
from django.urls import path
from .views import ContactMessageListView

app_name = 'contact_admin'

urlpatterns = [
    path('contact-messages', ContactMessageListView.as_view(), name='message-list'),
]
