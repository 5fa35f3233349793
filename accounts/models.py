from django.contrib.auth.models import AbstractUser
from django.db import models


class User(AbstractUser):
    """
    Custom User model extending Django's AbstractUser.

    Users are addressed by their numeric ID when they receive personal
    contact messages.
    """

    contact_enabled = models.BooleanField(
        default=False,
        help_text="Whether other users may reach this user through the personal contact form"
    )

    class Meta:
        db_table = 'users'
        verbose_name = 'User'
        verbose_name_plural = 'Users'

    def __str__(self):
        return self.get_full_name() or self.username
