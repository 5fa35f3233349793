"""
Configuration Export Models

Key-value store of named configuration objects. The export allow-list is
itself kept in this store as the record named ``config_export.settings``.
"""
from django.core.exceptions import ValidationError
from django.core.validators import RegexValidator
from django.db import models


SETTINGS_CONFIG_NAME = 'config_export.settings'
SELECTED_CONFIGS_KEY = 'selected_configs'


class ConfigObject(models.Model):
    """
    A named blob of structured configuration data.

    Names are dotted identifiers such as ``system.site``. The data is an
    arbitrarily nested mapping returned verbatim by the export endpoint.
    """

    name = models.CharField(
        max_length=250,
        unique=True,
        validators=[
            RegexValidator(
                regex=r'^[A-Za-z0-9_]+(\.[A-Za-z0-9_\-]+)+$',
                message='Configuration names are dotted identifiers, e.g. "system.site".'
            )
        ],
        help_text="Unique configuration name (e.g. system.site)"
    )

    data = models.JSONField(
        default=dict,
        blank=True,
        help_text="Raw configuration content"
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'config_objects'
        ordering = ['name']
        verbose_name = 'Configuration Object'
        verbose_name_plural = 'Configuration Objects'

    def __str__(self):
        return self.name

    def clean(self):
        """The export settings record must hold a list of configuration names."""
        super().clean()
        if self.name != SETTINGS_CONFIG_NAME:
            return
        if not isinstance(self.data, dict):
            raise ValidationError({'data': 'The export settings must be a JSON object.'})
        selected = self.data.get(SELECTED_CONFIGS_KEY) or []
        if not isinstance(selected, list) or not all(isinstance(name, str) for name in selected):
            raise ValidationError({
                'data': f'"{SELECTED_CONFIGS_KEY}" must be a list of configuration names.'
            })

    @property
    def cache_tag(self):
        """Cache tag invalidated whenever this object is saved or deleted."""
        return config_cache_tag(self.name)


def config_cache_tag(name):
    return f'config:{name}'
