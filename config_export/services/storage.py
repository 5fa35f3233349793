"""
Configuration Storage Service

Thin access layer over the ConfigObject table. Every call is a single
database round trip; nothing is cached in-process.
"""
import logging

from config_export.models import ConfigObject

logger = logging.getLogger(__name__)


class ConfigStorage:
    """Read and write named configuration objects."""

    def list_all(self):
        """List every configuration name, sorted."""
        return list(ConfigObject.objects.order_by('name').values_list('name', flat=True))

    def exists(self, name):
        return ConfigObject.objects.filter(name=name).exists()

    def read(self, name):
        """Return the raw data stored under ``name``, or None if absent."""
        return (
            ConfigObject.objects
            .filter(name=name)
            .values_list('data', flat=True)
            .first()
        )

    def write(self, name, data):
        """
        Replace the data stored under ``name`` in one write.

        Goes through ``Model.save()`` so the object's cache tag is invalidated.
        """
        config, created = ConfigObject.objects.update_or_create(
            name=name,
            defaults={'data': data}
        )
        logger.debug(f"Configuration {'created' if created else 'updated'}: {name}")
        return config
