"""
Configuration Export Signals

Invalidate cached exports whenever a configuration object changes.
"""
import logging

from django.db.models.signals import post_save, post_delete
from django.dispatch import receiver

from .cache_tags import invalidate_tags
from .models import ConfigObject

logger = logging.getLogger(__name__)


@receiver(post_save, sender=ConfigObject)
def config_object_post_save(sender, instance, created, **kwargs):
    """Saving a configuration object makes responses tagged with it stale."""
    invalidate_tags([instance.cache_tag])
    if created:
        logger.info(f"Configuration object created: {instance.name}")


@receiver(post_delete, sender=ConfigObject)
def config_object_post_delete(sender, instance, **kwargs):
    invalidate_tags([instance.cache_tag])
    logger.info(f"Configuration object deleted: {instance.name}")
