"""
Configuration Export Gate

Decides per request whether a configuration may be read and returns its raw
content. Membership in the allow-list is the only check; authentication is
left to the API layer.
"""
import logging

from config_export.exceptions import NotExposed, NothingExposed
from config_export.models import config_cache_tag
from .allow_list import AllowListManager
from .storage import ConfigStorage

logger = logging.getLogger(__name__)


class ConfigurationExportGate:
    """Serve allowed configuration objects."""

    def __init__(self, allow_list=None, storage=None):
        self.storage = storage or ConfigStorage()
        self.allow_list = allow_list or AllowListManager(storage=self.storage)

    def get_one(self, name):
        """
        Export a single configuration object.

        A listed name is assumed to exist; a missing object exports as an
        empty mapping.

        Returns:
            dict: ``{name: raw_content}``

        Raises:
            NotExposed: ``name`` is not on the allow-list
        """
        if not self.allow_list.is_selected(name):
            logger.warning(f"Rejected export of configuration not on the allow-list: {name}")
            raise NotExposed(name)

        content = self.storage.read(name)
        return {name: content if content is not None else {}}

    def get_all(self):
        """
        List the exportable configuration names.

        Raises:
            NothingExposed: The allow-list is empty
        """
        selection = self.allow_list.get_selection()
        if not selection:
            raise NothingExposed()
        return selection

    def cache_tags(self, name=None):
        """
        Tags for an export response.

        Every response carries the allow-list's tag; single exports also
        carry the tag of the exported object.
        """
        tags = [self.allow_list.cache_tag]
        if name is not None and config_cache_tag(name) not in tags:
            tags.append(config_cache_tag(name))
        return tags
