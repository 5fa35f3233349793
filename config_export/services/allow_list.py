"""
Export Allow-list Manager

Owns the administrator's selection of configuration names that may be read
through the export API. The selection is stored in the configuration store
itself, as the ``selected_configs`` key of ``config_export.settings``.
"""
import logging
from collections.abc import Mapping

from config_export.models import SETTINGS_CONFIG_NAME, SELECTED_CONFIGS_KEY, config_cache_tag
from .storage import ConfigStorage

logger = logging.getLogger(__name__)


class AllowListManager:
    """Read and replace the export allow-list."""

    settings_name = SETTINGS_CONFIG_NAME

    def __init__(self, storage=None):
        self.storage = storage or ConfigStorage()

    @property
    def cache_tag(self):
        """Tag invalidated on every save of the allow-list."""
        return config_cache_tag(self.settings_name)

    def list_catalog(self):
        """Every configuration name known to the site, for the admin form."""
        return self.storage.list_all()

    def _read_settings(self):
        settings_data = self.storage.read(self.settings_name)
        if settings_data is not None and not isinstance(settings_data, Mapping):
            logger.warning(f"Ignoring malformed {self.settings_name} record: expected an object")
            return {}
        return settings_data or {}

    def get_selection(self):
        """
        Get the persisted allow-list.

        Returns:
            list[str]: Selected names in their saved order, empty if the
            allow-list was never configured or the stored record is malformed
        """
        selected = self._read_settings().get(SELECTED_CONFIGS_KEY) or []
        if not isinstance(selected, list):
            logger.warning(f"Ignoring malformed {SELECTED_CONFIGS_KEY}: expected a list")
            return []
        return [name for name in selected if name and isinstance(name, str)]

    def is_selected(self, name):
        return name in self.get_selection()

    def set_selection(self, candidate_names):
        """
        Replace the allow-list with the checked names.

        Args:
            candidate_names: Sequence of names, or a checkbox-style mapping
                whose values are the name when checked and a falsy value
                (0, '', None, False) when unchecked

        Returns:
            list[str]: The persisted selection
        """
        if isinstance(candidate_names, Mapping):
            candidate_names = candidate_names.values()

        selected = []
        for name in candidate_names:
            if name and name not in selected:
                selected.append(name)

        settings_data = dict(self._read_settings())
        settings_data[SELECTED_CONFIGS_KEY] = selected
        self.storage.write(self.settings_name, settings_data)

        logger.info(f"Configuration export allow-list saved with {len(selected)} entries")
        return selected
