from django.apps import AppConfig


class ConfigExportConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'config_export'
    verbose_name = 'Configuration Export'

    def ready(self):
        """Import signals when app is ready."""
        import config_export.signals  # noqa
