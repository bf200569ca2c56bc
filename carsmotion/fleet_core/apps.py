from django.apps import AppConfig


class FleetCoreConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "fleet_core"
    verbose_name = "Fleet back office"

    # ensure receivers are registered
    def ready(self):
        import fleet_core.signals  # noqa: F401
