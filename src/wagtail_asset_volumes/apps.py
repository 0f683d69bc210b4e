"""Django app configuration for wagtail-asset-volumes."""

from django.apps import AppConfig


class WagtailAssetVolumesConfig(AppConfig):
    name = "wagtail_asset_volumes"
    default_auto_field = "django.db.models.BigAutoField"
    verbose_name = "Wagtail Asset Volumes"

    def ready(self) -> None:
        from . import signals  # noqa: F401 — register signal handlers
