"""App configuration for the core project utilities."""

from django.apps import AppConfig


class CoreConfig(AppConfig):
    """Core app holds shared settings, URLs, middleware, and logging setup."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "core"

    def ready(self) -> None:
        """Install the structlog pipeline once Django's LOGGING is applied."""
        from .logging import configure_structlog

        configure_structlog()
