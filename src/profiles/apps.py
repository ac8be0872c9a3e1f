"""App configuration for author profiles."""

from django.apps import AppConfig


class ProfilesConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "profiles"

    def ready(self) -> None:
        """Connect the profile-creation signal."""
        from . import signals  # noqa: F401
