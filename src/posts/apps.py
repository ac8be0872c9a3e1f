"""App configuration for posts."""

from django.apps import AppConfig


class PostsConfig(AppConfig):
    """Posts app: lifecycle service, authoring API, and change feed."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "posts"

    def ready(self) -> None:
        """Connect change-feed signals."""
        from . import signals  # noqa: F401
