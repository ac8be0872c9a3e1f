"""App configuration for the auth facility."""

from django.apps import AppConfig


class AuthenticationConfig(AppConfig):
    """Holds the account model, token service, and auth endpoints."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "authentication"
