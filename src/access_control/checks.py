"""System checks for the access-control configuration."""

from django.conf import settings
from django.core.checks import Error, register

REQUIRED_MIDDLEWARE = "core.middleware.JWTAuthMiddleware"


@register()
def verified_identity_middleware_installed(app_configs, **kwargs):
    """Ensure the JWT middleware is active.

    Every policy decision compares against ``request.user``; without the
    middleware that value is never a verified token identity.
    """
    errors: list[Error] = []

    if REQUIRED_MIDDLEWARE not in getattr(settings, "MIDDLEWARE", []):
        errors.append(
            Error(
                f"{REQUIRED_MIDDLEWARE} is not in MIDDLEWARE; post visibility "
                f"decisions would have no verified requester identity.",
                hint=f"Add '{REQUIRED_MIDDLEWARE}' to settings.MIDDLEWARE.",
                id="access_control.E001",
            )
        )

    return errors
