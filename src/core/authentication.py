"""Bridge the JWT middleware's verified user into DRF.

Token verification happens once, in ``JWTAuthMiddleware``. DRF only needs to
see the result, so this authenticator reads the user the middleware attached
and never parses credentials itself. Views and services therefore get a
single source of identity: the verified bearer token.
"""

from typing import Any, Optional, Tuple

from django.contrib.auth.models import AnonymousUser
from rest_framework.authentication import BaseAuthentication


class MiddlewareUserAuthentication(BaseAuthentication):
    """Expose ``request._request.user`` (set by middleware) to DRF."""

    def authenticate(self, request) -> Optional[Tuple[Any, None]]:
        django_request = getattr(request, "_request", None)
        if django_request is None:
            return None

        user = getattr(django_request, "user", None)
        if user is None or isinstance(user, AnonymousUser):
            return None

        if not getattr(user, "is_authenticated", False):
            return None

        return user, None

    def authenticate_header(self, request) -> str:
        """Advertise bearer auth so DRF answers 401 rather than 403."""
        return 'Bearer realm="api"'


__all__ = ["MiddlewareUserAuthentication"]
