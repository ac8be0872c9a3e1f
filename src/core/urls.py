"""Root URL configuration for the BlogHub API."""
from django.conf import settings
from django.conf.urls.static import static
from django.urls import include, path, re_path
from drf_spectacular.views import SpectacularAPIView

from posts.urls import public_urlpatterns
from .views import HealthView

urlpatterns = [
    re_path(r"^api/health/?$", HealthView.as_view(), name="health"),
    path("api/schema/", SpectacularAPIView.as_view(), name="schema"),
    path("api/", include(public_urlpatterns)),
    path("auth/", include("authentication.urls")),
    path("profiles/", include("profiles.urls")),
    path("", include("posts.urls")),
] + static(settings.MEDIA_URL, document_root=settings.MEDIA_ROOT)
