"""Routing for the post authoring API and the companion read-only API."""

from django.urls import include, path, re_path
from rest_framework.routers import DefaultRouter

from .public_views import PublicPostDetailView, PublicPostListView
from .views import PostViewSet

router = DefaultRouter()
router.register(r"posts", PostViewSet, basename="post")

public_urlpatterns = [
    re_path(r"^posts/?$", PublicPostListView.as_view(), name="public-post-list"),
    re_path(r"^posts/(?P<slug>[-\w]+)/?$", PublicPostDetailView.as_view(), name="public-post-detail"),
]

urlpatterns = [
    path("", include(router.urls)),
]
