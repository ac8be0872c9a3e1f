"""Companion read-only API: ``/api/posts`` and ``/api/posts/<slug>``.

Success bodies are the bare payloads (no envelope) so existing consumers of
the read-only API keep working. Draft access uses the verified bearer
identity only; an ``author_id`` query parameter has no effect.
"""

from typing import Any

from rest_framework.response import Response
from rest_framework.views import APIView

from .serializers import PublicPostDetailSerializer, PublicPostSummarySerializer
from .services import PostService


class PublicPostListView(APIView):
    permission_classes: list[Any] = []

    # noinspection PyMethodMayBeStatic
    def get(self, request):
        posts = PostService.list_published()
        return Response(PublicPostSummarySerializer(posts, many=True).data)


class PublicPostDetailView(APIView):
    permission_classes: list[Any] = []

    # noinspection PyMethodMayBeStatic
    def get(self, request, slug: str):
        post = PostService.get_by_slug(request.user, slug)
        return Response(PublicPostDetailSerializer(post).data)


__all__ = ["PublicPostListView", "PublicPostDetailView"]
