"""Authoring API for posts, backed by ``PostService``."""

from rest_framework import status
from rest_framework.decorators import action
from rest_framework.response import Response

from access_control.permissions import PostAccessPermission
from core.response import BaseViewSet, api_response
from .serializers import PostInputSerializer, PostSerializer, PostSummarySerializer
from .services import PostService

_TRUTHY = {"1", "true", "yes", "on"}


class PostViewSet(BaseViewSet):
    """CRUD over posts plus author and slug lookups.

    Identity is always ``request.user`` as verified by the JWT middleware;
    any ``author_id`` the client sends is ignored.
    """

    permission_classes = [PostAccessPermission]
    lookup_field = "pk"
    lookup_value_regex = "[0-9a-fA-F-]{32,36}"

    def list(self, request):
        """Published posts, newest first."""
        posts = PostService.list_published()
        return api_response(PostSummarySerializer(posts, many=True).data)

    def create(self, request):
        """Create a post; ``published`` defaults to draft."""
        fields = self._parse(request, partial=False)
        result = PostService.create_post(request.user, fields)
        return api_response(
            PostSerializer(result.post).data,
            status=status.HTTP_201_CREATED,
            errors=result.warnings,
        )

    def retrieve(self, request, pk=None):
        post = PostService.get_post(request.user, pk)
        return api_response(PostSerializer(post).data)

    def update(self, request, pk=None):
        return self._update(request, pk, partial=False)

    def partial_update(self, request, pk=None):
        return self._update(request, pk, partial=True)

    def destroy(self, request, pk=None):
        """Permanent delete; requires ``?confirm=true``."""
        confirmed = request.query_params.get("confirm", "").lower() in _TRUTHY
        PostService.delete_post(request.user, pk, confirmed=confirmed)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=False, methods=["get"], url_path="mine")
    def mine(self, request):
        """The caller's posts, drafts included (the dashboard listing)."""
        if not request.user.is_authenticated:
            self.permission_denied(request)
        posts = PostService.list_by_author(request.user)
        return api_response(PostSummarySerializer(posts, many=True).data)

    @action(detail=False, methods=["get"], url_path=r"by-slug/(?P<slug>[-\w]+)")
    def by_slug(self, request, slug=None):
        post = PostService.get_by_slug(request.user, slug)
        return api_response(PostSerializer(post).data)

    def _update(self, request, pk, partial: bool):
        fields = self._parse(request, partial=partial)
        result = PostService.update_post(request.user, pk, fields, partial=partial)
        return api_response(PostSerializer(result.post).data, errors=result.warnings)

    @staticmethod
    def _parse(request, partial: bool) -> dict:
        serializer = PostInputSerializer(data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)
        return dict(serializer.validated_data)


__all__ = ["PostViewSet"]
