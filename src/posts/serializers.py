"""Serializers for post input and the authoring/companion payloads."""

from rest_framework import serializers

from profiles.models import display_name_for
from .models import Post


class PostInputSerializer(serializers.Serializer):
    """Parse create/update input from JSON or multipart forms.

    Only types are checked here; required/length rules live in
    ``posts.services.validate_post_fields`` so direct service callers get
    the same validation.
    """

    title = serializers.CharField(required=False, allow_blank=True, trim_whitespace=False)
    excerpt = serializers.CharField(required=False, allow_blank=True, trim_whitespace=False)
    content = serializers.CharField(required=False, allow_blank=True, trim_whitespace=False)
    published = serializers.BooleanField(required=False)
    featured_image = serializers.ImageField(required=False, allow_null=True)
    clear_image = serializers.BooleanField(required=False, default=False)

    def validate(self, attrs):
        """Refuse fields that are fixed after creation."""
        fixed = {"id", "author", "author_id", "slug", "created_at", "updated_at"}
        attempted = fixed & set(getattr(self, "initial_data", {}))
        if attempted:
            raise serializers.ValidationError(
                f"Field(s) {', '.join(sorted(attempted))} are read-only"
            )
        return attrs


class AuthorSummarySerializer(serializers.Serializer):
    """Author display fields taken from the post's profile."""

    id = serializers.UUIDField(source="pk")
    username = serializers.SerializerMethodField()
    full_name = serializers.SerializerMethodField()
    avatar_url = serializers.SerializerMethodField()
    display_name = serializers.SerializerMethodField()

    @staticmethod
    def _profile(user):
        return getattr(user, "profile", None)

    def get_username(self, user):
        profile = self._profile(user)
        return profile.username if profile else None

    def get_full_name(self, user):
        profile = self._profile(user)
        return profile.full_name if profile else None

    def get_avatar_url(self, user):
        profile = self._profile(user)
        return profile.avatar_url if profile else None

    def get_display_name(self, user):
        return display_name_for(self._profile(user))


class PostSerializer(serializers.ModelSerializer):
    """Full post as returned by the authoring API."""

    author_id = serializers.UUIDField(read_only=True)
    author = AuthorSummarySerializer(read_only=True)

    class Meta:
        model = Post
        fields = [
            "id",
            "title",
            "slug",
            "excerpt",
            "content",
            "featured_image",
            "published",
            "author_id",
            "author",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class PostSummarySerializer(serializers.ModelSerializer):
    """Listing entry: everything but the body."""

    author = AuthorSummarySerializer(read_only=True)

    class Meta:
        model = Post
        fields = [
            "id",
            "title",
            "excerpt",
            "featured_image",
            "created_at",
            "updated_at",
            "slug",
            "published",
            "author",
        ]
        read_only_fields = fields


class PublicPostSummarySerializer(serializers.ModelSerializer):
    """``GET /api/posts`` entry."""

    author = serializers.SerializerMethodField()

    class Meta:
        model = Post
        fields = ["id", "title", "excerpt", "featured_image", "created_at", "slug", "published", "author"]
        read_only_fields = fields

    def get_author(self, post):
        profile = getattr(post.author, "profile", None)
        return {
            "username": profile.username if profile else None,
            "full_name": profile.full_name if profile else None,
            "display_name": display_name_for(profile),
        }


class PublicPostDetailSerializer(serializers.ModelSerializer):
    """``GET /api/posts/<slug>`` body."""

    author_id = serializers.UUIDField(read_only=True)
    author = serializers.SerializerMethodField()
    description = serializers.SerializerMethodField()

    class Meta:
        model = Post
        fields = [
            "id",
            "title",
            "content",
            "excerpt",
            "description",
            "featured_image",
            "created_at",
            "updated_at",
            "author_id",
            "published",
            "slug",
            "author",
        ]
        read_only_fields = fields

    def get_author(self, post):
        profile = getattr(post.author, "profile", None)
        return {
            "username": profile.username if profile else None,
            "full_name": profile.full_name if profile else None,
            "avatar_url": profile.avatar_url if profile else None,
            "display_name": display_name_for(profile),
        }

    @staticmethod
    def get_description(post) -> str:
        # Page meta description: the first 160 characters of the body.
        return post.content[:160]


__all__ = [
    "PostInputSerializer",
    "PostSerializer",
    "PostSummarySerializer",
    "PublicPostSummarySerializer",
    "PublicPostDetailSerializer",
]
