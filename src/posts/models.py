"""Post model: an authored article with draft/published state."""

import uuid

from django.conf import settings
from django.db import models
from django.utils import timezone

EXCERPT_MAX_LENGTH = 200


class Post(models.Model):
    """Article owned by exactly one author.

    ``author`` and ``created_at`` are fixed at creation; the lifecycle
    service is responsible for refreshing ``updated_at`` on every write.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    title = models.CharField(max_length=255)
    excerpt = models.CharField(max_length=EXCERPT_MAX_LENGTH)
    content = models.TextField()
    featured_image = models.CharField(max_length=500, blank=True, null=True)
    author = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="posts")
    created_at = models.DateTimeField(default=timezone.now, editable=False)
    updated_at = models.DateTimeField(default=timezone.now)
    published = models.BooleanField(default=False)
    slug = models.SlugField(max_length=280, unique=True)

    class Meta:
        ordering = ["-created_at", "-id"]
        indexes = [
            models.Index(fields=["published", "-created_at"], name="post_published_idx"),
            models.Index(fields=["author", "-created_at"], name="post_author_idx"),
        ]

    def __str__(self) -> str:  # pragma: no cover - trivial
        return self.title


__all__ = ["Post", "EXCERPT_MAX_LENGTH"]
