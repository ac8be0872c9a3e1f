"""Post lifecycle: create, update, delete, list, and read with visibility checks.

Every operation receives the requester explicitly (the account attached by
``JWTAuthMiddleware``, or None/AnonymousUser) and applies the policy from
``access_control.policy``. Database failures are translated into
``StorageUnavailable`` here so no driver error leaks to the caller.
"""

import time
from dataclasses import dataclass, field
from typing import Any, Mapping

import structlog
from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import DatabaseError, IntegrityError, transaction
from django.utils import timezone
from rest_framework.fields import BooleanField

from access_control.policy import Decision, can_mutate, can_view, requester_id_for
from core.errors import (
    AccessDenied,
    ContentValidationError,
    EntityNotFound,
    StorageUnavailable,
    UploadFailed,
)
from core.uploads import ImageUploader, StoredImage
from .models import EXCERPT_MAX_LENGTH, Post
from .slugs import generate_slug

logger = structlog.get_logger(__name__)

NOT_AVAILABLE = "This post is not available."

_REQUIRED_TEXT = {
    "title": "Title",
    "excerpt": "Excerpt",
    "content": "Content",
}
_TITLE_MAX_LENGTH = Post._meta.get_field("title").max_length


@dataclass
class PostResult:
    """A stored post plus non-fatal problems to show the author."""

    post: Post
    warnings: list[str] = field(default_factory=list)


def _parse_published(value: Any) -> bool | None:
    """Read ``published`` the way DRF's ``BooleanField`` does; None if it is not a boolean."""
    try:
        if value in BooleanField.TRUE_VALUES:
            return True
        if value in BooleanField.FALSE_VALUES:
            return False
    except TypeError:
        # Unhashable input such as a list.
        return None
    return None


def validate_post_fields(fields: Mapping[str, Any], *, partial: bool) -> dict[str, Any]:
    """Check title/excerpt/content/published and return the cleaned subset.

    With ``partial`` only the keys present are checked, but a present key
    must still be non-empty.
    """
    errors: dict[str, list[str]] = {}
    cleaned: dict[str, Any] = {}

    for name, label in _REQUIRED_TEXT.items():
        if name not in fields:
            if not partial:
                errors[name] = [f"{label} is required"]
            continue
        value = fields[name]
        value = "" if value is None else str(value)
        if not value.strip():
            errors[name] = [f"{label} is required"]
            continue
        cleaned[name] = value

    if len(cleaned.get("excerpt", "")) > EXCERPT_MAX_LENGTH:
        errors["excerpt"] = [f"Excerpt must be at most {EXCERPT_MAX_LENGTH} characters"]
    if len(cleaned.get("title", "")) > _TITLE_MAX_LENGTH:
        errors["title"] = [f"Title must be at most {_TITLE_MAX_LENGTH} characters"]

    if "published" in fields:
        published = _parse_published(fields["published"])
        if published is None:
            errors["published"] = ["Must be a valid boolean"]
        else:
            cleaned["published"] = published

    if errors:
        raise ContentValidationError(errors)
    return cleaned


class PostService:
    """Orchestrates the post lifecycle against the ORM and image storage."""

    @classmethod
    def create_post(cls, author, fields: Mapping[str, Any]) -> PostResult:
        """Validate, attach the optional image, and insert a new post.

        ``published`` defaults to False (draft). A failed image upload leaves
        ``featured_image`` empty and is returned as a warning. If the insert
        fails the uploaded image is removed again.
        """
        author_id = requester_id_for(author)
        if author_id is None:
            raise AccessDenied("You must be logged in to create a post.")

        cleaned = validate_post_fields(fields, partial=False)
        warnings: list[str] = []
        stored = cls._store_image(author_id, fields.get("featured_image"), warnings)

        now = timezone.now()
        post = Post(
            author=author,
            title=cleaned["title"],
            excerpt=cleaned["excerpt"],
            content=cleaned["content"],
            featured_image=stored.url if stored else None,
            published=cleaned.get("published", False),
            created_at=now,
            updated_at=now,
        )
        try:
            cls._insert(post)
        except StorageUnavailable:
            if stored:
                ImageUploader.discard(stored)
            raise

        logger.info(
            "post_created",
            post_id=str(post.pk),
            author_id=str(author_id),
            slug=post.slug,
            published=post.published,
        )
        return PostResult(post=post, warnings=warnings)

    @classmethod
    def update_post(
        cls, requester, post_id: Any, fields: Mapping[str, Any], *, partial: bool = True
    ) -> PostResult:
        """Apply an update from the post's author.

        With ``partial=False`` (a full replacement) title, excerpt and content
        are all required. ``featured_image`` (a file) replaces the image;
        ``clear_image`` removes it. If the upload fails the previous image is
        kept and a warning is returned. ``updated_at`` always moves forward;
        ``author`` and ``created_at`` never change.
        """
        post = cls._get_by_id(post_id, not_found=EntityNotFound("Post not found."))
        requester_id = requester_id_for(requester)
        if can_mutate(requester_id, post) is Decision.DENY:
            logger.warning("post_update_denied", post_id=str(post.pk), requester_id=str(requester_id))
            raise AccessDenied()

        cleaned = validate_post_fields(fields, partial=partial)
        warnings: list[str] = []
        changed = set(cleaned)
        for name, value in cleaned.items():
            setattr(post, name, value)

        if fields.get("clear_image"):
            post.featured_image = None
            changed.add("featured_image")

        stored = cls._store_image(post.author_id, fields.get("featured_image"), warnings)
        if stored:
            post.featured_image = stored.url
            changed.add("featured_image")

        post.updated_at = max(timezone.now(), post.updated_at)
        changed.add("updated_at")

        try:
            post.save(update_fields=sorted(changed))
        except DatabaseError as exc:
            if stored:
                ImageUploader.discard(stored)
            raise StorageUnavailable() from exc

        logger.info("post_updated", post_id=str(post.pk), fields=sorted(changed))
        return PostResult(post=post, warnings=warnings)

    @staticmethod
    def _store_image(owner_id: Any, image, warnings: list[str]) -> StoredImage | None:
        """Upload ``image`` if given; a failure becomes a warning, not an error."""
        if not image:
            return None
        try:
            return ImageUploader.store(owner_id, image)
        except UploadFailed as exc:
            logger.warning("featured_image_skipped", owner_id=str(owner_id))
            warnings.append(exc.message)
            return None

    @classmethod
    def delete_post(cls, requester, post_id: Any, *, confirmed: bool = False) -> None:
        """Permanently delete a post after the author confirms."""
        post = cls._get_by_id(post_id, not_found=EntityNotFound("Post not found."))
        requester_id = requester_id_for(requester)
        if can_mutate(requester_id, post) is Decision.DENY:
            logger.warning("post_delete_denied", post_id=str(post.pk), requester_id=str(requester_id))
            raise AccessDenied()

        if not confirmed:
            raise ContentValidationError(
                {"confirm": ["Deleting a post cannot be undone; confirm to continue."]}
            )

        deleted_id = str(post.pk)
        try:
            post.delete()
        except DatabaseError as exc:
            raise StorageUnavailable() from exc
        logger.info("post_deleted", post_id=deleted_id, requester_id=str(requester_id))

    @classmethod
    def list_published(cls) -> list[Post]:
        """All published posts, newest first."""
        return cls._fetch(Post.objects.filter(published=True))

    @classmethod
    def list_by_author(cls, author) -> list[Post]:
        """Every post owned by ``author``, drafts included, newest first."""
        author_id = requester_id_for(author)
        if author_id is None:
            raise AccessDenied("You must be logged in to list your posts.")
        return cls._fetch(Post.objects.filter(author_id=author_id))

    @classmethod
    def get_by_slug(cls, requester, slug: str) -> Post:
        """Read a post by slug; hidden drafts look exactly like missing posts."""
        try:
            post = cls._base_queryset().get(slug=slug)
        except Post.DoesNotExist:
            raise EntityNotFound(NOT_AVAILABLE)
        except DatabaseError as exc:
            raise StorageUnavailable() from exc
        return cls._check_view(requester, post)

    @classmethod
    def get_post(cls, requester, post_id: Any) -> Post:
        """Read a post by id with the same visibility rule as ``get_by_slug``."""
        post = cls._get_by_id(post_id, not_found=EntityNotFound(NOT_AVAILABLE))
        return cls._check_view(requester, post)

    @staticmethod
    def _base_queryset():
        return Post.objects.select_related("author__profile").order_by("-created_at", "-id")

    @classmethod
    def _fetch(cls, queryset) -> list[Post]:
        try:
            return list(queryset.select_related("author__profile").order_by("-created_at", "-id"))
        except DatabaseError as exc:
            raise StorageUnavailable() from exc

    @classmethod
    def _get_by_id(cls, post_id: Any, not_found: EntityNotFound) -> Post:
        try:
            return cls._base_queryset().get(pk=post_id)
        except (Post.DoesNotExist, ValidationError, ValueError):
            raise not_found
        except DatabaseError as exc:
            raise StorageUnavailable() from exc

    @staticmethod
    def _check_view(requester, post: Post) -> Post:
        if can_view(requester_id_for(requester), post) is Decision.DENY:
            raise AccessDenied(NOT_AVAILABLE, conceal=True)
        return post

    @staticmethod
    def _clock_ms() -> int:
        return time.time_ns() // 1_000_000

    @classmethod
    def _insert(cls, post: Post) -> Post:
        """Insert ``post``, retrying with a fresh slug suffix on a slug conflict."""
        started_ms = cls._clock_ms()
        for attempt in range(settings.SLUG_MAX_ATTEMPTS):
            post.slug = generate_slug(post.title, started_ms + attempt)
            try:
                with transaction.atomic():
                    post.save(force_insert=True)
                return post
            except IntegrityError as exc:
                if not cls._slug_taken(post.slug):
                    raise StorageUnavailable() from exc
                logger.warning("slug_conflict", slug=post.slug, attempt=attempt + 1)
            except DatabaseError as exc:
                raise StorageUnavailable() from exc

        raise StorageUnavailable("Could not allocate a unique slug for this title. Please try again.")

    @staticmethod
    def _slug_taken(slug: str) -> bool:
        try:
            return Post.objects.filter(slug=slug).exists()
        except DatabaseError as exc:
            raise StorageUnavailable() from exc


__all__ = ["PostService", "PostResult", "validate_post_fields", "NOT_AVAILABLE"]
