"""Post lifecycle service tests: create, update, delete, list and read."""

from __future__ import annotations

from datetime import timedelta
from unittest import mock

from django.contrib.auth.models import AnonymousUser
from django.core.files.storage import default_storage
from django.db import DatabaseError
from django.test import TestCase
from django.utils import timezone

from core.errors import (
    AccessDenied,
    ContentValidationError,
    EntityNotFound,
    StorageUnavailable,
    UploadFailed,
)
from core.uploads import ImageUploader
from posts.models import Post
from posts.services import NOT_AVAILABLE, PostService, validate_post_fields
from tests.utils import FakeRedisMixin, create_user, make_image

VALID = {"title": "Hello, World!", "excerpt": "Short summary", "content": "Body text"}


class PostLifecycleTests(FakeRedisMixin, TestCase):
    @classmethod
    def setUpTestData(cls):
        cls.author = create_user("a@example.com", username="author_a")
        cls.other = create_user("b@example.com", username="author_b")

    def test_create_defaults_to_draft_with_equal_timestamps(self):
        result = PostService.create_post(self.author, VALID)
        post = Post.objects.get(pk=result.post.pk)

        self.assertFalse(post.published)
        self.assertEqual(post.author_id, self.author.id)
        self.assertEqual(post.created_at, post.updated_at)
        self.assertIsNone(post.featured_image)
        self.assertRegex(post.slug, r"^hello-world-\d{6}$")
        self.assertEqual(result.warnings, [])

    def test_create_can_publish_immediately(self):
        result = PostService.create_post(self.author, {**VALID, "published": True})
        self.assertTrue(result.post.published)

    def test_create_rejects_long_excerpt_without_persisting(self):
        with self.assertRaises(ContentValidationError) as ctx:
            PostService.create_post(self.author, {**VALID, "excerpt": "x" * 201})

        self.assertIn("excerpt", ctx.exception.field_errors)
        self.assertFalse(Post.objects.exists())

    def test_create_accepts_excerpt_at_limit(self):
        result = PostService.create_post(self.author, {**VALID, "excerpt": "x" * 200})
        self.assertEqual(len(result.post.excerpt), 200)

    def test_create_requires_all_text_fields(self):
        with self.assertRaises(ContentValidationError) as ctx:
            PostService.create_post(self.author, {"title": "   ", "excerpt": ""})

        self.assertEqual(set(ctx.exception.field_errors), {"title", "excerpt", "content"})

    def test_create_requires_identity(self):
        with self.assertRaises(AccessDenied):
            PostService.create_post(AnonymousUser(), VALID)
        self.assertFalse(Post.objects.exists())

    def test_partial_validation_only_checks_present_fields(self):
        self.assertEqual(validate_post_fields({"published": 1}, partial=True), {"published": True})
        with self.assertRaises(ContentValidationError):
            validate_post_fields({"title": ""}, partial=True)

    def test_create_with_image_stores_url(self):
        result = PostService.create_post(self.author, {**VALID, "featured_image": make_image()})

        self.assertTrue(result.post.featured_image.startswith(f"/media/blog_images/{self.author.id}/"))
        self.assertTrue(result.post.featured_image.endswith(".png"))

    def test_create_with_failed_upload_saves_post_without_image(self):
        with mock.patch.object(ImageUploader, "store", side_effect=UploadFailed()):
            result = PostService.create_post(self.author, {**VALID, "featured_image": make_image()})

        self.assertIsNone(result.post.featured_image)
        self.assertEqual(result.warnings, [UploadFailed.default_message])
        self.assertTrue(Post.objects.filter(pk=result.post.pk).exists())

    def test_update_by_other_account_denied_and_unchanged(self):
        post = PostService.create_post(self.author, VALID).post

        with self.assertRaises(AccessDenied) as ctx:
            PostService.update_post(self.other, post.pk, {"title": "Hijacked"})

        self.assertFalse(ctx.exception.conceal)
        post.refresh_from_db()
        self.assertEqual(post.title, VALID["title"])

    def test_update_missing_post_not_found(self):
        with self.assertRaises(EntityNotFound):
            PostService.update_post(self.author, "00000000-0000-0000-0000-000000000000", {"title": "x"})

    def test_update_moves_updated_at_forward_and_keeps_created_at(self):
        post = PostService.create_post(self.author, VALID).post
        created_at = post.created_at

        later = created_at + timedelta(seconds=5)
        with mock.patch("posts.services.timezone.now", return_value=later):
            updated = PostService.update_post(self.author, post.pk, {"published": True}).post

        self.assertTrue(updated.published)
        self.assertEqual(updated.updated_at, later)
        self.assertEqual(updated.created_at, created_at)
        self.assertEqual(updated.author_id, self.author.id)
        self.assertEqual(updated.slug, post.slug)

    def test_update_never_moves_updated_at_backwards(self):
        post = PostService.create_post(self.author, VALID).post
        previous = post.updated_at

        with mock.patch("posts.services.timezone.now", return_value=previous - timedelta(minutes=1)):
            updated = PostService.update_post(self.author, post.pk, {"content": "New body"}).post

        self.assertGreaterEqual(updated.updated_at, previous)

    def test_update_with_failed_upload_keeps_previous_image(self):
        post = PostService.create_post(self.author, {**VALID, "featured_image": make_image()}).post
        previous_image = post.featured_image

        with mock.patch.object(ImageUploader, "store", side_effect=UploadFailed()):
            result = PostService.update_post(
                self.author, post.pk, {"title": "Renamed", "featured_image": make_image()}
            )

        post.refresh_from_db()
        self.assertEqual(post.featured_image, previous_image)
        self.assertEqual(post.title, "Renamed")
        self.assertEqual(result.warnings, [UploadFailed.default_message])

    def test_update_can_clear_image(self):
        post = PostService.create_post(self.author, {**VALID, "featured_image": make_image()}).post

        PostService.update_post(self.author, post.pk, {"clear_image": True})

        post.refresh_from_db()
        self.assertIsNone(post.featured_image)

    def test_delete_requires_confirmation(self):
        post = PostService.create_post(self.author, VALID).post

        with self.assertRaises(ContentValidationError):
            PostService.delete_post(self.author, post.pk)
        self.assertTrue(Post.objects.filter(pk=post.pk).exists())

        PostService.delete_post(self.author, post.pk, confirmed=True)
        self.assertFalse(Post.objects.filter(pk=post.pk).exists())

    def test_delete_by_other_account_denied(self):
        post = PostService.create_post(self.author, VALID).post

        with self.assertRaises(AccessDenied):
            PostService.delete_post(self.other, post.pk, confirmed=True)
        self.assertTrue(Post.objects.filter(pk=post.pk).exists())

    def test_deleted_post_is_gone_from_every_read(self):
        post = PostService.create_post(self.author, {**VALID, "published": True}).post
        PostService.delete_post(self.author, post.pk, confirmed=True)

        self.assertEqual(PostService.list_published(), [])
        self.assertEqual(PostService.list_by_author(self.author), [])
        with self.assertRaises(EntityNotFound):
            PostService.get_by_slug(self.author, post.slug)

    def test_list_published_newest_first_and_idempotent(self):
        base = timezone.now()
        for offset, published in ((0, True), (1, False), (2, True)):
            Post.objects.create(
                author=self.author,
                title=f"Post {offset}",
                excerpt="e",
                content="c",
                published=published,
                slug=f"post-{offset}",
                created_at=base + timedelta(minutes=offset),
                updated_at=base + timedelta(minutes=offset),
            )

        first = PostService.list_published()
        second = PostService.list_published()

        self.assertEqual([p.slug for p in first], ["post-2", "post-0"])
        self.assertEqual([p.pk for p in first], [p.pk for p in second])

    def test_list_by_author_includes_drafts_only_for_owner(self):
        draft = PostService.create_post(self.author, VALID).post
        PostService.create_post(self.other, VALID)

        self.assertEqual([p.pk for p in PostService.list_by_author(self.author)], [draft.pk])
        with self.assertRaises(AccessDenied):
            PostService.list_by_author(None)

    def test_draft_read_is_concealed_for_non_authors(self):
        draft = PostService.create_post(self.author, VALID).post

        for requester in (None, AnonymousUser(), self.other):
            with self.assertRaises(AccessDenied) as ctx:
                PostService.get_by_slug(requester, draft.slug)
            self.assertTrue(ctx.exception.conceal)
            self.assertEqual(ctx.exception.message, NOT_AVAILABLE)

        self.assertEqual(PostService.get_by_slug(self.author, draft.slug).pk, draft.pk)

    def test_missing_slug_has_same_message_as_hidden_draft(self):
        with self.assertRaises(EntityNotFound) as ctx:
            PostService.get_by_slug(None, "no-such-post-000000")
        self.assertEqual(ctx.exception.message, NOT_AVAILABLE)

    def test_get_post_by_invalid_id_not_found(self):
        with self.assertRaises(EntityNotFound):
            PostService.get_post(self.author, "not-a-uuid")

    def test_slug_conflict_retries_with_new_suffix(self):
        with mock.patch.object(PostService, "_clock_ms", return_value=1_000_000_123_456):
            first = PostService.create_post(self.author, VALID).post
            second = PostService.create_post(self.author, VALID).post

        self.assertEqual(first.slug, "hello-world-123456")
        self.assertEqual(second.slug, "hello-world-123457")
        self.assertEqual(Post.objects.count(), 2)

    def test_slug_conflict_gives_up_after_max_attempts(self):
        with self.settings(SLUG_MAX_ATTEMPTS=1):
            with mock.patch.object(PostService, "_clock_ms", return_value=1_000_000_123_456):
                PostService.create_post(self.author, VALID)
                with self.assertRaises(StorageUnavailable):
                    PostService.create_post(self.author, VALID)

        self.assertEqual(Post.objects.count(), 1)

    def test_database_failure_on_list_becomes_storage_error(self):
        queryset = mock.MagicMock()
        queryset.select_related.return_value.order_by.side_effect = DatabaseError("down")

        with self.assertRaises(StorageUnavailable):
            PostService._fetch(queryset)

    def test_database_failure_on_read_becomes_storage_error(self):
        queryset = mock.MagicMock()
        queryset.get.side_effect = DatabaseError("down")

        with mock.patch.object(PostService, "_base_queryset", return_value=queryset):
            with self.assertRaises(StorageUnavailable):
                PostService.get_by_slug(None, "anything")

    def test_published_strings_parse_like_form_booleans(self):
        for raw, expected in (("false", False), ("0", False), ("no", False), ("true", True), ("on", True)):
            post = PostService.create_post(self.author, {**VALID, "published": raw}).post
            self.assertIs(post.published, expected, raw)

    def test_unrecognised_published_value_rejected(self):
        for raw in ("maybe", "", None, ["true"]):
            with self.assertRaises(ContentValidationError) as ctx:
                PostService.create_post(self.author, {**VALID, "published": raw})
            self.assertIn("published", ctx.exception.field_errors)

        self.assertFalse(Post.objects.exists())

    def test_update_with_published_false_string_keeps_draft(self):
        post = PostService.create_post(self.author, VALID).post

        updated = PostService.update_post(self.author, post.pk, {"published": "false"}).post

        self.assertFalse(updated.published)
        with self.assertRaises(AccessDenied):
            PostService.get_by_slug(None, post.slug)

    def test_full_update_requires_every_text_field(self):
        post = PostService.create_post(self.author, VALID).post

        with self.assertRaises(ContentValidationError) as ctx:
            PostService.update_post(self.author, post.pk, {"published": True}, partial=False)

        self.assertEqual(set(ctx.exception.field_errors), {"title", "excerpt", "content"})
        post.refresh_from_db()
        self.assertFalse(post.published)

    def _store_recording(self, stored: list):
        real_store = ImageUploader.store

        def record(owner_id, image):
            result = real_store(owner_id, image)
            stored.append(result)
            return result

        return mock.patch.object(ImageUploader, "store", side_effect=record)

    def test_failed_insert_removes_uploaded_image(self):
        stored: list = []
        with self._store_recording(stored):
            with mock.patch.object(PostService, "_insert", side_effect=StorageUnavailable()):
                with self.assertRaises(StorageUnavailable):
                    PostService.create_post(self.author, {**VALID, "featured_image": make_image()})

        self.assertEqual(len(stored), 1)
        self.assertFalse(default_storage.exists(stored[0].path))

    def test_failed_update_removes_new_image_and_keeps_old(self):
        post = PostService.create_post(self.author, {**VALID, "featured_image": make_image()}).post
        previous_image = post.featured_image

        stored: list = []
        with self._store_recording(stored):
            with mock.patch.object(Post, "save", side_effect=DatabaseError("down")):
                with self.assertRaises(StorageUnavailable):
                    PostService.update_post(self.author, post.pk, {"featured_image": make_image()})

        self.assertFalse(default_storage.exists(stored[0].path))
        post.refresh_from_db()
        self.assertEqual(post.featured_image, previous_image)
