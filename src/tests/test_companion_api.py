"""Companion read-only API: /api/health, /api/posts and /api/posts/<slug>."""

from __future__ import annotations

from django.test import TestCase
from rest_framework.test import APIClient

from posts.services import NOT_AVAILABLE, PostService
from tests.utils import FakeRedisMixin, auth_client, create_user

VALID = {"title": "Companion", "excerpt": "Short", "content": "c" * 300}


class HealthTests(TestCase):
    def test_health_with_and_without_trailing_slash(self):
        client = APIClient()
        for url in ("/api/health", "/api/health/"):
            response = client.get(url)
            self.assertEqual(response.status_code, 200)
            self.assertEqual(response.json(), {"status": "ok", "message": "Server is running"})


class CompanionPostTests(FakeRedisMixin, TestCase):
    @classmethod
    def setUpTestData(cls):
        cls.author = create_user("a@example.com", username="author_a")
        cls.other = create_user("b@example.com", username="author_b")
        cls.author.profile.full_name = "Ada Author"
        cls.author.profile.save(update_fields=["full_name"])
        cls.published = PostService.create_post(cls.author, {**VALID, "published": True}).post
        cls.draft = PostService.create_post(cls.author, {**VALID, "title": "Draft"}).post

    def setUp(self):
        self.anon = APIClient()

    def test_list_returns_bare_array_of_published_posts(self):
        response = self.anon.get("/api/posts")
        body = response.json()

        self.assertEqual(response.status_code, 200)
        self.assertIsInstance(body, list)
        self.assertEqual([p["slug"] for p in body], [self.published.slug])
        self.assertEqual(body[0]["author"]["display_name"], "Ada Author")

    def test_detail_of_published_post(self):
        response = self.anon.get(f"/api/posts/{self.published.slug}")
        body = response.json()

        self.assertEqual(response.status_code, 200)
        self.assertEqual(body["slug"], self.published.slug)
        self.assertEqual(body["description"], VALID["content"][:160])
        self.assertEqual(body["author_id"], str(self.author.id))

    def test_draft_detail_is_404_for_anonymous(self):
        response = self.anon.get(f"/api/posts/{self.draft.slug}")

        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json()["errors"], [NOT_AVAILABLE])

    def test_author_id_query_parameter_grants_nothing(self):
        response = self.anon.get(f"/api/posts/{self.draft.slug}?author_id={self.author.id}")
        self.assertEqual(response.status_code, 404)

        other = auth_client(self.other)
        response = other.get(f"/api/posts/{self.draft.slug}/?author_id={self.author.id}")
        self.assertEqual(response.status_code, 404)

    def test_author_sees_own_draft_with_bearer_token(self):
        response = auth_client(self.author).get(f"/api/posts/{self.draft.slug}")

        self.assertEqual(response.status_code, 200)
        self.assertFalse(response.json()["published"])

    def test_hidden_draft_and_missing_slug_are_indistinguishable(self):
        hidden = self.anon.get(f"/api/posts/{self.draft.slug}")
        missing = self.anon.get("/api/posts/nothing-here-000000")

        self.assertEqual(hidden.status_code, missing.status_code)
        self.assertEqual(hidden.json(), missing.json())
