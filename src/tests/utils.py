"""Shared helpers for tests (user creation, token clients, fake Redis, images)."""

from __future__ import annotations

import io
from collections import deque
from typing import Dict, List
from unittest import mock

from django.contrib.auth import get_user_model
from django.core.files.uploadedfile import SimpleUploadedFile
from PIL import Image
from rest_framework.test import APIClient

from authentication.managers import UserManager
from authentication.services import TokenService

User = get_user_model()


class FakePubSub:
    """In-memory stand-in for ``redis.client.PubSub``."""

    def __init__(self, broker: "FakeRedis", ignore_subscribe_messages: bool = False):
        self._broker = broker
        self.channels: set[str] = set()
        self.messages: deque = deque()
        self.closed = False

    def subscribe(self, *channels: str) -> None:
        for channel in channels:
            self.channels.add(channel)
            self._broker.subscribers.setdefault(channel, []).append(self)

    def unsubscribe(self, *channels: str) -> None:
        for channel in channels or tuple(self.channels):
            self.channels.discard(channel)
            listeners = self._broker.subscribers.get(channel, [])
            if self in listeners:
                listeners.remove(self)

    def get_message(self, timeout: float = 0.0, **kwargs):
        if self.messages:
            return self.messages.popleft()
        return None

    def close(self) -> None:
        self.closed = True


class FakeRedis:
    """Minimal Redis stub for the blocklist and the post change channel."""

    def __init__(self):
        self._store: Dict[str, str] = {}
        self.subscribers: Dict[str, List[FakePubSub]] = {}
        self.published: List[tuple[str, str]] = []

    def setex(self, key: str, ttl_seconds: int, value: str) -> None:
        """Mimic Redis SETEX; TTL is ignored in tests, value stored in-memory."""
        self._store[key] = value

    def get(self, key: str):
        """Return stored value for key or None, matching Redis GET semantics."""
        return self._store.get(key)

    def publish(self, channel: str, message: str) -> int:
        self.published.append((channel, message))
        listeners = list(self.subscribers.get(channel, []))
        for listener in listeners:
            listener.messages.append({"type": "message", "channel": channel, "data": message})
        return len(listeners)

    def pubsub(self, ignore_subscribe_messages: bool = False) -> FakePubSub:
        return FakePubSub(self, ignore_subscribe_messages=ignore_subscribe_messages)


class FakeRedisMixin:
    """Patch every Redis client lookup with one shared in-memory fake."""

    fake_redis: FakeRedis

    @classmethod
    def setUpClass(cls):
        super().setUpClass()
        cls.fake_redis = FakeRedis()
        cls.patchers = [
            mock.patch("core.redis_client.get_redis_client", return_value=cls.fake_redis),
            mock.patch("authentication.services.get_redis_client", return_value=cls.fake_redis),
            mock.patch("posts.notifications.get_redis_client", return_value=cls.fake_redis),
        ]
        for patcher in cls.patchers:
            patcher.start()

    @classmethod
    def tearDownClass(cls):
        for patcher in cls.patchers:
            patcher.stop()
        super().tearDownClass()


def create_user(email: str, password: str = "Password123", username: str | None = None, **extra):
    """Create an account with a bcrypt-hashed password; optionally rename its profile."""

    user = User.objects.create(
        email=email,
        password_hash=UserManager.hash_password(password),
        **extra,
    )
    if username is not None:
        user.profile.username = username
        user.profile.save(update_fields=["username"])
    return user


def auth_client(user) -> APIClient:
    """Return an APIClient authenticated with a fresh access token."""
    token, _ = TokenService.generate_tokens(user)
    client = APIClient()
    client.credentials(HTTP_AUTHORIZATION=f"Bearer {token}")
    return client


def make_image(name: str = "cover.png", size=(4, 4), image_format: str = "PNG") -> SimpleUploadedFile:
    """Build a small real image upload that passes Pillow validation."""
    buffer = io.BytesIO()
    Image.new("RGB", size, color=(200, 40, 40)).save(buffer, format=image_format)
    content_type = f"image/{image_format.lower()}"
    return SimpleUploadedFile(name, buffer.getvalue(), content_type=content_type)
