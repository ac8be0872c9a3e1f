"""Post change feed over Redis pub/sub.

Writers publish a small ``PostChange`` message after each committed insert,
update, or delete. Readers hold a ``PostChangeSubscription`` for as long as
their view lives and re-fetch whatever they display when a message arrives.
Delivery is best effort: no ordering and no exactly-once guarantee.
"""

import json
from dataclasses import asdict, dataclass
from typing import Iterator

import structlog
from django.conf import settings

from core.redis_client import get_redis_client

logger = structlog.get_logger(__name__)

INSERT = "insert"
UPDATE = "update"
DELETE = "delete"
EVENTS = (INSERT, UPDATE, DELETE)


@dataclass(frozen=True)
class PostChange:
    event: str
    post_id: str

    def to_json(self) -> str:
        return json.dumps(asdict(self))

    @classmethod
    def from_json(cls, raw: str | bytes) -> "PostChange":
        payload = json.loads(raw)
        event = payload.get("event")
        if event not in EVENTS:
            raise ValueError(f"Unknown post change event: {event!r}")
        return cls(event=event, post_id=str(payload["post_id"]))


def publish_change(event: str, post_id) -> None:
    """Announce a committed change.

    The write it describes has already succeeded, so a Redis outage is
    logged and not raised.
    """
    change = PostChange(event=event, post_id=str(post_id))
    try:
        get_redis_client().publish(settings.POST_CHANGES_CHANNEL, change.to_json())
    except Exception as exc:  # pragma: no cover - network failure
        logger.warning("post_change_publish_failed", event=event, post_id=change.post_id, error=str(exc))


class PostChangeSubscription:
    """Subscribe on enter, unsubscribe and close on exit.

    Usage::

        with PostChangeSubscription() as feed:
            for change in feed.listen():
                refresh()
    """

    def __init__(self, client=None, channel: str | None = None):
        self._client = client
        self.channel = channel or settings.POST_CHANGES_CHANNEL
        self._pubsub = None

    def __enter__(self) -> "PostChangeSubscription":
        self.subscribe()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.unsubscribe()

    @property
    def active(self) -> bool:
        return self._pubsub is not None

    def subscribe(self) -> None:
        if self._pubsub is not None:
            return
        client = self._client or get_redis_client()
        pubsub = client.pubsub(ignore_subscribe_messages=True)
        pubsub.subscribe(self.channel)
        self._pubsub = pubsub
        logger.info("post_changes_subscribed", channel=self.channel)

    def unsubscribe(self) -> None:
        if self._pubsub is None:
            return
        pubsub, self._pubsub = self._pubsub, None
        try:
            pubsub.unsubscribe(self.channel)
        finally:
            pubsub.close()
        logger.info("post_changes_unsubscribed", channel=self.channel)

    def listen(self, max_events: int | None = None, timeout: float = 1.0) -> Iterator[PostChange]:
        """Yield changes until ``max_events`` arrive or the subscription ends.

        Malformed messages are logged and skipped.
        """
        if self._pubsub is None:
            raise RuntimeError("Subscription is not active; call subscribe() first.")
        received = 0
        while self._pubsub is not None and (max_events is None or received < max_events):
            message = self._pubsub.get_message(timeout=timeout)
            if not message or message.get("type") != "message":
                continue
            try:
                change = PostChange.from_json(message["data"])
            except (ValueError, KeyError, TypeError) as exc:
                logger.warning("post_change_malformed", error=str(exc))
                continue
            received += 1
            yield change


__all__ = [
    "PostChange",
    "PostChangeSubscription",
    "publish_change",
    "INSERT",
    "UPDATE",
    "DELETE",
]
