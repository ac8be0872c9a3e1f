"""Post visibility and ownership policy.

Pure decisions over a requester id and a post's ``published`` flag and
``author_id``. No I/O, no request objects: callers resolve the requester
first (see ``requester_id_for``) and pass it in.
"""

from enum import Enum
from typing import Any, Protocol


class Decision(str, Enum):
    ALLOW = "allow"
    DENY = "deny"


class PostLike(Protocol):
    published: bool
    author_id: Any


def _same_identity(requester_id: Any, author_id: Any) -> bool:
    # UUIDs and their string form must compare equal.
    return requester_id is not None and author_id is not None and str(requester_id) == str(author_id)


def can_view(requester_id: Any, post: PostLike) -> Decision:
    """ALLOW published posts to anyone, drafts only to their author."""
    if post.published:
        return Decision.ALLOW
    if _same_identity(requester_id, post.author_id):
        return Decision.ALLOW
    return Decision.DENY


def can_mutate(requester_id: Any, post: PostLike) -> Decision:
    """ALLOW update/delete only to the post's author."""
    if _same_identity(requester_id, post.author_id):
        return Decision.ALLOW
    return Decision.DENY


def requester_id_for(user: Any) -> Any:
    """Return the verified id of ``user``, or None for anonymous requests.

    ``user`` is whatever ``JWTAuthMiddleware`` attached to the request.
    """
    if user is None or not getattr(user, "is_authenticated", False):
        return None
    return user.id


__all__ = ["Decision", "can_view", "can_mutate", "requester_id_for"]
