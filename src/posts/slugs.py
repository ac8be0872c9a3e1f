"""URL-safe slug generation for post titles."""

import re
import time

_NON_WORD = re.compile(r"[^A-Za-z0-9_\s]")
_WHITESPACE = re.compile(r"\s+")

SUFFIX_DIGITS = 6


def timestamp_suffix(timestamp_ms: int | None = None) -> str:
    """Last six digits of the millisecond epoch clock, zero-padded."""
    if timestamp_ms is None:
        timestamp_ms = time.time_ns() // 1_000_000
    return str(timestamp_ms % 10**SUFFIX_DIGITS).zfill(SUFFIX_DIGITS)


def slugify_title(title: str) -> str:
    lowered = title.lower()
    # Word characters are ASCII only, so accented letters are dropped; any
    # Unicode whitespace still separates words.
    stripped = _NON_WORD.sub("", lowered).strip()
    return _WHITESPACE.sub("-", stripped)


def generate_slug(title: str, timestamp_ms: int | None = None) -> str:
    """Return ``<slugified title>-<six digit time suffix>``.

    The suffix only makes collisions unlikely; the unique index on
    ``Post.slug`` is what guarantees uniqueness.
    """
    return f"{slugify_title(title)}-{timestamp_suffix(timestamp_ms)}"


__all__ = ["generate_slug", "slugify_title", "timestamp_suffix"]
