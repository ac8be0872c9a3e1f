"""Create the author profile whenever a new account is saved."""

import re

import structlog
from django.conf import settings
from django.db.models.signals import post_save
from django.dispatch import receiver

from .models import Profile

logger = structlog.get_logger(__name__)

_INVALID_USERNAME_CHARS = re.compile(r"[^A-Za-z0-9_]")


def unique_username_for(email: str) -> str:
    """Derive a valid, unused username from the email's local part."""
    local = (email or "").split("@", 1)[0]
    base = _INVALID_USERNAME_CHARS.sub("_", local)[:40].ljust(3, "_")
    candidate = base
    suffix = 1
    while Profile.objects.filter(username__iexact=candidate).exists():
        candidate = f"{base}_{suffix}"
        suffix += 1
    return candidate


@receiver(post_save, sender=settings.AUTH_USER_MODEL, dispatch_uid="profiles.create_profile")
def create_profile(sender, instance, created, raw=False, **kwargs):
    if not created or raw:
        return
    profile = Profile.objects.create(user=instance, username=unique_username_for(instance.email))
    logger.info("profile_created", user_id=str(instance.pk), username=profile.username)
