"""Owner-only profile updates, including avatar upload."""

from dataclasses import dataclass, field
from typing import Any

import structlog
from django.db import DatabaseError, IntegrityError, transaction

from core.errors import (
    AccessDenied,
    ContentValidationError,
    EntityNotFound,
    StorageUnavailable,
    UploadFailed,
)
from core.uploads import ImageUploader
from .models import USERNAME_TAKEN, Profile

logger = structlog.get_logger(__name__)

EDITABLE_FIELDS = ("username", "full_name", "website", "bio")


@dataclass
class ProfileResult:
    profile: Profile
    warnings: list[str] = field(default_factory=list)


class ProfileService:
    @classmethod
    def get_by_username(cls, username: str) -> Profile:
        try:
            return Profile.objects.get(username__iexact=username)
        except Profile.DoesNotExist:
            raise EntityNotFound("Profile not found.")
        except DatabaseError as exc:
            raise StorageUnavailable() from exc

    @classmethod
    def get_own(cls, requester) -> Profile:
        if requester is None or not getattr(requester, "is_authenticated", False):
            raise AccessDenied("Authentication required.")
        try:
            return Profile.objects.get(pk=requester.pk)
        except Profile.DoesNotExist:
            raise EntityNotFound("Profile not found.")
        except DatabaseError as exc:
            raise StorageUnavailable() from exc

    @classmethod
    def update_profile(cls, requester, fields: dict[str, Any]) -> ProfileResult:
        """Apply validated ``fields`` to the requester's own profile.

        A failed avatar upload keeps the previous avatar and is reported as a
        warning; the other fields are still saved.
        """
        profile = cls.get_own(requester)
        warnings: list[str] = []

        changed = []
        for name in EDITABLE_FIELDS:
            if name in fields:
                setattr(profile, name, fields[name])
                changed.append(name)

        avatar = fields.get("avatar")
        if avatar:
            try:
                profile.avatar_url = ImageUploader.upload_avatar(profile.pk, avatar)
                changed.append("avatar_url")
            except UploadFailed as exc:
                logger.warning("avatar_upload_skipped", user_id=str(profile.pk))
                warnings.append(exc.message)

        if changed:
            try:
                with transaction.atomic():
                    profile.save(update_fields=changed)
            except IntegrityError as exc:
                # Lost a race for the same username against another update.
                raise ContentValidationError({"username": [USERNAME_TAKEN]}) from exc
            except DatabaseError as exc:
                raise StorageUnavailable() from exc

        logger.info("profile_updated", user_id=str(profile.pk), fields=changed)
        return ProfileResult(profile=profile, warnings=warnings)


__all__ = ["ProfileService", "ProfileResult"]
