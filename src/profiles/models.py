"""Author profile: the public identity attached one-to-one to an account."""

from django.conf import settings
from django.core.validators import MinLengthValidator, RegexValidator
from django.db import models
from django.db.models.functions import Lower

ANONYMOUS_LABEL = "Anonymous"
USERNAME_TAKEN = "This username is already taken"

username_validator = RegexValidator(
    r"^[A-Za-z0-9_]+$",
    "Username can only contain letters, numbers and underscores",
)
website_validator = RegexValidator(
    r"^(https?://)?([\da-z.-]+)\.([a-z.]{2,6})([/\w .-]*)/?$",
    "Please enter a valid URL",
)


class Profile(models.Model):
    """Author identity; its primary key is the owning account's id."""

    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        primary_key=True,
        related_name="profile",
    )
    username = models.CharField(
        max_length=50,
        unique=True,
        validators=[
            username_validator,
            MinLengthValidator(3, "Username must be at least 3 characters"),
        ],
    )
    full_name = models.CharField(max_length=150, blank=True)
    avatar_url = models.CharField(max_length=500, blank=True, null=True)
    website = models.CharField(max_length=200, blank=True, null=True, validators=[website_validator])
    bio = models.TextField(blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["username"]
        # Lookups by username are case-insensitive, so uniqueness must be too.
        constraints = [
            models.UniqueConstraint(Lower("username"), name="profile_username_ci_unique"),
        ]

    def __str__(self) -> str:  # pragma: no cover - trivial
        return self.username

    @property
    def display_name(self) -> str:
        return display_name_for(self)


def display_name_for(profile: Profile | None) -> str:
    """Full name, else username, else the anonymous label."""
    if profile is None:
        return ANONYMOUS_LABEL
    return profile.full_name or profile.username or ANONYMOUS_LABEL


__all__ = ["Profile", "display_name_for", "ANONYMOUS_LABEL", "USERNAME_TAKEN"]
