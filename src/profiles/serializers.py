"""Serializers for author profiles."""

from rest_framework import serializers

from .models import USERNAME_TAKEN, Profile


class ProfileSerializer(serializers.ModelSerializer):
    """Public profile payload including the resolved display name."""

    id = serializers.UUIDField(source="pk", read_only=True)
    display_name = serializers.CharField(read_only=True)

    class Meta:
        model = Profile
        fields = [
            "id",
            "username",
            "full_name",
            "display_name",
            "avatar_url",
            "website",
            "bio",
            "created_at",
        ]
        read_only_fields = fields


class ProfileUpdateSerializer(serializers.ModelSerializer):
    """Patchable profile fields; ``avatar`` is an optional image upload."""

    avatar = serializers.ImageField(write_only=True, required=False)

    class Meta:
        model = Profile
        fields = ["username", "full_name", "website", "bio", "avatar"]
        extra_kwargs = {
            "full_name": {"required": False, "allow_blank": True},
            "website": {"required": False, "allow_blank": True, "allow_null": True},
            "bio": {"required": False, "allow_blank": True, "allow_null": True},
        }

    def validate_username(self, value: str) -> str:
        """Usernames are unique regardless of case."""
        taken = Profile.objects.filter(username__iexact=value)
        if self.instance is not None:
            taken = taken.exclude(pk=self.instance.pk)
        if taken.exists():
            raise serializers.ValidationError(USERNAME_TAKEN)
        return value

    def validate(self, attrs):
        """Reject attempts to change the identifier or avatar URL directly."""
        forbidden = {"id", "user", "avatar_url"} & set(getattr(self, "initial_data", {}))
        if forbidden:
            raise serializers.ValidationError(
                f"Field(s) {', '.join(sorted(forbidden))} cannot be updated via this endpoint"
            )
        return super().validate(attrs)


__all__ = ["ProfileSerializer", "ProfileUpdateSerializer"]
