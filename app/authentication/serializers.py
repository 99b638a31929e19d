"""
Serializers for authentication endpoints.

Field names follow the camelCase contract the mobile client reads.
"""

from rest_framework import serializers

from authentication.models import User


class UserSerializer(serializers.ModelSerializer):
    """Read representation of the current user."""

    firebaseUID = serializers.CharField(source="firebase_uid", read_only=True)
    profileImageUrl = serializers.CharField(source="profile_image_url", read_only=True)
    pushToken = serializers.CharField(source="push_token", read_only=True)
    createdAt = serializers.DateTimeField(source="date_joined", read_only=True)
    updatedAt = serializers.DateTimeField(source="updated_at", read_only=True)

    class Meta:
        model = User
        fields = [
            "id",
            "firebaseUID",
            "email",
            "name",
            "profileImageUrl",
            "pushToken",
            "createdAt",
            "updatedAt",
        ]
        read_only_fields = fields


class ProfileUpdateSerializer(serializers.ModelSerializer):
    """Partial update of the fields a user may change about themselves."""

    profileImageUrl = serializers.URLField(
        source="profile_image_url",
        max_length=500,
        required=False,
        allow_blank=True,
    )
    pushToken = serializers.CharField(
        source="push_token",
        max_length=255,
        required=False,
        allow_blank=True,
    )

    class Meta:
        model = User
        fields = ["name", "profileImageUrl", "pushToken"]
        extra_kwargs = {"name": {"required": False}}
