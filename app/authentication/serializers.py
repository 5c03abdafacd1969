"""
Authentication serializers.

Serializers:
    UserSerializer: Read/update current user (role is read-only)
    RegisterSerializer: Customer registration with email/password
    AuthTokensSerializer: Registration response (user + JWT pair)
"""

from django.contrib.auth.password_validation import validate_password
from rest_framework import serializers

from authentication.models import User, UserRole


class UserSerializer(serializers.ModelSerializer):
    """
    Serializer for the authenticated user.

    Email and role are read-only here; role changes go through
    the Django admin.
    """

    full_name = serializers.CharField(source="get_full_name", read_only=True)

    class Meta:
        model = User
        fields = [
            "id",
            "email",
            "first_name",
            "last_name",
            "full_name",
            "role",
            "date_joined",
        ]
        read_only_fields = ["id", "email", "role", "date_joined"]


class RegisterSerializer(serializers.Serializer):
    """
    Serializer for customer registration.

    Self-registered accounts always receive the customer role.
    """

    email = serializers.EmailField(required=True)
    password = serializers.CharField(
        write_only=True,
        min_length=8,
        style={"input_type": "password"},
        help_text="Password must be at least 8 characters.",
    )
    first_name = serializers.CharField(max_length=150, required=False, allow_blank=True)
    last_name = serializers.CharField(max_length=150, required=False, allow_blank=True)

    def validate_email(self, value):
        """Validate that email is not already in use."""
        email = value.lower().strip()
        if User.objects.filter(email__iexact=email).exists():
            raise serializers.ValidationError("A user with this email already exists.")
        return email

    def validate_password(self, value):
        validate_password(value)
        return value

    def create(self, validated_data):
        return User.objects.create_user(
            email=validated_data["email"],
            password=validated_data["password"],
            first_name=validated_data.get("first_name", ""),
            last_name=validated_data.get("last_name", ""),
            role=UserRole.CUSTOMER,
        )


class AuthTokensSerializer(serializers.Serializer):
    """Response for registration: the new user and a JWT pair."""

    user = UserSerializer()
    access = serializers.CharField()
    refresh = serializers.CharField()
