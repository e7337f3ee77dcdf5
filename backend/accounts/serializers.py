"""
Accounts app serializers.

Contains all Request and Response serializers for the accounts API.
Serializers handle field definitions, read/write constraints, and
basic validation.  **No business logic** lives here — all domain
rules are delegated to ``services.py``.
"""

from __future__ import annotations

from typing import Any

from django.contrib.auth import authenticate, get_user_model
from rest_framework import serializers
from rest_framework_simplejwt.serializers import TokenObtainPairSerializer

from .models import Department, Institution, Profile, UserRole

User = get_user_model()


def _validate_phone(value: str, field: str) -> None:
    digits = value.lstrip("+")
    if not digits.isdigit() or not 11 <= len(digits) <= 15:
        raise serializers.ValidationError(
            {field: "Phone number must be 11 to 15 digits."}
        )


# ═══════════════════════════════════════════════════════════════════
#  Authentication Serializers
# ═══════════════════════════════════════════════════════════════════


class RegisterRequestSerializer(serializers.Serializer):
    """
    Validates new-user registration data.

    Creates both the ``User`` and its marketplace ``Profile``.  The
    ``password`` field is write-only and will be hashed by the service
    layer.  The response after a successful registration is handled by
    ``UserDetailSerializer``.
    """

    username = serializers.CharField(max_length=150)
    email = serializers.EmailField()
    password = serializers.CharField(
        write_only=True,
        min_length=8,
        style={"input_type": "password"},
        help_text="Minimum 8 characters.",
    )
    password_confirm = serializers.CharField(
        write_only=True,
        style={"input_type": "password"},
        help_text="Must match 'password'.",
    )
    name = serializers.CharField(min_length=2, max_length=100)
    phone_number = serializers.CharField(max_length=15)
    whatsapp_number = serializers.CharField(
        max_length=15,
        required=False,
        allow_blank=True,
        default="",
    )
    institution_id = serializers.IntegerField(required=False, allow_null=True)
    department_id = serializers.IntegerField(required=False, allow_null=True)

    def validate(self, attrs: dict[str, Any]) -> dict[str, Any]:
        """
        Cross-field validation:
        1. Ensure password and password_confirm match.
        2. Validate phone number lengths.
        3. Ensure a chosen department belongs to the chosen institution.
        """
        if attrs["password"] != attrs["password_confirm"]:
            raise serializers.ValidationError(
                {"password_confirm": "Passwords do not match."}
            )

        _validate_phone(attrs["phone_number"], "phone_number")
        if attrs.get("whatsapp_number"):
            _validate_phone(attrs["whatsapp_number"], "whatsapp_number")

        institution_id = attrs.get("institution_id")
        department_id = attrs.get("department_id")
        if institution_id is not None and not Institution.objects.filter(pk=institution_id).exists():
            raise serializers.ValidationError({"institution_id": "Unknown institution."})
        if department_id is not None:
            department = Department.objects.filter(pk=department_id).first()
            if department is None:
                raise serializers.ValidationError({"department_id": "Unknown department."})
            if institution_id is not None and department.institution_id != institution_id:
                raise serializers.ValidationError(
                    {"department_id": "Department does not belong to the selected institution."}
                )

        # password_confirm is only needed for validation
        attrs.pop("password_confirm")

        return attrs


class LoginRequestSerializer(serializers.Serializer):
    """
    Accepts multi-field login credentials.

    The client sends ``identifier`` (username, email or phone number)
    together with ``password``.  Used for schema generation; the login
    view validates through ``CustomTokenObtainPairSerializer``.
    """

    identifier = serializers.CharField(
        help_text="Username, Email, or Phone Number.",
    )
    password = serializers.CharField(
        write_only=True,
        style={"input_type": "password"},
        help_text="User account password.",
    )


class CustomTokenObtainPairSerializer(TokenObtainPairSerializer):
    """
    Custom SimpleJWT serializer that:

    1. Accepts ``identifier`` + ``password`` instead of
       ``username`` + ``password``.
    2. Resolves the user via the ``MultiFieldAuthBackend``.
    3. Injects the platform ``role`` claim into the access token.
    """

    username_field = "identifier"

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.fields.pop(self.username_field, None)
        self.fields["identifier"] = serializers.CharField(
            help_text="Username, Email, or Phone Number.",
        )

    @classmethod
    def get_token(cls, user) -> Any:
        token = super().get_token(user)
        token["role"] = UserRole.ADMIN if user.is_superuser else user.role
        return token

    def validate(self, attrs: dict[str, Any]) -> dict[str, Any]:
        """
        Authenticate using the custom ``MultiFieldAuthBackend``.

        Returns a dict containing ``access`` and ``refresh``; the
        authenticated user is stored on ``self.user`` for the view.
        """
        user = authenticate(
            request=self.context.get("request"),
            identifier=attrs.get("identifier"),
            password=attrs.get("password"),
        )

        if user is None:
            raise serializers.ValidationError(
                {"detail": "Invalid credentials."},
                code="authentication",
            )

        if not user.is_active:
            raise serializers.ValidationError(
                {"detail": "User account is disabled."},
                code="authentication",
            )

        refresh = self.get_token(user)
        self.user = user
        return {
            "access": str(refresh.access_token),
            "refresh": str(refresh),
        }


class TokenResponseSerializer(serializers.Serializer):
    """Serializes the JWT token pair returned after successful login."""

    access = serializers.CharField(read_only=True)
    refresh = serializers.CharField(read_only=True)
    user = serializers.SerializerMethodField()

    def get_user(self, obj: dict) -> dict | None:
        user = obj.get("user")
        if user:
            return UserDetailSerializer(user).data
        return None


# ═══════════════════════════════════════════════════════════════════
#  User / Profile Serializers
# ═══════════════════════════════════════════════════════════════════


class ProfileSerializer(serializers.ModelSerializer):
    institution_name = serializers.CharField(
        source="institution.name",
        read_only=True,
        default=None,
    )
    department_name = serializers.CharField(
        source="department.name",
        read_only=True,
        default=None,
    )

    class Meta:
        model = Profile
        fields = [
            "id",
            "name",
            "phone_number",
            "whatsapp_number",
            "institution",
            "institution_name",
            "department",
            "department_name",
        ]
        read_only_fields = ["id"]


class UserListSerializer(serializers.ModelSerializer):
    """Serializer for listing users (admin views)."""

    class Meta:
        model = User
        fields = [
            "id",
            "username",
            "email",
            "phone_number",
            "is_active",
            "role",
            "date_joined",
        ]
        read_only_fields = fields


class UserDetailSerializer(serializers.ModelSerializer):
    """Full user representation including the nested profile."""

    profile = ProfileSerializer(read_only=True, default=None)
    is_shop_owner = serializers.SerializerMethodField()

    class Meta:
        model = User
        fields = [
            "id",
            "username",
            "email",
            "first_name",
            "last_name",
            "phone_number",
            "role",
            "is_active",
            "is_shop_owner",
            "profile",
            "date_joined",
        ]
        read_only_fields = fields

    def get_is_shop_owner(self, obj) -> bool:
        return obj.shops.exists()


class MeUpdateSerializer(serializers.Serializer):
    """
    Partial update of the caller's own account and profile.

    ``role`` and ``is_active`` are intentionally not writable here.
    """

    first_name = serializers.CharField(max_length=150, required=False, allow_blank=True)
    last_name = serializers.CharField(max_length=150, required=False, allow_blank=True)
    name = serializers.CharField(min_length=2, max_length=100, required=False)
    phone_number = serializers.CharField(max_length=15, required=False)
    whatsapp_number = serializers.CharField(max_length=15, required=False, allow_blank=True)
    institution = serializers.PrimaryKeyRelatedField(
        queryset=Institution.objects.all(),
        required=False,
        allow_null=True,
    )
    department = serializers.PrimaryKeyRelatedField(
        queryset=Department.objects.all(),
        required=False,
        allow_null=True,
    )

    def validate(self, attrs: dict[str, Any]) -> dict[str, Any]:
        if "phone_number" in attrs:
            _validate_phone(attrs["phone_number"], "phone_number")
        if attrs.get("whatsapp_number"):
            _validate_phone(attrs["whatsapp_number"], "whatsapp_number")
        return attrs


class AssignRoleSerializer(serializers.Serializer):
    role = serializers.ChoiceField(choices=UserRole.choices)
