"""
Accounts Service Layer.

This module is the **single source of truth** for all business logic
within the ``accounts`` app.  Views must remain *thin*: they validate
input through serializers, call a service method, and return the result
wrapped in a DRF ``Response``.

Architecture
------------
- ``UserRegistrationService``  — user + profile creation, signup alert.
- ``CurrentUserService``       — "Me" endpoint helpers.
- ``UserManagementService``    — admin listing and role assignment.
"""

from __future__ import annotations

import logging
from typing import Any

from django.contrib.auth import get_user_model
from django.db import IntegrityError, transaction
from django.db.models import Q, QuerySet

from core.domain.access import ADMIN, require_role
from core.domain.exceptions import Conflict, DomainError
from core.domain.notifications import NotificationDispatcher
from core.domain.transactions import fetch_or_404
from core.models import AdminAlertType

from .models import Profile, UserRole

User = get_user_model()

logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════════
#  Registration Service
# ═══════════════════════════════════════════════════════════════════


class UserRegistrationService:
    """Encapsulates the sign-up flow."""

    @staticmethod
    def register_user(validated_data: dict[str, Any]) -> User:
        """
        Create a new user with the ``user`` role and its profile.

        Parameters
        ----------
        validated_data : dict
            Cleaned data from ``RegisterRequestSerializer`` containing
            ``username``, ``email``, ``password``, ``name``,
            ``phone_number`` and optionally ``whatsapp_number``,
            ``institution_id``, ``department_id``.

        Returns
        -------
        User
            The newly created user; ``user.profile`` is populated.

        Raises
        ------
        core.domain.exceptions.Conflict
            If the username or email is already taken.

        Notes
        -----
        A ``signup`` alert is queued for the admin inbox after commit.
        """
        data = dict(validated_data)
        data.pop("password_confirm", None)
        password = data.pop("password")

        conflicts = []
        if User.objects.filter(username=data["username"]).exists():
            conflicts.append("username")
        if User.objects.filter(email__iexact=data["email"]).exists():
            conflicts.append("email")
        if conflicts:
            raise Conflict(
                f"The following field(s) already exist: {', '.join(conflicts)}."
            )

        try:
            with transaction.atomic():
                user = User.objects.create_user(
                    username=data["username"],
                    email=data["email"],
                    password=password,
                    phone_number=data["phone_number"],
                    role=UserRole.USER,
                )
                Profile.objects.create(
                    user=user,
                    name=data["name"],
                    phone_number=data["phone_number"],
                    whatsapp_number=data.get("whatsapp_number") or "",
                    institution_id=data.get("institution_id"),
                    department_id=data.get("department_id"),
                )
                NotificationDispatcher.alert_admin(
                    alert_type=AdminAlertType.SIGNUP,
                    title="New User Signup",
                    message=f"{data['name']} ({user.email}) just signed up",
                    reference_id=user.pk,
                )
        except IntegrityError:
            raise Conflict(
                "A user with one of the provided unique fields already exists."
            )

        logger.info("Registered user %s (pk=%s)", user.username, user.pk)
        return user


# ═══════════════════════════════════════════════════════════════════
#  Current User Service
# ═══════════════════════════════════════════════════════════════════


class CurrentUserService:
    """Helpers for the ``/me/`` endpoint."""

    PROFILE_FIELDS = ("name", "phone_number", "whatsapp_number", "institution", "department")
    USER_FIELDS = ("first_name", "last_name")

    @staticmethod
    def get_profile(user: User) -> User:
        return (
            User.objects
            .select_related("profile__institution", "profile__department")
            .get(pk=user.pk)
        )

    @classmethod
    def update_profile(cls, user: User, validated_data: dict[str, Any]) -> User:
        """
        Apply a partial update to the user and their profile.

        A user without a profile gets one created on first update; ``name``
        and ``phone_number`` are then required.

        Raises
        ------
        core.domain.exceptions.DomainError
            If a department outside the chosen institution is selected,
            or a profile must be created without ``name``/``phone_number``.
        """
        user_changes = {k: v for k, v in validated_data.items() if k in cls.USER_FIELDS}
        profile_changes = {k: v for k, v in validated_data.items() if k in cls.PROFILE_FIELDS}

        with transaction.atomic():
            if user_changes:
                for field, value in user_changes.items():
                    setattr(user, field, value)
                user.save(update_fields=list(user_changes))

            if profile_changes:
                profile = Profile.objects.filter(user=user).first()
                if profile is None:
                    if not profile_changes.get("name") or not profile_changes.get("phone_number"):
                        raise DomainError("Name and phone number are required to create a profile.")
                    profile = Profile(user=user)

                for field, value in profile_changes.items():
                    setattr(profile, field, value)

                if (
                    profile.department_id is not None
                    and profile.institution_id is not None
                    and profile.department.institution_id != profile.institution_id
                ):
                    raise DomainError("Department does not belong to the selected institution.")
                profile.save()

                if "phone_number" in profile_changes:
                    user.phone_number = profile.phone_number
                    user.save(update_fields=["phone_number"])

        return cls.get_profile(user)


# ═══════════════════════════════════════════════════════════════════
#  User Management Service
# ═══════════════════════════════════════════════════════════════════


class UserManagementService:
    """Administrative operations on users.  Admin only."""

    @staticmethod
    def list_users(
        actor: User,
        *,
        role: str | None = None,
        search: str | None = None,
    ) -> QuerySet[User]:
        """
        Return a filtered queryset of users.

        Parameters
        ----------
        role : str, optional
            ``user`` or ``admin``.
        search : str, optional
            Case-insensitive match on username, email or phone number.
        """
        require_role(actor, ADMIN, message="Only administrators can list users.")

        qs = User.objects.select_related("profile").order_by("-date_joined")
        if role:
            qs = qs.filter(role=role)
        if search:
            qs = qs.filter(
                Q(username__icontains=search)
                | Q(email__icontains=search)
                | Q(phone_number__icontains=search)
            )
        return qs

    @staticmethod
    def assign_role(user_id: Any, role: str, performed_by: User) -> User:
        """
        Set a user's platform role.

        Raises
        ------
        PermissionDenied
            If ``performed_by`` is not an admin.
        DomainError
            If an admin tries to demote themselves.
        NotFound
            If the target user does not exist.
        """
        require_role(performed_by, ADMIN, message="Only administrators can assign roles.")

        target = fetch_or_404(User, user_id)
        if target.pk == performed_by.pk and role != UserRole.ADMIN:
            raise DomainError("Administrators cannot demote themselves.")

        if target.role != role:
            target.role = role
            target.save(update_fields=["role"])
            logger.info("User %s role set to %s by %s", target.pk, role, performed_by.pk)
        return target
