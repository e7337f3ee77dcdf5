"""
Accounts app models.

Defines the custom ``User`` model (with a single platform role), the
institution/department directory, and the ``Profile`` that links a user
to that directory.

The profile directory is consumed **read-only** by the broadcast
audience resolver (``core.domain.audience``): a user's institution and
department decide which targeted broadcasts reach them.
"""

from django.conf import settings
from django.contrib.auth.models import AbstractUser
from django.db import models

from core.models import TimeStampedModel


class UserRole(models.TextChoices):
    """Platform role.  Shop ownership is derived from ``shops.Shop.owner``."""

    USER = "user", "User"
    ADMIN = "admin", "Admin"


class InstitutionType(models.TextChoices):
    UNIVERSITY = "university", "University"
    COLLEGE = "college", "College"
    SCHOOL = "school", "School"
    NATIONAL_UNIVERSITY = "national_university", "National University"


class User(AbstractUser):
    """
    Custom user model for the Boi Rajjo marketplace.

    Registration requires username, password and email.  Each user
    holds exactly **one** platform role; new users register as
    ``user`` and an existing admin may promote them.
    """

    email = models.EmailField(
        unique=True,
        verbose_name="Email Address",
    )
    phone_number = models.CharField(
        max_length=15,
        blank=True,
        default="",
        verbose_name="Phone Number",
    )
    role = models.CharField(
        max_length=10,
        choices=UserRole.choices,
        default=UserRole.USER,
        verbose_name="Role",
        db_index=True,
    )

    REQUIRED_FIELDS = ["email"]

    class Meta:
        verbose_name = "User"
        verbose_name_plural = "Users"

    def __str__(self):
        return f"{self.username} ({self.role})"

    @property
    def display_name(self) -> str:
        """Profile name when the profile exists, else the username."""
        profile = getattr(self, "profile", None)
        return profile.name if profile is not None else self.username


class Institution(models.Model):
    """A university, college or school books and users are attached to."""

    name = models.CharField(max_length=255, verbose_name="Name")
    institution_type = models.CharField(
        max_length=30,
        choices=InstitutionType.choices,
        verbose_name="Type",
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = "Institution"
        verbose_name_plural = "Institutions"
        ordering = ["name"]

    def __str__(self):
        return self.name


class Department(models.Model):
    """A department inside one institution."""

    institution = models.ForeignKey(
        Institution,
        on_delete=models.CASCADE,
        related_name="departments",
        verbose_name="Institution",
    )
    name = models.CharField(max_length=255, verbose_name="Name")
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = "Department"
        verbose_name_plural = "Departments"
        ordering = ["institution", "name"]

    def __str__(self):
        return f"{self.name} ({self.institution})"


class Profile(TimeStampedModel):
    """
    Public marketplace profile of a user.

    ``phone_number`` / ``whatsapp_number`` are the seller contact details
    that are gated behind a contact-unlock payment.
    """

    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="profile",
        verbose_name="User",
    )
    name = models.CharField(max_length=255, verbose_name="Display Name")
    phone_number = models.CharField(max_length=15, verbose_name="Phone Number")
    whatsapp_number = models.CharField(
        max_length=15,
        blank=True,
        default="",
        verbose_name="WhatsApp Number",
    )
    institution = models.ForeignKey(
        Institution,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="profiles",
        verbose_name="Institution",
    )
    department = models.ForeignKey(
        Department,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="profiles",
        verbose_name="Department",
    )

    class Meta:
        verbose_name = "Profile"
        verbose_name_plural = "Profiles"
        indexes = [
            models.Index(fields=["institution"], name="accounts_profile_inst_idx"),
            models.Index(fields=["department"], name="accounts_profile_dept_idx"),
        ]

    def __str__(self):
        return self.name
