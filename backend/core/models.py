"""
Core app models.

Provides the abstract timestamp base used by every ledger table, plus the
notification side of the system:

    • ``Notification``  — one row per recipient per event (user inbox).
    • ``AdminAlert``    — the admin inbox; backs the email side-channel.
    • ``BroadcastLog``  — audit record of each admin broadcast.
"""

from django.conf import settings
from django.db import models


class TimeStampedModel(models.Model):
    """
    Abstract base model that provides self-updating ``created_at`` and
    ``updated_at`` timestamp fields for every concrete child model.
    """

    created_at = models.DateTimeField(
        auto_now_add=True,
        verbose_name="Created At",
    )
    updated_at = models.DateTimeField(
        auto_now=True,
        verbose_name="Updated At",
    )

    class Meta:
        abstract = True


# ────────────────────────────────────────────────────────────────────
# Choice enumerations
# ────────────────────────────────────────────────────────────────────

class NotificationType(models.TextChoices):
    INFO = "info", "Info"
    ORDER_UPDATE = "order_update", "Order Update"
    DEMAND_UPDATE = "demand_update", "Demand Update"
    PAYMENT_UPDATE = "payment_update", "Payment Update"
    BROADCAST = "broadcast", "Broadcast"


class ReferenceType(models.TextChoices):
    """Kind of ledger row a notification points back to."""

    ORDER = "order", "Order"
    SHOP_ORDER = "shop_order", "Shop Order"
    DEMAND = "demand", "Book Demand"
    PAYMENT = "payment", "Unlock Payment"


class TargetKind(models.TextChoices):
    """Audience selector of an admin broadcast."""

    ALL = "all", "All Users"
    INSTITUTION = "institution", "Institution"
    DEPARTMENT = "department", "Department"
    SHOP = "shop", "Shop Owner"
    USER = "user", "Single User"


class AdminAlertType(models.TextChoices):
    SIGNUP = "signup", "Signup"
    BOOK_DEMAND = "book_demand", "Book Demand"
    ORDER = "order", "Order"
    NEW_LISTING = "new_listing", "New Listing"
    BOOK_SOLD = "book_sold", "Book Sold"


# ────────────────────────────────────────────────────────────────────
# Models
# ────────────────────────────────────────────────────────────────────

class Notification(models.Model):
    """
    A notification delivered to one user.

    Written by ``core.domain.notifications.NotificationDispatcher`` and
    never modified by the system afterwards; the recipient may only flip
    ``is_read``.  ``profile`` is resolved best-effort and may be null.
    """

    recipient = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="notifications",
        verbose_name="Recipient",
    )
    profile = models.ForeignKey(
        "accounts.Profile",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="notifications",
        verbose_name="Recipient Profile",
    )
    title = models.CharField(max_length=255, verbose_name="Title")
    message = models.TextField(verbose_name="Message")
    notification_type = models.CharField(
        max_length=30,
        choices=NotificationType.choices,
        default=NotificationType.INFO,
        verbose_name="Type",
    )
    reference_type = models.CharField(
        max_length=30,
        choices=ReferenceType.choices,
        blank=True,
        null=True,
        verbose_name="Reference Type",
    )
    reference_id = models.CharField(
        max_length=64,
        blank=True,
        null=True,
        verbose_name="Reference ID",
    )
    is_read = models.BooleanField(default=False, verbose_name="Read")
    created_at = models.DateTimeField(auto_now_add=True, verbose_name="Created At")

    class Meta:
        verbose_name = "Notification"
        verbose_name_plural = "Notifications"
        ordering = ["-created_at", "-id"]
        indexes = [
            models.Index(fields=["recipient", "is_read"], name="core_notif_recip_read_idx"),
            models.Index(fields=["recipient", "-created_at"], name="core_notif_recip_created_idx"),
        ]

    def __str__(self):
        return f"[{self.recipient_id}] {self.title}"


class AdminAlert(TimeStampedModel):
    """
    Entry in the administrators' inbox.

    Each alert is also mailed to the fixed admin mailbox on a best-effort
    basis; ``email_sent`` only becomes ``True`` after a successful send.
    """

    alert_type = models.CharField(
        max_length=30,
        choices=AdminAlertType.choices,
        verbose_name="Type",
    )
    title = models.CharField(max_length=255, verbose_name="Title")
    message = models.TextField(verbose_name="Message")
    reference_id = models.CharField(
        max_length=64,
        blank=True,
        null=True,
        verbose_name="Reference ID",
    )
    is_read = models.BooleanField(default=False, verbose_name="Read")
    email_sent = models.BooleanField(default=False, verbose_name="Email Sent")

    class Meta:
        verbose_name = "Admin Alert"
        verbose_name_plural = "Admin Alerts"
        ordering = ["-created_at"]

    def __str__(self):
        return f"[{self.alert_type}] {self.title}"


class BroadcastLog(TimeStampedModel):
    """Audit record of one admin broadcast and how many users it reached."""

    title = models.CharField(max_length=255, verbose_name="Title")
    message = models.TextField(verbose_name="Message")
    target_kind = models.CharField(
        max_length=20,
        choices=TargetKind.choices,
        verbose_name="Target",
    )
    target_institution_id = models.PositiveIntegerField(null=True, blank=True)
    target_department_id = models.PositiveIntegerField(null=True, blank=True)
    target_shop_id = models.PositiveIntegerField(null=True, blank=True)
    target_user_id = models.PositiveIntegerField(null=True, blank=True)
    sent_count = models.PositiveIntegerField(default=0, verbose_name="Sent Count")
    sent_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="broadcasts_sent",
        verbose_name="Sent By",
    )

    class Meta:
        verbose_name = "Broadcast Log"
        verbose_name_plural = "Broadcast Logs"
        ordering = ["-created_at"]

    def __str__(self):
        return f"{self.title} → {self.target_kind} ({self.sent_count})"
