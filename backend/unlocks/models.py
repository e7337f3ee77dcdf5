"""
Unlocks app models.

A ``UnlockPayment`` is a user's attestation that they sent a small bKash
transfer to see one seller's contact details.  An admin verifies it by
hand (no gateway settlement).

Lifecycle::

    pending ──► approved ──► refund requested ──► refund approved / denied
        └─────► rejected

``status`` is resolved exactly once; a refund is requested once and
decided once.  At most one *active* (``pending`` or ``approved``) payment
may exist per ``(user, book)`` — enforced by a partial unique constraint
so that concurrent double-submissions cannot both succeed.
"""

from django.conf import settings
from django.db import models
from django.db.models import Q

from core.models import TimeStampedModel


class PaymentStatus(models.TextChoices):
    PENDING = "pending", "Pending Verification"
    APPROVED = "approved", "Approved"
    REJECTED = "rejected", "Rejected"


ACTIVE_PAYMENT_STATUSES = (PaymentStatus.PENDING, PaymentStatus.APPROVED)


class UnlockPayment(TimeStampedModel):
    """Contact-unlock payment for one book listing."""

    transaction_number = models.CharField(
        max_length=40,
        unique=True,
        verbose_name="Transaction Number",
        help_text="Human-facing receipt id; not a uniqueness key for unlocks.",
    )
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="unlock_payments",
        verbose_name="User",
    )
    book = models.ForeignKey(
        "books.Book",
        on_delete=models.CASCADE,
        related_name="unlock_payments",
        verbose_name="Book",
    )
    amount = models.PositiveIntegerField(verbose_name="Amount (BDT)")
    bkash_number = models.CharField(max_length=20, verbose_name="bKash Number")
    status = models.CharField(
        max_length=10,
        choices=PaymentStatus.choices,
        default=PaymentStatus.PENDING,
        verbose_name="Status",
        db_index=True,
    )
    resolved_at = models.DateTimeField(null=True, blank=True, verbose_name="Resolved At")
    admin_notes = models.TextField(blank=True, null=True, verbose_name="Admin Notes")

    # ── Refund sub-lifecycle ────────────────────────────────────────
    refund_requested = models.BooleanField(default=False, verbose_name="Refund Requested")
    refund_requested_at = models.DateTimeField(
        null=True,
        blank=True,
        verbose_name="Refund Requested At",
    )
    refund_approved = models.BooleanField(
        null=True,
        blank=True,
        verbose_name="Refund Approved",
        help_text="Null until an admin decides the refund request.",
    )
    refund_approved_at = models.DateTimeField(
        null=True,
        blank=True,
        verbose_name="Refund Decided At",
    )
    refund_notes = models.TextField(blank=True, null=True, verbose_name="Refund Notes")

    class Meta:
        verbose_name = "Unlock Payment"
        verbose_name_plural = "Unlock Payments"
        ordering = ["-created_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["user", "book"],
                condition=Q(status__in=["pending", "approved"]),
                name="unique_active_unlock_per_user_book",
            ),
        ]

    def __str__(self):
        return f"{self.transaction_number} ({self.status})"

    @property
    def refund_pending(self) -> bool:
        return self.refund_requested and self.refund_approved is None
