"""
Orders app models.

Covers the two user-placed ledger entities of the main marketplace:

    • ``Order``   — cash-on-delivery order for a listed book.
    • ``Demand``  — request for a book that is not listed yet.

Together with ``shops.ShopOrder`` they form the three *statusful*
entities driven by ``orders.services.StatusWorkflowService``.  Every
applied transition is recorded in ``StatusTransitionLog``.
"""

from django.conf import settings
from django.db import models

from core.models import TimeStampedModel


# ────────────────────────────────────────────────────────────────────
# Choice enumerations
# ────────────────────────────────────────────────────────────────────

class OrderStatus(models.TextChoices):
    """Lifecycle shared by ``Order`` and ``shops.ShopOrder``."""

    PENDING = "pending", "Pending"
    CONFIRMED = "confirmed", "Confirmed"
    PROCESSING = "processing", "Processing"
    OUT_FOR_DELIVERY = "out_for_delivery", "Out for Delivery"
    DELIVERED = "delivered", "Delivered"
    CANCELLED = "cancelled", "Cancelled"


class DemandStatus(models.TextChoices):
    REQUESTED = "requested", "Requested"
    PROCESSING = "processing", "Processing"
    OUT_FOR_DELIVERY = "out_for_delivery", "Out for Delivery"
    DELIVERED = "delivered", "Delivered"
    CANCELLED = "cancelled", "Cancelled"


class EntityKind(models.TextChoices):
    """The statusful entity kinds the workflow engine can transition."""

    ORDER = "order", "Order"
    SHOP_ORDER = "shop_order", "Shop Order"
    DEMAND = "demand", "Book Demand"


# ────────────────────────────────────────────────────────────────────
# Models
# ────────────────────────────────────────────────────────────────────

class Order(TimeStampedModel):
    """
    A buyer's order for a listed ``books.Book``.

    Created by the buyer in ``pending``; every later status change is an
    admin action validated by the workflow engine.
    """

    order_number = models.CharField(
        max_length=40,
        unique=True,
        verbose_name="Order Number",
    )
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="orders",
        verbose_name="Buyer",
    )
    book = models.ForeignKey(
        "books.Book",
        on_delete=models.PROTECT,
        related_name="orders",
        verbose_name="Book",
    )
    quantity = models.PositiveIntegerField(default=1, verbose_name="Quantity")
    total_price = models.PositiveIntegerField(verbose_name="Total Price (BDT)")
    detail_address = models.TextField(
        blank=True,
        default="",
        verbose_name="Delivery Address",
    )
    status = models.CharField(
        max_length=20,
        choices=OrderStatus.choices,
        default=OrderStatus.PENDING,
        verbose_name="Status",
        db_index=True,
    )
    admin_notes = models.TextField(blank=True, null=True, verbose_name="Admin Notes")

    class Meta:
        verbose_name = "Order"
        verbose_name_plural = "Orders"
        ordering = ["-created_at"]

    def __str__(self):
        return f"{self.order_number} ({self.status})"


class Demand(TimeStampedModel):
    """A user's request for a book the platform should source."""

    demand_number = models.CharField(
        max_length=40,
        unique=True,
        verbose_name="Demand Number",
    )
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="demands",
        verbose_name="Requested By",
    )
    book_name = models.CharField(max_length=255, verbose_name="Book Name")
    author_name = models.CharField(
        max_length=255,
        blank=True,
        default="",
        verbose_name="Author Name",
    )
    detail_address = models.TextField(
        blank=True,
        default="",
        verbose_name="Delivery Address",
    )
    status = models.CharField(
        max_length=20,
        choices=DemandStatus.choices,
        default=DemandStatus.REQUESTED,
        verbose_name="Status",
        db_index=True,
    )
    admin_notes = models.TextField(blank=True, null=True, verbose_name="Admin Notes")

    class Meta:
        verbose_name = "Book Demand"
        verbose_name_plural = "Book Demands"
        ordering = ["-created_at"]

    def __str__(self):
        return f"{self.demand_number}: {self.book_name} ({self.status})"


class StatusTransitionLog(models.Model):
    """Immutable audit record of one applied status transition."""

    entity_kind = models.CharField(
        max_length=20,
        choices=EntityKind.choices,
        verbose_name="Entity Kind",
    )
    entity_id = models.PositiveIntegerField(verbose_name="Entity ID")
    from_status = models.CharField(max_length=20, verbose_name="From")
    to_status = models.CharField(max_length=20, verbose_name="To")
    changed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        related_name="status_transitions",
        verbose_name="Changed By",
    )
    notes = models.TextField(blank=True, default="", verbose_name="Notes")
    created_at = models.DateTimeField(auto_now_add=True, verbose_name="Created At")

    class Meta:
        verbose_name = "Status Transition Log"
        verbose_name_plural = "Status Transition Logs"
        ordering = ["-created_at", "-id"]
        indexes = [
            models.Index(fields=["entity_kind", "entity_id"], name="orders_translog_entity_idx"),
        ]

    def __str__(self):
        return (
            f"{self.entity_kind}#{self.entity_id}: "
            f"{self.from_status} → {self.to_status}"
        )
