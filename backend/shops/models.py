"""
Shops app models — the Nilkhet channel.

Shop-run catalogues sell books with cash on delivery.  A ``ShopOrder``
follows the same lifecycle as ``orders.Order`` (``OrderStatus``); the
shop owner may only annotate it (``shop_notes``), status changes are
admin actions.
"""

from django.conf import settings
from django.db import models

from core.models import TimeStampedModel
from orders.models import OrderStatus


class Shop(TimeStampedModel):
    """A bookshop run by one user account."""

    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="shops",
        verbose_name="Owner",
    )
    name = models.CharField(max_length=255, verbose_name="Shop Name")
    description = models.TextField(blank=True, default="", verbose_name="Description")
    phone_number = models.CharField(max_length=15, verbose_name="Phone Number")
    whatsapp_number = models.CharField(
        max_length=15,
        blank=True,
        default="",
        verbose_name="WhatsApp Number",
    )
    address = models.TextField(blank=True, default="", verbose_name="Address")
    is_verified = models.BooleanField(default=False, verbose_name="Verified")
    is_active = models.BooleanField(default=True, verbose_name="Active")

    class Meta:
        verbose_name = "Shop"
        verbose_name_plural = "Shops"
        ordering = ["name"]

    def __str__(self):
        return self.name


class ShopBook(TimeStampedModel):
    """A catalogue entry of a shop."""

    shop = models.ForeignKey(
        Shop,
        on_delete=models.CASCADE,
        related_name="books",
        verbose_name="Shop",
    )
    title = models.CharField(max_length=255, verbose_name="Title")
    author = models.CharField(max_length=255, verbose_name="Author")
    price = models.PositiveIntegerField(verbose_name="Price (BDT)")
    stock = models.PositiveIntegerField(default=1, verbose_name="Stock")
    is_available = models.BooleanField(default=True, verbose_name="Available")

    class Meta:
        verbose_name = "Shop Book"
        verbose_name_plural = "Shop Books"
        ordering = ["title"]

    def __str__(self):
        return f"{self.title} @ {self.shop}"


class ShopOrder(TimeStampedModel):
    """A customer's order placed against a shop's catalogue."""

    order_number = models.CharField(
        max_length=40,
        unique=True,
        verbose_name="Order Number",
    )
    shop = models.ForeignKey(
        Shop,
        on_delete=models.CASCADE,
        related_name="orders",
        verbose_name="Shop",
    )
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="shop_orders",
        verbose_name="Customer",
    )
    shop_book = models.ForeignKey(
        ShopBook,
        on_delete=models.PROTECT,
        related_name="orders",
        verbose_name="Book",
    )
    quantity = models.PositiveIntegerField(default=1, verbose_name="Quantity")
    total_price = models.PositiveIntegerField(verbose_name="Total Price (BDT)")
    detail_address = models.TextField(blank=True, default="", verbose_name="Delivery Address")
    status = models.CharField(
        max_length=20,
        choices=OrderStatus.choices,
        default=OrderStatus.PENDING,
        verbose_name="Status",
        db_index=True,
    )
    customer_notes = models.TextField(blank=True, default="", verbose_name="Customer Notes")
    shop_notes = models.TextField(blank=True, default="", verbose_name="Shop Notes")
    admin_notes = models.TextField(blank=True, null=True, verbose_name="Admin Notes")

    class Meta:
        verbose_name = "Shop Order"
        verbose_name_plural = "Shop Orders"
        ordering = ["-created_at"]

    def __str__(self):
        return f"{self.order_number} ({self.status})"
