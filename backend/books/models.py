"""
Books app models.

A ``Book`` is a marketplace listing.  Only the fields the order and
contact-unlock workflows depend on are modelled here: the price (which
decides the unlock fee and the order total), the seller (whose contact
details are gated behind an unlock) and the availability status.
"""

from django.conf import settings
from django.db import models

from core.models import TimeStampedModel


class BookCondition(models.TextChoices):
    NEW = "new", "New"
    GOOD = "good", "Good"
    WORN = "worn", "Worn"


class BookStatus(models.TextChoices):
    AVAILABLE = "available", "Available"
    SOLD = "sold", "Sold"


class BookType(models.TextChoices):
    ACADEMIC = "academic", "Academic"
    NON_ACADEMIC = "non_academic", "Non-Academic"
    NILKHET = "nilkhet", "Nilkhet"


class Book(TimeStampedModel):
    """A book listed for sale by a user (or by an admin for Nilkhet)."""

    title = models.CharField(max_length=255, verbose_name="Title")
    author = models.CharField(max_length=255, verbose_name="Author")
    price = models.PositiveIntegerField(verbose_name="Price (BDT)")
    condition = models.CharField(
        max_length=10,
        choices=BookCondition.choices,
        default=BookCondition.GOOD,
        verbose_name="Condition",
    )
    status = models.CharField(
        max_length=10,
        choices=BookStatus.choices,
        default=BookStatus.AVAILABLE,
        verbose_name="Status",
        db_index=True,
    )
    book_type = models.CharField(
        max_length=20,
        choices=BookType.choices,
        default=BookType.ACADEMIC,
        verbose_name="Book Type",
    )
    seller = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="books",
        verbose_name="Seller",
    )
    is_admin_listing = models.BooleanField(
        default=False,
        verbose_name="Admin Listing",
        help_text="Curated by an admin (orderable with cash on delivery).",
    )

    class Meta:
        verbose_name = "Book"
        verbose_name_plural = "Books"
        ordering = ["-created_at"]

    def __str__(self):
        return f"{self.title} — {self.author}"
