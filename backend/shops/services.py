"""
Shops app service layer — the Nilkhet channel.

Shop orders share the order lifecycle and the status workflow engine
(``orders.services.StatusWorkflowService``, kind ``shop_order``).  This
module only covers what is specific to shops:

- customers placing an order against a shop's catalogue,
- shop owners reading their incoming orders and annotating them with
  ``shop_notes``.

Shop ownership is derived from ``Shop.owner``; it is not a stored role.
"""

from __future__ import annotations

import logging
from typing import Any, TYPE_CHECKING

from django.db import transaction
from django.db.models import QuerySet

from core.constants import SHOP_ORDER_NUMBER_PREFIX
from core.domain.access import is_admin, require_owner
from core.domain.exceptions import DomainError, PermissionDenied
from core.domain.references import generate_reference
from core.domain.transactions import fetch_or_404

from .models import Shop, ShopBook, ShopOrder

if TYPE_CHECKING:
    from accounts.models import User

logger = logging.getLogger(__name__)


class ShopService:
    """Read access to the shop directory."""

    @staticmethod
    def list_shops(user: User) -> QuerySet:
        """Active shops; admins also see inactive ones."""
        qs = Shop.objects.select_related("owner")
        if not is_admin(user):
            qs = qs.filter(is_active=True)
        return qs

    @staticmethod
    def get_shop(user: User, shop_id: Any) -> Shop:
        filters = {} if is_admin(user) else {"is_active": True}
        return fetch_or_404(Shop, shop_id, **filters)

    @staticmethod
    def is_shop_owner(user: User, shop: Shop) -> bool:
        return user is not None and shop.owner_id == getattr(user, "pk", None)


class ShopOrderService:
    """Placement, listing and shop-side annotation of shop orders."""

    @staticmethod
    def place_order(
        user: User,
        shop_book_id: Any,
        quantity: int = 1,
        detail_address: str = "",
        customer_notes: str = "",
    ) -> ShopOrder:
        """
        Create a shop order in ``pending``.

        Parameters
        ----------
        user : User
            The customer.
        shop_book_id : int
            Catalogue entry being ordered.
        quantity : int
            Number of copies; must not exceed the listed stock.

        Returns
        -------
        ShopOrder

        Raises
        ------
        NotFound
            If the catalogue entry does not exist.
        DomainError
            If the shop is inactive, the book unavailable or out of
            stock, or the quantity is below 1.

        Notes
        -----
        Stock is informational and is maintained by the shop; placing an
        order does not decrement it.
        """
        if quantity < 1:
            raise DomainError("Quantity must be at least 1.")

        shop_book = fetch_or_404(ShopBook, shop_book_id)
        shop = shop_book.shop
        if not shop.is_active:
            raise DomainError("This shop is not accepting orders.")
        if not shop_book.is_available or shop_book.stock < 1:
            raise DomainError("This book is currently unavailable.")
        if quantity > shop_book.stock:
            raise DomainError(f"Only {shop_book.stock} copies are in stock.")

        with transaction.atomic():
            order = ShopOrder.objects.create(
                order_number=generate_reference(SHOP_ORDER_NUMBER_PREFIX),
                shop=shop,
                user=user,
                shop_book=shop_book,
                quantity=quantity,
                total_price=shop_book.price * quantity,
                detail_address=detail_address,
                customer_notes=customer_notes,
            )

        logger.info(
            "Shop order %s placed by user %s at shop %s",
            order.order_number, user.pk, shop.pk,
        )
        return order

    @staticmethod
    def list_for_customer(user: User, status: str | None = None) -> QuerySet:
        """The caller's own shop orders; admins see all of them."""
        qs = ShopOrder.objects.select_related("shop", "shop_book")
        if not is_admin(user):
            qs = qs.filter(user=user)
        if status:
            qs = qs.filter(status=status)
        return qs.order_by("-created_at")

    @staticmethod
    def list_for_shop(user: User, shop_id: Any, status: str | None = None) -> QuerySet:
        """
        Incoming orders of one shop.

        Raises
        ------
        NotFound
            If the shop does not exist.
        PermissionDenied
            Unless the caller owns the shop or is an admin.
        """
        shop = fetch_or_404(Shop, shop_id)
        if not (is_admin(user) or ShopService.is_shop_owner(user, shop)):
            raise PermissionDenied("Only the shop owner can view this shop's orders.")

        qs = ShopOrder.objects.filter(shop=shop).select_related("shop_book", "user")
        if status:
            qs = qs.filter(status=status)
        return qs.order_by("-created_at")

    @staticmethod
    def get_for(user: User, shop_order_id: Any) -> ShopOrder:
        """Visible to the customer, the shop owner and admins."""
        order = fetch_or_404(ShopOrder, shop_order_id)
        if is_admin(user) or order.user_id == user.pk or order.shop.owner_id == user.pk:
            return order
        raise PermissionDenied("You cannot view this order.")

    @staticmethod
    def update_shop_notes(shop_order_id: Any, actor: User, shop_notes: str) -> ShopOrder:
        """
        Replace the shop-side notes of an order.

        Only the owner of the order's shop may do this.  The status is
        never touched here; status moves are admin transitions.

        Raises
        ------
        NotFound
            If the shop order does not exist.
        PermissionDenied
            If ``actor`` does not own the order's shop.
        """
        order = fetch_or_404(ShopOrder, shop_order_id)
        shop_owner_id = Shop.objects.filter(pk=order.shop_id).values_list("owner_id", flat=True).first()
        require_owner(actor, shop_owner_id, message="Only the shop owner can edit shop notes.")

        order.shop_notes = shop_notes
        order.save(update_fields=["shop_notes", "updated_at"])
        logger.info("Shop notes updated on %s by user %s", order.order_number, actor.pk)
        return order
