"""
Orders app service layer.

Contains the status workflow engine shared by every statusful ledger
entity (``Order``, ``ShopOrder``, ``Demand``) plus the creation and
listing services of the two main-marketplace entities.

Workflow model
--------------
Each entity kind has a closed status enum and an explicit adjacency
map.  Status moves after creation are admin actions only; the owner
performs the implicit creation transition (entry state) when placing the
order or demand.

::

    order / shop_order
        pending ─► confirmed ─► processing ─► out_for_delivery ─► delivered
           │           │            │                │
           └───────────┴────────────┴────────────────┴──► cancelled

    demand
        requested ─► processing ─► out_for_delivery ─► delivered
            │            │
            └────────────┴──► cancelled

``delivered`` and ``cancelled`` are terminal.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, TYPE_CHECKING

from django.apps import apps
from django.db import models, transaction
from django.db.models import QuerySet

from books.models import Book, BookStatus
from core.constants import DEMAND_NUMBER_PREFIX, ORDER_NUMBER_PREFIX
from core.domain.access import ADMIN, is_admin, require_role
from core.domain.exceptions import Conflict, DomainError, InvalidTransition
from core.domain.notifications import NotificationDispatcher, StatusChangedEvent
from core.domain.references import generate_reference
from core.domain.transactions import compare_and_swap, fetch_or_404
from core.models import AdminAlertType

from .models import (
    Demand,
    DemandStatus,
    EntityKind,
    Order,
    OrderStatus,
    StatusTransitionLog,
)

if TYPE_CHECKING:
    from accounts.models import User

logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════════
#  Transition tables
# ═══════════════════════════════════════════════════════════════════

ORDER_TRANSITIONS: dict[str, frozenset[str]] = {
    OrderStatus.PENDING: frozenset({OrderStatus.CONFIRMED, OrderStatus.CANCELLED}),
    OrderStatus.CONFIRMED: frozenset({OrderStatus.PROCESSING, OrderStatus.CANCELLED}),
    OrderStatus.PROCESSING: frozenset({OrderStatus.OUT_FOR_DELIVERY, OrderStatus.CANCELLED}),
    OrderStatus.OUT_FOR_DELIVERY: frozenset({OrderStatus.DELIVERED, OrderStatus.CANCELLED}),
    OrderStatus.DELIVERED: frozenset(),
    OrderStatus.CANCELLED: frozenset(),
}

DEMAND_TRANSITIONS: dict[str, frozenset[str]] = {
    DemandStatus.REQUESTED: frozenset({DemandStatus.PROCESSING, DemandStatus.CANCELLED}),
    DemandStatus.PROCESSING: frozenset({DemandStatus.OUT_FOR_DELIVERY, DemandStatus.CANCELLED}),
    DemandStatus.OUT_FOR_DELIVERY: frozenset({DemandStatus.DELIVERED}),
    DemandStatus.DELIVERED: frozenset(),
    DemandStatus.CANCELLED: frozenset(),
}


@dataclass(frozen=True)
class EntityWorkflow:
    """Where an entity kind lives and which moves it allows."""

    model_label: str
    statuses: type[models.TextChoices]
    transitions: dict[str, frozenset[str]]

    @property
    def model(self) -> type[models.Model]:
        return apps.get_model(self.model_label)


WORKFLOWS: dict[str, EntityWorkflow] = {
    EntityKind.ORDER: EntityWorkflow("orders.Order", OrderStatus, ORDER_TRANSITIONS),
    EntityKind.SHOP_ORDER: EntityWorkflow("shops.ShopOrder", OrderStatus, ORDER_TRANSITIONS),
    EntityKind.DEMAND: EntityWorkflow("orders.Demand", DemandStatus, DEMAND_TRANSITIONS),
}


@dataclass(frozen=True)
class TransitionResult:
    entity: models.Model
    previous_status: str
    status: str
    changed: bool


# ═══════════════════════════════════════════════════════════════════
#  Status Workflow Service
# ═══════════════════════════════════════════════════════════════════


class StatusWorkflowService:
    """
    **The central state-machine gateway** for orders, shop orders and
    demands.

    Design Pattern: State Machine + Compare-and-Swap
    -------------------------------------------------
    The engine never trusts a cached copy of an entity.  It re-reads the
    row, validates the move against the adjacency map, and writes with a
    conditional update keyed on the status it read.  When a concurrent
    writer wins, the engine re-reads and re-evaluates exactly once.
    """

    @staticmethod
    def allowed_targets(entity_kind: str, current_status: str) -> frozenset[str]:
        workflow = WORKFLOWS.get(entity_kind)
        if workflow is None:
            return frozenset()
        return workflow.transitions.get(current_status, frozenset())

    @classmethod
    def transition(
        cls,
        entity_kind: str,
        entity_id: Any,
        requested_status: str,
        actor: User,
        notes: str = "",
    ) -> TransitionResult:
        """
        Move one entity to ``requested_status``.

        Parameters
        ----------
        entity_kind : str
            ``order``, ``shop_order`` or ``demand``.
        entity_id : int
            Primary key of the entity.
        requested_status : str
            Target status from the kind's enum.
        actor : User
            Must be an admin.  Checked before anything is read.
        notes : str
            Optional admin notes stored on the entity and in the log.
            Ignored on a no-op.

        Returns
        -------
        TransitionResult
            ``changed`` is ``False`` when the entity already was in
            ``requested_status`` (idempotent retry); nothing is written.

        Raises
        ------
        PermissionDenied
            If ``actor`` is not an admin.
        DomainError
            If ``entity_kind`` is unknown.
        NotFound
            If the entity does not exist.
        InvalidTransition
            If the target is not adjacent to the current status, or not
            a status of this kind at all.
        Conflict
            If the entity kept changing underneath the request.

        Notes
        -----
        The ``StatusChangedEvent`` is dispatched after commit.  A failing
        dispatch is logged and never undoes the status write.
        """
        require_role(actor, ADMIN, message="Only administrators can change statuses.")

        workflow = WORKFLOWS.get(entity_kind)
        if workflow is None:
            raise DomainError(f"Unknown entity kind '{entity_kind}'.")
        if requested_status not in workflow.statuses.values:
            raise InvalidTransition(
                target=requested_status,
                reason=f"'{requested_status}' is not a {entity_kind} status",
            )

        model = workflow.model
        notes = (notes or "").strip()

        with transaction.atomic():
            entity = fetch_or_404(model, entity_id)

            for _ in range(2):
                current = entity.status

                if current == requested_status:
                    logger.info(
                        "%s #%s already %s; no-op", entity_kind, entity.pk, current,
                    )
                    return TransitionResult(entity, current, current, changed=False)

                if requested_status not in workflow.transitions.get(current, frozenset()):
                    raise InvalidTransition(current=current, target=requested_status)

                changes: dict[str, Any] = {"status": requested_status}
                if notes:
                    changes["admin_notes"] = notes

                if compare_and_swap(
                    model,
                    pk=entity.pk,
                    expected={"status": current},
                    changes=changes,
                ):
                    break

                # A concurrent writer moved the row; evaluate against its state.
                entity = fetch_or_404(model, entity_id)
            else:
                raise Conflict(
                    f"{entity_kind} #{entity_id} was modified concurrently; retry."
                )

            StatusTransitionLog.objects.create(
                entity_kind=entity_kind,
                entity_id=entity.pk,
                from_status=current,
                to_status=requested_status,
                changed_by=actor,
                notes=notes,
            )

            event = StatusChangedEvent(
                reference_type=entity_kind,
                entity_id=entity.pk,
                owner_user_id=entity.user_id,
                new_status=requested_status,
            )
            transaction.on_commit(
                lambda: NotificationDispatcher.dispatch_status_change(event),
                robust=True,
            )

        entity.refresh_from_db()
        logger.info(
            "%s #%s: %s → %s by user %s",
            entity_kind, entity.pk, current, requested_status, actor.pk,
        )
        return TransitionResult(entity, current, requested_status, changed=True)

    @staticmethod
    def history(entity_kind: str, entity_id: Any) -> QuerySet:
        return StatusTransitionLog.objects.filter(
            entity_kind=entity_kind,
            entity_id=entity_id,
        ).select_related("changed_by")


# ═══════════════════════════════════════════════════════════════════
#  Order Service
# ═══════════════════════════════════════════════════════════════════


class OrderService:
    """Cash-on-delivery orders for listed books."""

    @staticmethod
    def place_order(
        user: User,
        book_id: Any,
        quantity: int = 1,
        detail_address: str = "",
    ) -> Order:
        """
        Create an order in ``pending``.

        Raises
        ------
        NotFound
            If the book does not exist.
        DomainError
            If the book is no longer available or ``quantity`` < 1.
        """
        if quantity < 1:
            raise DomainError("Quantity must be at least 1.")

        book = fetch_or_404(Book, book_id)
        if book.status != BookStatus.AVAILABLE:
            raise DomainError("This book is no longer available.")

        with transaction.atomic():
            order = Order.objects.create(
                order_number=generate_reference(ORDER_NUMBER_PREFIX),
                user=user,
                book=book,
                quantity=quantity,
                total_price=book.price * quantity,
                detail_address=detail_address,
            )
            NotificationDispatcher.alert_admin(
                alert_type=AdminAlertType.ORDER,
                title="New Order Received",
                message=f"New order placed by {user.display_name}",
                reference_id=order.pk,
            )

        logger.info("Order %s placed by user %s for book %s", order.order_number, user.pk, book.pk)
        return order

    @staticmethod
    def get_for(user: User, order_id: Any) -> Order:
        """Raises ``NotFound`` for orders the caller may not see."""
        filters = {} if is_admin(user) else {"user": user}
        return fetch_or_404(Order, order_id, **filters)

    @staticmethod
    def list_for(user: User, status: str | None = None) -> QuerySet:
        """Own orders for regular users, every order for admins."""
        qs = Order.objects.select_related("book", "user")
        if not is_admin(user):
            qs = qs.filter(user=user)
        if status:
            qs = qs.filter(status=status)
        return qs.order_by("-created_at")


# ═══════════════════════════════════════════════════════════════════
#  Demand Service
# ═══════════════════════════════════════════════════════════════════


class DemandService:
    """Requests for books the platform should source."""

    @staticmethod
    def create_demand(
        user: User,
        book_name: str,
        author_name: str = "",
        detail_address: str = "",
    ) -> Demand:
        """Create a demand in ``requested`` and alert the admin inbox."""
        book_name = (book_name or "").strip()
        if not book_name:
            raise DomainError("Book name is required.")

        with transaction.atomic():
            demand = Demand.objects.create(
                demand_number=generate_reference(DEMAND_NUMBER_PREFIX),
                user=user,
                book_name=book_name,
                author_name=(author_name or "").strip(),
                detail_address=detail_address,
            )
            NotificationDispatcher.alert_admin(
                alert_type=AdminAlertType.BOOK_DEMAND,
                title="New Book Demand",
                message=f"{user.display_name} requested: {book_name}",
                reference_id=demand.pk,
            )

        logger.info("Demand %s created by user %s", demand.demand_number, user.pk)
        return demand

    @staticmethod
    def get_for(user: User, demand_id: Any) -> Demand:
        filters = {} if is_admin(user) else {"user": user}
        return fetch_or_404(Demand, demand_id, **filters)

    @staticmethod
    def list_for(user: User, status: str | None = None) -> QuerySet:
        qs = Demand.objects.select_related("user")
        if not is_admin(user):
            qs = qs.filter(user=user)
        if status:
            qs = qs.filter(status=status)
        return qs.order_by("-created_at")
