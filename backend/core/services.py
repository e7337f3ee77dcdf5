"""
Core app services — **Service Layer**.

Contains the recipient-side notification operations, the admin broadcast
entry-point and the public system constants.  Views delegate all
business logic to the service classes defined here, keeping views thin
and ensuring testability.

╔══════════════════════════════════════════════════════════════════════╗
║  CROSS-APP IMPORT RULEBOOK                                         ║
║                                                                    ║
║  1. NEVER import models from other apps at the **module level**.   ║
║     Always import inside the method/function that needs them:      ║
║       from django.apps import apps                                 ║
║       Order = apps.get_model("orders", "Order")                    ║
║                                                                    ║
║  2. When type hints are needed at module level, use                ║
║     ``TYPE_CHECKING``.                                             ║
║                                                                    ║
║  3. Choice/enum classes live in the respective app's ``models.py`` ║
║     alongside the models.  Import them lazily inside methods too.  ║
╚══════════════════════════════════════════════════════════════════════╝
"""

from __future__ import annotations

import logging
from typing import Any, TYPE_CHECKING

from django.conf import settings
from django.db.models import QuerySet

from core.constants import (
    NOTIFICATION_LIST_LIMIT,
    UNLOCK_FEE_HIGH,
    UNLOCK_FEE_LOW,
    UNLOCK_FEE_THRESHOLD,
)
from core.domain.access import ADMIN, require_role
from core.domain.audience import BroadcastTarget
from core.domain.exceptions import DomainError, NotFound
from core.domain.notifications import NotificationDispatcher
from core.models import Notification, TargetKind

if TYPE_CHECKING:
    from accounts.models import User

logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════════
#  Notification Service
# ═══════════════════════════════════════════════════════════════════

class NotificationService:
    """
    Handles listing and marking notifications as read for a given user.

    Every query is scoped to ``self.user``; a notification belonging to
    someone else is indistinguishable from a missing one.
    """

    def __init__(self, user: User) -> None:
        self.user = user

    def _own(self) -> QuerySet:
        return Notification.objects.filter(recipient=self.user)

    def list_notifications(self) -> QuerySet:
        """Return the most recent notifications, newest first."""
        return self._own().order_by("-created_at", "-id")[:NOTIFICATION_LIST_LIMIT]

    def unread_count(self) -> int:
        return self._own().filter(is_read=False).count()

    def mark_as_read(self, notification_id: Any) -> Notification:
        """
        Mark a single notification as read.

        Raises:
            NotFound: If the notification does not exist or belongs to
                      another user.
        """
        try:
            notification = self._own().get(pk=notification_id)
        except (Notification.DoesNotExist, ValueError, TypeError):
            raise NotFound(f"Notification with pk={notification_id} does not exist.")

        if not notification.is_read:
            notification.is_read = True
            notification.save(update_fields=["is_read"])
        return notification

    def mark_all_as_read(self) -> int:
        """Mark every unread notification as read; return how many changed."""
        return self._own().filter(is_read=False).update(is_read=True)


# ═══════════════════════════════════════════════════════════════════
#  Broadcast Service
# ═══════════════════════════════════════════════════════════════════

class BroadcastService:
    """
    Admin entry-point for sending a message to a resolved audience.

    Audience resolution and per-recipient delivery live in
    ``core.domain``; this service only authorises and validates.
    """

    # Target kind → field that must accompany it.
    REQUIRED_TARGET_FIELD: dict[str, str] = {
        TargetKind.INSTITUTION: "institution_id",
        TargetKind.DEPARTMENT: "department_id",
        TargetKind.SHOP: "shop_id",
        TargetKind.USER: "user_id",
    }

    @classmethod
    def send(
        cls,
        actor: User,
        target: BroadcastTarget,
        title: str,
        message: str,
    ) -> int:
        """
        Broadcast a notification.

        Parameters
        ----------
        actor : User
            The requesting user; must be an admin.
        target : BroadcastTarget
            Audience selector.
        title, message : str
            Notification content, both non-empty.

        Returns
        -------
        int
            Number of notifications written (``0`` for an empty audience).

        Raises
        ------
        PermissionDenied
            If ``actor`` is not an admin.
        DomainError
            If the content is blank or the target id is missing or not positive.
        """
        require_role(actor, ADMIN, message="Only administrators can send broadcasts.")

        if not title.strip() or not message.strip():
            raise DomainError("Broadcast title and message are required.")
        if target.kind not in TargetKind.values:
            raise DomainError(f"Unknown broadcast target '{target.kind}'.")

        required = cls.REQUIRED_TARGET_FIELD.get(target.kind)
        if required:
            target_id = getattr(target, required)
            if target_id is None:
                raise DomainError(f"Target '{target.kind}' requires '{required}'.")
            if target_id < 1:
                raise DomainError(f"'{required}' must be a positive id.")

        return NotificationDispatcher.dispatch_broadcast(
            target=target,
            title=title.strip(),
            message=message.strip(),
            sent_by=actor,
        )


# ════════════════════════════════════════════════════════════════════
#  System Constants Service
# ════════════════════════════════════════════════════════════════════

class SystemConstantsService:
    """
    Gathers all system-wide choice enumerations and the unlock fee
    schedule into a single dict for the frontend.

    This service is **stateless** — it does not depend on the requesting
    user.
    """

    @staticmethod
    def get_constants() -> dict[str, Any]:
        """Return all system constants as a dict."""
        from orders.models import DemandStatus, OrderStatus
        from unlocks.models import PaymentStatus

        to_list = SystemConstantsService._choices_to_list

        return {
            "order_statuses": to_list(OrderStatus),
            "demand_statuses": to_list(DemandStatus),
            "payment_statuses": to_list(PaymentStatus),
            "broadcast_targets": to_list(TargetKind),
            "unlock_fee": {
                "threshold": UNLOCK_FEE_THRESHOLD,
                "low": UNLOCK_FEE_LOW,
                "high": UNLOCK_FEE_HIGH,
            },
            "payee_bkash_number": settings.UNLOCK_PAYEE_BKASH_NUMBER,
        }

    @staticmethod
    def _choices_to_list(
        choices_class: type,
    ) -> list[dict[str, str]]:
        """
        Convert a Django ``TextChoices`` class to a list of
        ``{"value": ..., "label": ...}`` dicts.
        """
        return [
            {"value": str(value), "label": str(label)}
            for value, label in choices_class.choices
        ]
