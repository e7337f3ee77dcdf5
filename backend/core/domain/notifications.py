"""
core.domain.notifications — Notification dispatch for every ledger event.

Centralises notification creation so every app uses one consistent
entry-point rather than directly constructing ``Notification`` objects.

Design decisions
----------------
* **One event shape** — orders, shop orders, demands and unlock payments
  all publish a ``StatusChangedEvent`` (``PaymentResolvedEvent`` is the
  payment-flavoured variant).  ``dispatch_status_change`` is the single consumer;
  there is no per-kind notification code in the apps.
* **Best-effort** — notification writes run in their own savepoint and
  never roll back or fail the ledger write that triggered them.  Errors
  are logged.
* **Broadcasts are per-recipient** — each recipient row is written
  independently; a failed write for one recipient does not stop the rest.
* **Admin mailbox side-channel** — ``alert_admin`` stores an
  ``AdminAlert`` and queues the email through
  ``core.domain.tasks.fire_and_forget``.  Email failures are logged and
  swallowed; they never reach the caller.

Usage::

    from core.domain.notifications import NotificationDispatcher, StatusChangedEvent

    NotificationDispatcher.dispatch_status_change(
        StatusChangedEvent(
            reference_type="order",
            entity_id=order.pk,
            owner_user_id=order.user_id,
            new_status="confirmed",
        )
    )
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from django.apps import apps
from django.conf import settings
from django.core.mail import send_mail
from django.db import DatabaseError, transaction

from core.constants import ADMIN_ALERT_SUBJECT_PREFIX
from core.domain.audience import AudienceResolver, BroadcastTarget
from core.domain.tasks import fire_and_forget
from core.models import (
    AdminAlert,
    BroadcastLog,
    Notification,
    NotificationType,
    ReferenceType,
)

if TYPE_CHECKING:
    from accounts.models import User

logger = logging.getLogger(__name__)


# ── Events ──────────────────────────────────────────────────────────

@dataclass(frozen=True, kw_only=True)
class StatusChangedEvent:
    """A ledger row moved to ``new_status``; its owner should be told."""

    reference_type: str
    entity_id: int
    owner_user_id: int
    new_status: str
    title: str | None = None
    message: str | None = None


@dataclass(frozen=True, kw_only=True)
class PaymentResolvedEvent(StatusChangedEvent):
    """An unlock payment (or its refund request) was decided by an admin."""

    reference_type: str = ReferenceType.PAYMENT


# ── reference_type → (notification_type, title, message prefix) ────
_EVENT_TEMPLATES: dict[str, tuple[str, str, str]] = {
    ReferenceType.ORDER: (
        NotificationType.ORDER_UPDATE,
        "Order Status Updated",
        "Your order status has been updated to",
    ),
    ReferenceType.SHOP_ORDER: (
        NotificationType.ORDER_UPDATE,
        "Nilkhet Order Status Updated",
        "Your Nilkhet order status has been updated to",
    ),
    ReferenceType.DEMAND: (
        NotificationType.DEMAND_UPDATE,
        "Book Demand Status Updated",
        "Your book demand status has been updated to",
    ),
    ReferenceType.PAYMENT: (
        NotificationType.PAYMENT_UPDATE,
        "Payment Status Updated",
        "Your payment status has been updated to",
    ),
}


def humanize_status(status: str) -> str:
    """``"out_for_delivery"`` → ``"OUT FOR DELIVERY"``."""
    return status.replace("_", " ").upper()


class NotificationDispatcher:
    """
    Stateless helper for creating ``Notification`` / ``AdminAlert`` records.

    All methods are classmethods — no instance state is needed.
    """

    @classmethod
    def dispatch_targeted(
        cls,
        recipient_id: int,
        title: str,
        message: str,
        notification_type: str = NotificationType.INFO,
        reference_type: str | None = None,
        reference_id: int | str | None = None,
    ) -> Notification:
        """
        Write exactly one notification for ``recipient_id``.

        The recipient's profile is linked when it exists; a missing
        profile is logged and the notification is written with a null
        profile reference.
        """
        Profile = apps.get_model("accounts", "Profile")
        profile_id = (
            Profile.objects
            .filter(user_id=recipient_id)
            .values_list("id", flat=True)
            .first()
        )
        if profile_id is None:
            logger.info(
                "No profile for user %s; notification written without profile link",
                recipient_id,
            )

        return Notification.objects.create(
            recipient_id=recipient_id,
            profile_id=profile_id,
            title=title,
            message=message,
            notification_type=notification_type,
            reference_type=reference_type,
            reference_id=str(reference_id) if reference_id is not None else None,
        )

    @classmethod
    def dispatch_status_change(cls, event: StatusChangedEvent) -> Notification | None:
        """
        Notify the owner of a ledger row about its new status.

        Returns the notification, or ``None`` if the write failed (the
        failure is logged; the caller's ledger write is unaffected).
        """
        notification_type, default_title, prefix = _EVENT_TEMPLATES.get(
            event.reference_type,
            (NotificationType.INFO, "Status Updated", "Status has been updated to"),
        )
        title = event.title or default_title
        message = event.message or f"{prefix}: {humanize_status(event.new_status)}"

        try:
            with transaction.atomic():
                notification = cls.dispatch_targeted(
                    recipient_id=event.owner_user_id,
                    title=title,
                    message=message,
                    notification_type=notification_type,
                    reference_type=event.reference_type,
                    reference_id=event.entity_id,
                )
        except DatabaseError:
            logger.exception(
                "Failed to notify user %s about %s #%s → %s",
                event.owner_user_id, event.reference_type,
                event.entity_id, event.new_status,
            )
            return None

        logger.info(
            "Notified user %s: %s #%s → %s",
            event.owner_user_id, event.reference_type,
            event.entity_id, event.new_status,
        )
        return notification

    @classmethod
    def dispatch_broadcast(
        cls,
        target: BroadcastTarget,
        title: str,
        message: str,
        sent_by: User | None = None,
    ) -> int:
        """
        Resolve the audience and write one notification per recipient.

        Returns:
            The number of notifications actually written.  An empty
            audience is not an error and yields ``0``.
        """
        User = apps.get_model(settings.AUTH_USER_MODEL)
        Profile = apps.get_model("accounts", "Profile")

        recipient_ids = AudienceResolver.resolve(target)
        # Ids that do not belong to a user simply receive nothing.
        existing_ids = set(
            User.objects.filter(pk__in=recipient_ids).values_list("pk", flat=True)
        )
        profile_map = dict(
            Profile.objects
            .filter(user_id__in=existing_ids)
            .values_list("user_id", "id")
        )

        sent_count = 0
        for user_id in existing_ids:
            try:
                with transaction.atomic():
                    Notification.objects.create(
                        recipient_id=user_id,
                        profile_id=profile_map.get(user_id),
                        title=title,
                        message=message,
                        notification_type=NotificationType.BROADCAST,
                    )
            except DatabaseError:
                logger.exception("Broadcast write failed for user %s", user_id)
                continue
            sent_count += 1

        BroadcastLog.objects.create(
            title=title,
            message=message,
            target_kind=target.kind,
            target_institution_id=target.institution_id,
            target_department_id=target.department_id,
            target_shop_id=target.shop_id,
            target_user_id=target.user_id,
            sent_count=sent_count,
            sent_by=sent_by,
        )

        logger.info(
            "Broadcast '%s' sent to %d of %d resolved recipient(s) by %s",
            title, sent_count, len(recipient_ids), sent_by,
        )
        return sent_count

    @classmethod
    def alert_admin(
        cls,
        alert_type: str,
        title: str,
        message: str,
        reference_id: int | str | None = None,
    ) -> AdminAlert | None:
        """
        Store an admin-inbox alert and queue the mailbox email.

        Best-effort end to end: a failed insert is logged and ``None`` is
        returned; the email is sent after commit and its failure only
        leaves ``email_sent`` false.
        """
        try:
            with transaction.atomic():
                alert = AdminAlert.objects.create(
                    alert_type=alert_type,
                    title=title,
                    message=message,
                    reference_id=str(reference_id) if reference_id is not None else None,
                )
        except DatabaseError:
            logger.exception("Failed to store admin alert [%s] %s", alert_type, title)
            return None

        fire_and_forget(send_admin_alert_email, alert.pk)
        return alert


def send_admin_alert_email(alert_id: int) -> None:
    """Mail one ``AdminAlert`` to the fixed admin mailbox."""
    recipient = getattr(settings, "ADMIN_ALERT_EMAIL", "")
    if not recipient:
        logger.info("ADMIN_ALERT_EMAIL not configured; alert %s not mailed", alert_id)
        return

    alert = AdminAlert.objects.get(pk=alert_id)
    created = alert.created_at.strftime("%Y-%m-%d %H:%M")
    body = (
        f"{alert.message}\n\n"
        f"Type: {alert.alert_type}\n"
        f"Time: {created}\n\n"
        "This is an automated notification from Boi Rajjo."
    )
    html = (
        f"<h2>{alert.title}</h2><p>{alert.message}</p>"
        f"<p><small>Type: {alert.alert_type}</small></p>"
        f"<p><small>Time: {created}</small></p><hr>"
        "<p><small>This is an automated notification from Boi Rajjo.</small></p>"
    )
    send_mail(
        subject=f"{ADMIN_ALERT_SUBJECT_PREFIX} {alert.title}",
        message=body,
        from_email=None,
        recipient_list=[recipient],
        html_message=html,
        fail_silently=False,
    )
    AdminAlert.objects.filter(pk=alert_id).update(email_sent=True)
    logger.info("Admin alert %s mailed to %s", alert_id, recipient)
