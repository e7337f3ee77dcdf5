"""
Unlocks app service layer — the contact-unlock ledger guard.

A buyer pays a small flat fee by bKash to see a seller's contact
details.  Nothing is settled by a gateway: the buyer attests the
transfer, an admin verifies it by hand and approves or rejects it.

Guarantees
----------
* At most one *active* (``pending`` or ``approved``) payment exists per
  ``(user, book)``.  The service checks before inserting and the
  partial unique constraint on ``UnlockPayment`` catches the concurrent
  double-submission the check cannot see.
* A payment is resolved exactly once.  Resolution is a compare-and-swap
  on ``status = 'pending'``; the losing or retried call gets
  ``AlreadyResolved``.
* A refund is requested at most once, only for an approved payment, and
  decided at most once.  A decided refund is terminal.

Every admin operation checks the actor's role before reading the ledger.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, TYPE_CHECKING

from django.conf import settings
from django.db import IntegrityError, transaction
from django.db.models import QuerySet
from django.utils import timezone

from books.models import Book
from core.constants import (
    BKASH_NUMBER_MIN_LENGTH,
    TRANSACTION_NUMBER_PREFIX,
    UNLOCK_FEE_HIGH,
    UNLOCK_FEE_LOW,
    UNLOCK_FEE_THRESHOLD,
)
from core.domain.access import ADMIN, is_admin, require_owner, require_role
from core.domain.exceptions import (
    AlreadyResolved,
    DomainError,
    DuplicateUnlock,
    PermissionDenied,
    RefundAlreadyPending,
    RefundAlreadyResolved,
    RefundNotEligible,
)
from core.domain.notifications import NotificationDispatcher, PaymentResolvedEvent
from core.domain.references import generate_reference
from core.domain.transactions import compare_and_swap, fetch_or_404

from .models import ACTIVE_PAYMENT_STATUSES, PaymentStatus, UnlockPayment

if TYPE_CHECKING:
    from accounts.models import User

logger = logging.getLogger(__name__)

REFUND_APPROVED = "refund_approved"
REFUND_DENIED = "refund_denied"


@dataclass(frozen=True)
class SellerContact:
    book_id: int
    seller_name: str
    phone_number: str
    whatsapp_number: str


class UnlockLedgerService:
    """
    Creation, resolution and refund handling of ``UnlockPayment`` rows.

    All methods are static/classmethods — no instance state is needed.
    """

    # ── Fee schedule ─────────────────────────────────────────────────

    @staticmethod
    def compute_fee(price: int) -> int:
        """
        Unlock fee for a book listed at ``price`` BDT.

        ``20`` when the price is 500 or more, ``10`` otherwise.  The
        boundary is inclusive: a 500 BDT book costs 20.
        """
        return UNLOCK_FEE_HIGH if price >= UNLOCK_FEE_THRESHOLD else UNLOCK_FEE_LOW

    @classmethod
    def quote(cls, book_id: Any) -> dict[str, Any]:
        """Fee and payee number the buyer needs before paying."""
        book = fetch_or_404(Book, book_id)
        return {
            "book_id": book.pk,
            "amount": cls.compute_fee(book.price),
            "payee_bkash_number": settings.UNLOCK_PAYEE_BKASH_NUMBER,
        }

    # ── Creation ─────────────────────────────────────────────────────

    @staticmethod
    def _has_active_unlock(user_id: Any, book_id: Any) -> bool:
        return UnlockPayment.objects.filter(
            user_id=user_id,
            book_id=book_id,
            status__in=ACTIVE_PAYMENT_STATUSES,
        ).exists()

    @classmethod
    def create_unlock(cls, user: User, book_id: Any, bkash_number: str) -> UnlockPayment:
        """
        Record a buyer's payment attestation in ``pending``.

        Parameters
        ----------
        user : User
            The buyer.
        book_id : int
            The listing whose seller contact is being unlocked.
        bkash_number : str
            The wallet number the buyer paid from (at least 11 digits).

        Returns
        -------
        UnlockPayment
            The new pending payment; ``amount`` is derived from the
            book's price.

        Raises
        ------
        DomainError
            If ``bkash_number`` is malformed.
        NotFound
            If the book does not exist.
        DuplicateUnlock
            If the user already holds a pending or approved unlock for
            this book, including one created concurrently.
        """
        bkash_number = (bkash_number or "").strip()
        if not bkash_number.isdigit() or len(bkash_number) < BKASH_NUMBER_MIN_LENGTH:
            raise DomainError(
                f"bKash number must be at least {BKASH_NUMBER_MIN_LENGTH} digits."
            )

        book = fetch_or_404(Book, book_id)

        if cls._has_active_unlock(user.pk, book.pk):
            raise DuplicateUnlock()

        try:
            with transaction.atomic():
                payment = UnlockPayment.objects.create(
                    transaction_number=generate_reference(TRANSACTION_NUMBER_PREFIX),
                    user=user,
                    book=book,
                    amount=cls.compute_fee(book.price),
                    bkash_number=bkash_number,
                )
        except IntegrityError:
            if cls._has_active_unlock(user.pk, book.pk):
                logger.info(
                    "Concurrent duplicate unlock rejected for user %s book %s",
                    user.pk, book.pk,
                )
                raise DuplicateUnlock()
            raise

        logger.info(
            "Unlock %s created: user %s, book %s, amount %s",
            payment.transaction_number, user.pk, book.pk, payment.amount,
        )
        return payment

    # ── Resolution ───────────────────────────────────────────────────

    @staticmethod
    def resolve_payment(
        payment_id: Any,
        decision: str,
        actor: User,
        notes: str = "",
    ) -> UnlockPayment:
        """
        Approve or reject a pending payment.  Admin only.

        Raises
        ------
        PermissionDenied
            If ``actor`` is not an admin (checked before any read).
        DomainError
            If ``decision`` is neither ``approved`` nor ``rejected``.
        NotFound
            If the payment does not exist.
        AlreadyResolved
            If the payment is no longer pending.  A retry after a
            successful but unacknowledged call lands here too and should
            be read as "already done".
        """
        require_role(actor, ADMIN, message="Only administrators can resolve payments.")

        if decision not in (PaymentStatus.APPROVED, PaymentStatus.REJECTED):
            raise DomainError("Decision must be 'approved' or 'rejected'.")

        payment = fetch_or_404(UnlockPayment, payment_id)
        if payment.status != PaymentStatus.PENDING:
            raise AlreadyResolved()

        with transaction.atomic():
            swapped = compare_and_swap(
                UnlockPayment,
                pk=payment.pk,
                expected={"status": PaymentStatus.PENDING},
                changes={
                    "status": decision,
                    "resolved_at": timezone.now(),
                    "admin_notes": notes or None,
                },
            )
            if not swapped:
                raise AlreadyResolved()

            event = PaymentResolvedEvent(
                entity_id=payment.pk,
                owner_user_id=payment.user_id,
                new_status=decision,
            )
            transaction.on_commit(
                lambda: NotificationDispatcher.dispatch_status_change(event),
                robust=True,
            )

        payment.refresh_from_db()
        logger.info(
            "Unlock %s %s by admin %s",
            payment.transaction_number, decision, actor.pk,
        )
        return payment

    # ── Refunds ──────────────────────────────────────────────────────

    @staticmethod
    def _refund_request_error(payment: UnlockPayment) -> Exception:
        """Error explaining why ``payment`` cannot take a refund request."""
        if payment.refund_requested:
            if payment.refund_approved is None:
                return RefundAlreadyPending()
            return RefundAlreadyResolved()
        return RefundNotEligible(
            "Only approved payments are eligible for a refund."
        )

    @classmethod
    def request_refund(cls, payment_id: Any, actor: User) -> UnlockPayment:
        """
        Ask for the fee back on an approved payment.  Payment owner only.

        Raises
        ------
        NotFound
            If the payment does not exist.
        PermissionDenied
            If ``actor`` does not own the payment.
        RefundNotEligible
            If the payment is not approved.
        RefundAlreadyPending
            If a refund was already requested and is undecided.
        RefundAlreadyResolved
            If the refund was already decided.
        """
        payment = fetch_or_404(UnlockPayment, payment_id)
        require_owner(actor, payment.user_id, message="Only the payer can request a refund.")

        if payment.refund_requested or payment.status != PaymentStatus.APPROVED:
            raise cls._refund_request_error(payment)

        swapped = compare_and_swap(
            UnlockPayment,
            pk=payment.pk,
            expected={"status": PaymentStatus.APPROVED, "refund_requested": False},
            changes={"refund_requested": True, "refund_requested_at": timezone.now()},
        )
        payment.refresh_from_db()
        if not swapped:
            raise cls._refund_request_error(payment)

        logger.info("Refund requested on %s by user %s", payment.transaction_number, actor.pk)
        return payment

    @staticmethod
    def resolve_refund(
        payment_id: Any,
        approved: bool,
        actor: User,
        notes: str = "",
    ) -> UnlockPayment:
        """
        Approve or deny a pending refund request.  Admin only.

        Raises
        ------
        PermissionDenied
            If ``actor`` is not an admin (checked before any read).
        NotFound
            If the payment does not exist.
        RefundNotEligible
            If no refund was requested on this payment.
        RefundAlreadyResolved
            If the refund has already been decided.
        """
        require_role(actor, ADMIN, message="Only administrators can resolve refunds.")

        payment = fetch_or_404(UnlockPayment, payment_id)
        if not payment.refund_requested:
            raise RefundNotEligible("No refund has been requested for this payment.")
        if payment.refund_approved is not None:
            raise RefundAlreadyResolved()

        with transaction.atomic():
            swapped = compare_and_swap(
                UnlockPayment,
                pk=payment.pk,
                expected={"refund_requested": True, "refund_approved": None},
                changes={
                    "refund_approved": bool(approved),
                    "refund_approved_at": timezone.now(),
                    "refund_notes": notes or None,
                },
            )
            if not swapped:
                raise RefundAlreadyResolved()

            event = PaymentResolvedEvent(
                entity_id=payment.pk,
                owner_user_id=payment.user_id,
                new_status=REFUND_APPROVED if approved else REFUND_DENIED,
                title="Refund Request Updated",
            )
            transaction.on_commit(
                lambda: NotificationDispatcher.dispatch_status_change(event),
                robust=True,
            )

        payment.refresh_from_db()
        logger.info(
            "Refund on %s %s by admin %s",
            payment.transaction_number,
            "approved" if approved else "denied",
            actor.pk,
        )
        return payment

    # ── Queries ──────────────────────────────────────────────────────

    @staticmethod
    def list_for(
        user: User,
        *,
        status: str | None = None,
        refund_pending: bool = False,
    ) -> QuerySet:
        """
        The caller's own unlocks; admins see all of them and may narrow
        the list to open refund requests.
        """
        qs = UnlockPayment.objects.select_related("book", "user")
        if not is_admin(user):
            qs = qs.filter(user=user)
        if status:
            qs = qs.filter(status=status)
        if refund_pending:
            qs = qs.filter(refund_requested=True, refund_approved__isnull=True)
        return qs.order_by("-created_at")

    @staticmethod
    def get_for(user: User, payment_id: Any) -> UnlockPayment:
        filters = {} if is_admin(user) else {"user": user}
        return fetch_or_404(UnlockPayment, payment_id, **filters)

    @staticmethod
    def contact_for_book(user: User, book_id: Any) -> SellerContact:
        """
        The seller's contact details for ``book_id``.

        Visible to the seller, to admins and to any user holding an
        approved unlock for the book.

        Raises
        ------
        NotFound
            If the book does not exist.
        PermissionDenied
            If the caller has not unlocked this book.
        """
        book = fetch_or_404(Book, book_id)

        unlocked = UnlockPayment.objects.filter(
            user=user,
            book=book,
            status=PaymentStatus.APPROVED,
        ).exists()
        if not (unlocked or is_admin(user) or book.seller_id == user.pk):
            raise PermissionDenied("Unlock this book's contact details first.")

        seller = book.seller
        profile = getattr(seller, "profile", None)
        return SellerContact(
            book_id=book.pk,
            seller_name=seller.display_name,
            phone_number=profile.phone_number if profile else seller.phone_number,
            whatsapp_number=profile.whatsapp_number if profile else "",
        )
