"""
core.domain.exceptions — Domain-specific exception hierarchy.

These exceptions represent business-rule violations inside service layers.
They are deliberately **not** DRF exceptions so that the domain layer stays
framework-agnostic.  The global DRF exception handler in
``core.domain.exception_handler`` maps them to HTTP responses.

Every exception carries a stable machine-readable ``code`` so the calling
UI can render an exact message without parsing ``detail``.

Mapping cheatsheet
------------------
┌─────────────────────────┬───────────────────────────┬──────┐
│ Domain Exception        │ code                      │ HTTP │
├─────────────────────────┼───────────────────────────┼──────┤
│ DomainError             │ validation_error          │ 400  │
│ PermissionDenied        │ permission_denied         │ 403  │
│ NotFound                │ not_found                 │ 404  │
│ Conflict                │ conflict                  │ 409  │
│ InvalidTransition       │ invalid_transition        │ 409  │
│ DuplicateUnlock         │ duplicate_unlock          │ 409  │
│ AlreadyResolved         │ already_resolved          │ 409  │
│ RefundNotEligible       │ refund_not_eligible       │ 409  │
│ RefundAlreadyPending    │ refund_already_pending    │ 409  │
│ RefundAlreadyResolved   │ refund_already_resolved   │ 409  │
└─────────────────────────┴───────────────────────────┴──────┘

Recommended usage inside a service::

    from core.domain.exceptions import InvalidTransition

    if new_status not in TRANSITIONS[kind][current_status]:
        raise InvalidTransition(current=current_status, target=new_status)
"""

from __future__ import annotations


class DomainError(Exception):
    """
    Base class for all domain / business-rule errors.

    Catch this at the view boundary and convert to a 400 Bad Request.
    """

    code = "validation_error"

    def __init__(self, message: str = "A business rule was violated.") -> None:
        self.message = message
        super().__init__(self.message)


class PermissionDenied(DomainError):
    """
    The acting user does not have the role required for this operation.

    Raised before any ledger read.  Maps to HTTP 403.
    """

    code = "permission_denied"

    def __init__(self, message: str = "You do not have permission to perform this action.") -> None:
        super().__init__(message)


class NotFound(DomainError):
    """
    The requested resource does not exist (or is not visible to the
    requesting user).

    Maps to HTTP 404.
    """

    code = "not_found"

    def __init__(self, message: str = "The requested resource was not found.") -> None:
        super().__init__(message)


class Conflict(DomainError):
    """
    The operation conflicts with the current state of the resource.

    Typical usage: duplicate creation attempt, lost compare-and-swap.
    Maps to HTTP 409.
    """

    code = "conflict"

    def __init__(self, message: str = "The operation conflicts with the current state.") -> None:
        super().__init__(message)


class InvalidTransition(Conflict):
    """
    A state-machine transition that is not allowed from the current status.

    Example::

        raise InvalidTransition(
            current="pending",
            target="delivered",
            reason="Order must be confirmed first.",
        )
    """

    code = "invalid_transition"

    def __init__(
        self,
        message: str | None = None,
        *,
        current: str | None = None,
        target: str | None = None,
        reason: str | None = None,
    ) -> None:
        if message is None:
            parts = ["Invalid state transition"]
            if current and target:
                parts.append(f"from '{current}' to '{target}'")
            if reason:
                parts.append(f"({reason})")
            message = " ".join(parts) + "."
        super().__init__(message)
        self.current = current
        self.target = target
        self.reason = reason


class DuplicateUnlock(Conflict):
    """A pending or approved unlock already exists for this user and book."""

    code = "duplicate_unlock"

    def __init__(self, message: str = "You already have an active unlock request for this book.") -> None:
        super().__init__(message)


class AlreadyResolved(Conflict):
    """
    The payment has already been approved or rejected.

    Callers retrying a resolution after an unacknowledged success should
    treat this as "already done".
    """

    code = "already_resolved"

    def __init__(self, message: str = "This payment has already been resolved.") -> None:
        super().__init__(message)


class RefundNotEligible(Conflict):
    """The payment is not in a state where a refund can be requested or decided."""

    code = "refund_not_eligible"

    def __init__(self, message: str = "This payment is not eligible for a refund.") -> None:
        super().__init__(message)


class RefundAlreadyPending(Conflict):
    """A refund was already requested and is awaiting an admin decision."""

    code = "refund_already_pending"

    def __init__(self, message: str = "A refund request is already pending for this payment.") -> None:
        super().__init__(message)


class RefundAlreadyResolved(Conflict):
    """The refund request has already been approved or denied."""

    code = "refund_already_resolved"

    def __init__(self, message: str = "This refund request has already been resolved.") -> None:
        super().__init__(message)
