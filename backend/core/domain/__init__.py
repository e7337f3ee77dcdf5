"""
core.domain — Shared domain utilities for cross-app service layers.

Modules
-------
exceptions         Domain-specific exceptions that map cleanly to HTTP responses.
exception_handler  DRF exception handler rendering domain errors.
access             Role checks performed before any ledger read.
transactions       Lookup and compare-and-swap helpers for ledger rows.
references         Human-facing reference numbers (ORD-, TXN-, ...).
audience           Broadcast target → recipient id resolution.
notifications      Notification / admin-alert dispatch.
tasks              Fire-and-forget side-channel jobs.

Usage from any app::

    from core.domain.exceptions import DomainError, InvalidTransition
    from core.domain.notifications import NotificationDispatcher
    from core.domain.transactions import compare_and_swap
    from core.domain.access import require_role
"""
