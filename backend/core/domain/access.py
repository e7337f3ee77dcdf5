"""
core.domain.access — Explicit role checks for admin-gated operations.

Authorization is a capability the service checks itself: every
admin-gated service method receives the acting user and calls
``require_role`` **before** touching the ledger.  Nothing relies on
storage-level row policies, so the services are testable against any
database.

Roles
-----
``user``        Regular marketplace account (owner of its own orders,
                demands and unlock payments).
``admin``       Platform administrator.  Superusers are always admins.
``shop_owner``  Not a stored role — derived per shop from ``Shop.owner``
                and checked by the shops service with ``is_shop_owner``.

Usage in a service::

    from core.domain.access import require_role

    def resolve_payment(payment_id, decision, actor, notes=""):
        require_role(actor, "admin")
        ...
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from core.domain.exceptions import PermissionDenied

if TYPE_CHECKING:
    from accounts.models import User

ADMIN = "admin"
USER = "user"
SHOP_OWNER = "shop_owner"


def get_user_role_name(user: User) -> str | None:
    """
    Return the lowercased role name for a user, or ``None`` for
    anonymous callers.

    Args:
        user: Authenticated User instance (or ``AnonymousUser``).

    Returns:
        ``"admin"``, ``"user"``, or ``None``.
    """
    if user is None or not getattr(user, "is_authenticated", False):
        return None
    if user.is_superuser:
        return ADMIN
    return getattr(user, "role", None) or USER


def is_admin(user: User) -> bool:
    """Shortcut used by querysets that widen visibility for admins."""
    return get_user_role_name(user) == ADMIN


def require_role(user: User, *allowed_roles: str, message: str = "") -> None:
    """
    Guard that raises ``PermissionDenied`` if the user's role is not
    among ``allowed_roles``.

    Raises:
        core.domain.exceptions.PermissionDenied
    """
    role_name = get_user_role_name(user)
    if role_name not in allowed_roles:
        raise PermissionDenied(
            message
            or f"Role '{role_name}' is not permitted for this operation. "
               f"Required: {', '.join(allowed_roles)}."
        )


def require_owner(user: User, owner_id: Any, *, message: str = "") -> None:
    """
    Guard that raises ``PermissionDenied`` unless ``user`` is the owner
    identified by ``owner_id``.
    """
    if user is None or getattr(user, "pk", None) != owner_id:
        raise PermissionDenied(message or "Only the owner may perform this action.")
