"""
core.domain.audience — Broadcast audience resolution.

Turns a ``BroadcastTarget`` into the concrete set of recipient user ids.
The profile directory (``accounts.Profile``) and the shop directory
(``shops.Shop``) are read-only inputs owned by other apps; resolving has
no side effects.

┌──────────────┬────────────────────────────────────────────────┐
│ kind         │ audience                                       │
├──────────────┼────────────────────────────────────────────────┤
│ all          │ every user with a profile                      │
│ institution  │ profiles whose institution matches             │
│ department   │ profiles whose department matches              │
│ shop         │ the shop's owner (0 or 1)                      │
│ user         │ the given id verbatim, no existence check      │
└──────────────┴────────────────────────────────────────────────┘

The department rule does not cross-check the department against an
institution; narrowing by institution first is the caller's contract.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from django.apps import apps

from core.models import TargetKind

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BroadcastTarget:
    """Transient audience selector; never persisted as-is."""

    kind: str
    institution_id: int | None = None
    department_id: int | None = None
    shop_id: int | None = None
    user_id: int | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "BroadcastTarget":
        return cls(
            kind=data["kind"],
            institution_id=data.get("institution_id"),
            department_id=data.get("department_id"),
            shop_id=data.get("shop_id"),
            user_id=data.get("user_id"),
        )


class AudienceResolver:
    """Resolves a ``BroadcastTarget`` to a de-duplicated set of user ids."""

    @classmethod
    def resolve(cls, target: BroadcastTarget) -> set[int]:
        handler = {
            TargetKind.ALL: cls._all,
            TargetKind.INSTITUTION: cls._institution,
            TargetKind.DEPARTMENT: cls._department,
            TargetKind.SHOP: cls._shop,
            TargetKind.USER: cls._user,
        }.get(target.kind)
        if handler is None:
            logger.warning("Unknown broadcast target kind %r", target.kind)
            return set()

        recipients = handler(target)
        logger.info(
            "Resolved broadcast target %s to %d recipient(s)",
            target, len(recipients),
        )
        return recipients

    @staticmethod
    def _profiles():
        return apps.get_model("accounts", "Profile").objects.all()

    @classmethod
    def _all(cls, target: BroadcastTarget) -> set[int]:
        return set(cls._profiles().values_list("user_id", flat=True))

    @classmethod
    def _institution(cls, target: BroadcastTarget) -> set[int]:
        if target.institution_id is None:
            return set()
        return set(
            cls._profiles()
            .filter(institution_id=target.institution_id)
            .values_list("user_id", flat=True)
        )

    @classmethod
    def _department(cls, target: BroadcastTarget) -> set[int]:
        if target.department_id is None:
            return set()
        return set(
            cls._profiles()
            .filter(department_id=target.department_id)
            .values_list("user_id", flat=True)
        )

    @staticmethod
    def _shop(target: BroadcastTarget) -> set[int]:
        if target.shop_id is None:
            return set()
        Shop = apps.get_model("shops", "Shop")
        owner_id = (
            Shop.objects
            .filter(pk=target.shop_id)
            .values_list("owner_id", flat=True)
            .first()
        )
        return {owner_id} if owner_id is not None else set()

    @staticmethod
    def _user(target: BroadcastTarget) -> set[int]:
        if target.user_id is None:
            return set()
        return {target.user_id}
