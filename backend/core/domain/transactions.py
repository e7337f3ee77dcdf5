"""
core.domain.transactions — Helpers for safe state transitions.

Every ledger mutation in this project is a **compare-and-swap**: the
service reads the row, validates the move against the current value, then
issues a single ``UPDATE … WHERE pk = ? AND <field> = <value read>``.  If
another request changed the row in between, the update touches zero rows
and the caller re-reads to decide what happened.  No engine-side locks and
no cached copies of entity state are involved.

Usage::

    from core.domain.transactions import compare_and_swap, fetch_or_404

    order = fetch_or_404(Order, order_id)
    swapped = compare_and_swap(
        Order,
        pk=order.pk,
        expected={"status": order.status},
        changes={"status": "confirmed"},
    )
    if not swapped:
        order = fetch_or_404(Order, order_id)   # someone else won
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, TypeVar

from django.db import models
from django.utils import timezone

from core.domain.exceptions import NotFound

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=models.Model)


def fetch_or_404(model_class: type[M], pk: Any, **filters: Any) -> M:
    """
    Re-read a row from the ledger store.

    Args:
        model_class: The Django model class.
        pk:          Primary key value.
        **filters:   Extra lookups (e.g. ownership) the row must satisfy.

    Returns:
        A fresh instance read from the database.

    Raises:
        NotFound: If no row with that PK (and filters) exists.
    """
    try:
        return model_class.objects.get(pk=pk, **filters)
    except (model_class.DoesNotExist, ValueError, TypeError):
        raise NotFound(f"{model_class.__name__} with pk={pk} does not exist.")


def compare_and_swap(
    model_class: type[models.Model],
    *,
    pk: Any,
    expected: Mapping[str, Any],
    changes: Mapping[str, Any],
) -> bool:
    """
    Conditionally update one row.

    The update succeeds only if every field in ``expected`` still holds
    the supplied value.  ``updated_at`` is bumped automatically when the
    model defines it (``QuerySet.update`` bypasses ``auto_now``).

    Args:
        model_class: The Django model class.
        pk:          Primary key of the row.
        expected:    ``{field: value}`` preconditions read by the caller.
        changes:     ``{field: new_value}`` to write.

    Returns:
        ``True`` if exactly one row was updated, ``False`` if the
        preconditions no longer hold (or the row is gone).
    """
    values = dict(changes)
    field_names = {f.name for f in model_class._meta.get_fields()}
    if "updated_at" in field_names and "updated_at" not in values:
        values["updated_at"] = timezone.now()

    lookup = {"pk": pk}
    for field, value in expected.items():
        if value is None:
            lookup[f"{field}__isnull"] = True
        else:
            lookup[field] = value

    updated = model_class.objects.filter(**lookup).update(**values)
    if not updated:
        logger.info(
            "Conditional update lost on %s pk=%s (expected %s)",
            model_class.__name__, pk, dict(expected),
        )
    return updated == 1
