"""
Orders app serializers.

Request serializers validate shape only; all business rules (book
availability, adjacency of statuses, admin-only access) are enforced by
``orders.services``.
"""

from __future__ import annotations

from rest_framework import serializers

from .models import Demand, EntityKind, Order, StatusTransitionLog


# ═══════════════════════════════════════════════════════════════════
#  Orders
# ═══════════════════════════════════════════════════════════════════


class OrderCreateSerializer(serializers.Serializer):
    book_id = serializers.IntegerField()
    quantity = serializers.IntegerField(min_value=1, default=1)
    detail_address = serializers.CharField(allow_blank=True, required=False, default="")


class OrderSerializer(serializers.ModelSerializer):
    book_title = serializers.CharField(source="book.title", read_only=True)

    class Meta:
        model = Order
        fields = [
            "id",
            "order_number",
            "user",
            "book",
            "book_title",
            "quantity",
            "total_price",
            "detail_address",
            "status",
            "admin_notes",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


# ═══════════════════════════════════════════════════════════════════
#  Demands
# ═══════════════════════════════════════════════════════════════════


class DemandCreateSerializer(serializers.Serializer):
    book_name = serializers.CharField(max_length=255)
    author_name = serializers.CharField(max_length=255, allow_blank=True, required=False, default="")
    detail_address = serializers.CharField(allow_blank=True, required=False, default="")


class DemandSerializer(serializers.ModelSerializer):
    class Meta:
        model = Demand
        fields = [
            "id",
            "demand_number",
            "user",
            "book_name",
            "author_name",
            "detail_address",
            "status",
            "admin_notes",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


# ═══════════════════════════════════════════════════════════════════
#  Workflow
# ═══════════════════════════════════════════════════════════════════


class TransitionRequestSerializer(serializers.Serializer):
    """
    Body of ``POST /api/workflow/transition/``.

    ``status`` is validated against the kind's enum by the service so
    that an unknown status surfaces as ``invalid_transition``.
    """

    entity_kind = serializers.ChoiceField(choices=EntityKind.choices)
    entity_id = serializers.IntegerField(min_value=1)
    status = serializers.CharField(max_length=20)
    notes = serializers.CharField(allow_blank=True, required=False, default="")


class TransitionResponseSerializer(serializers.Serializer):
    entity_kind = serializers.CharField()
    entity_id = serializers.IntegerField()
    previous_status = serializers.CharField()
    status = serializers.CharField()
    changed = serializers.BooleanField(
        help_text="False when the entity already had the requested status.",
    )


class StatusTransitionLogSerializer(serializers.ModelSerializer):
    changed_by_username = serializers.CharField(
        source="changed_by.username",
        read_only=True,
        default=None,
    )

    class Meta:
        model = StatusTransitionLog
        fields = [
            "id",
            "from_status",
            "to_status",
            "changed_by",
            "changed_by_username",
            "notes",
            "created_at",
        ]
        read_only_fields = fields
