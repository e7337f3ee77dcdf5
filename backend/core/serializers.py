"""
Core app serializers.

Response serializers for notifications and system constants, plus the
request serializer of the admin broadcast endpoint.  No business logic
lives here; target-field requirements are enforced by
``core.services.BroadcastService``.
"""

from __future__ import annotations

from rest_framework import serializers

from core.domain.audience import BroadcastTarget
from core.models import Notification, TargetKind


# ════════════════════════════════════════════════════════════════════
#  Notifications
# ════════════════════════════════════════════════════════════════════

class NotificationSerializer(serializers.ModelSerializer):
    """Read-only serializer for ``Notification`` instances."""

    class Meta:
        model = Notification
        fields = [
            "id",
            "title",
            "message",
            "notification_type",
            "reference_type",
            "reference_id",
            "is_read",
            "created_at",
        ]
        read_only_fields = fields


class UnreadCountSerializer(serializers.Serializer):
    unread_count = serializers.IntegerField(read_only=True)


class MarkAllReadResponseSerializer(serializers.Serializer):
    updated = serializers.IntegerField(
        read_only=True,
        help_text="Number of notifications that were flipped to read.",
    )


# ════════════════════════════════════════════════════════════════════
#  Broadcasts
# ════════════════════════════════════════════════════════════════════

class BroadcastRequestSerializer(serializers.Serializer):
    """
    Request body for ``POST /api/core/broadcasts/``.

    Example::

        {
            "title": "Exam week",
            "message": "Delivery may be delayed.",
            "target": "institution",
            "institution_id": 3
        }
    """

    title = serializers.CharField(max_length=255)
    message = serializers.CharField()
    target = serializers.ChoiceField(choices=TargetKind.choices)
    institution_id = serializers.IntegerField(required=False, allow_null=True, min_value=1)
    department_id = serializers.IntegerField(required=False, allow_null=True, min_value=1)
    shop_id = serializers.IntegerField(required=False, allow_null=True, min_value=1)
    user_id = serializers.IntegerField(required=False, allow_null=True, min_value=1)

    def to_target(self) -> BroadcastTarget:
        data = dict(self.validated_data)
        data["kind"] = data.pop("target")
        return BroadcastTarget.from_dict(data)


class BroadcastResponseSerializer(serializers.Serializer):
    sent_count = serializers.IntegerField(read_only=True)


# ════════════════════════════════════════════════════════════════════
#  System Constants
# ════════════════════════════════════════════════════════════════════

class ChoiceItemSerializer(serializers.Serializer):
    """A single ``{"value": ..., "label": ...}`` choice entry."""

    value = serializers.CharField()
    label = serializers.CharField()


class UnlockFeeScheduleSerializer(serializers.Serializer):
    threshold = serializers.IntegerField()
    low = serializers.IntegerField()
    high = serializers.IntegerField()


class SystemConstantsSerializer(serializers.Serializer):
    """
    Top-level response serializer for ``GET /api/core/constants/``.

    Provides the choice enumerations and the unlock fee schedule so the
    frontend can build dropdowns and price hints without hardcoding
    values.
    """

    order_statuses = ChoiceItemSerializer(many=True)
    demand_statuses = ChoiceItemSerializer(many=True)
    payment_statuses = ChoiceItemSerializer(many=True)
    broadcast_targets = ChoiceItemSerializer(many=True)
    unlock_fee = UnlockFeeScheduleSerializer()
    payee_bkash_number = serializers.CharField(
        help_text="bKash number users send the unlock fee to.",
    )
