"""
Unlocks app serializers.
"""

from __future__ import annotations

from rest_framework import serializers

from .models import PaymentStatus, UnlockPayment


class UnlockCreateSerializer(serializers.Serializer):
    book_id = serializers.IntegerField()
    bkash_number = serializers.CharField(
        max_length=20,
        help_text="Wallet number the fee was sent from (11+ digits).",
    )


class UnlockPaymentSerializer(serializers.ModelSerializer):
    book_title = serializers.CharField(source="book.title", read_only=True)
    refund_pending = serializers.BooleanField(read_only=True)

    class Meta:
        model = UnlockPayment
        fields = [
            "id",
            "transaction_number",
            "user",
            "book",
            "book_title",
            "amount",
            "bkash_number",
            "status",
            "resolved_at",
            "admin_notes",
            "refund_requested",
            "refund_requested_at",
            "refund_approved",
            "refund_approved_at",
            "refund_notes",
            "refund_pending",
            "created_at",
        ]
        read_only_fields = fields


class ResolvePaymentSerializer(serializers.Serializer):
    decision = serializers.ChoiceField(
        choices=[PaymentStatus.APPROVED, PaymentStatus.REJECTED],
    )
    notes = serializers.CharField(allow_blank=True, required=False, default="")


class ResolveRefundSerializer(serializers.Serializer):
    approved = serializers.BooleanField()
    notes = serializers.CharField(allow_blank=True, required=False, default="")


class UnlockQuoteSerializer(serializers.Serializer):
    book_id = serializers.IntegerField()
    amount = serializers.IntegerField(help_text="Unlock fee in BDT.")
    payee_bkash_number = serializers.CharField()


class SellerContactSerializer(serializers.Serializer):
    book_id = serializers.IntegerField()
    seller_name = serializers.CharField()
    phone_number = serializers.CharField()
    whatsapp_number = serializers.CharField(allow_blank=True)
