"""
Shops app serializers.
"""

from __future__ import annotations

from rest_framework import serializers

from .models import Shop, ShopBook, ShopOrder


class ShopBookSerializer(serializers.ModelSerializer):
    class Meta:
        model = ShopBook
        fields = ["id", "title", "author", "price", "stock", "is_available"]
        read_only_fields = fields


class ShopSerializer(serializers.ModelSerializer):
    """
    Public shop card.

    Contact numbers are shown: unlike individual sellers, shops publish
    their phone for cash-on-delivery orders.
    """

    class Meta:
        model = Shop
        fields = [
            "id",
            "name",
            "description",
            "phone_number",
            "whatsapp_number",
            "address",
            "is_verified",
        ]
        read_only_fields = fields


class ShopOrderCreateSerializer(serializers.Serializer):
    shop_book_id = serializers.IntegerField()
    quantity = serializers.IntegerField(min_value=1, default=1)
    detail_address = serializers.CharField(allow_blank=True, required=False, default="")
    customer_notes = serializers.CharField(allow_blank=True, required=False, default="")


class ShopNotesUpdateSerializer(serializers.Serializer):
    shop_notes = serializers.CharField(allow_blank=True)


class ShopOrderSerializer(serializers.ModelSerializer):
    shop_name = serializers.CharField(source="shop.name", read_only=True)
    book_title = serializers.CharField(source="shop_book.title", read_only=True)

    class Meta:
        model = ShopOrder
        fields = [
            "id",
            "order_number",
            "shop",
            "shop_name",
            "user",
            "shop_book",
            "book_title",
            "quantity",
            "total_price",
            "detail_address",
            "status",
            "customer_notes",
            "shop_notes",
            "admin_notes",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields
