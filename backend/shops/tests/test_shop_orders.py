"""
Integration tests — Nilkhet shop orders.

Endpoints under test:
    GET      /api/shops/                          (shop-list)
    GET      /api/shops/{id}/books/               (shop-books)
    GET      /api/shops/{shop_pk}/orders/         (shop-incoming-order-list)
    GET/POST /api/shop-orders/                    (shop-order-list)
    PATCH    /api/shop-orders/{id}/shop-notes/    (shop-order-shop-notes)
"""

from __future__ import annotations

from django.contrib.auth import get_user_model
from django.test import TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient

from core.models import Notification
from orders.models import OrderStatus
from shops.models import Shop, ShopBook, ShopOrder

User = get_user_model()


class TestShopOrders(TestCase):

    @classmethod
    def setUpTestData(cls):
        cls.admin = User.objects.create_user(
            username="shop_admin", email="shop_admin@example.com",
            password="Str0ng!Pass123", role="admin",
        )
        cls.owner = User.objects.create_user(
            username="shop_owner", email="shop_owner@example.com",
            password="Str0ng!Pass123",
        )
        cls.rival_owner = User.objects.create_user(
            username="rival_owner", email="rival_owner@example.com",
            password="Str0ng!Pass123",
        )
        cls.customer = User.objects.create_user(
            username="shop_customer", email="shop_customer@example.com",
            password="Str0ng!Pass123",
        )

        cls.shop = Shop.objects.create(
            owner=cls.owner, name="Nilkhet Boi Ghor", phone_number="01788888888",
        )
        cls.rival_shop = Shop.objects.create(
            owner=cls.rival_owner, name="Banglabazar Books", phone_number="01799999999",
        )
        cls.closed_shop = Shop.objects.create(
            owner=cls.rival_owner, name="Closed Shop", phone_number="01799999990",
            is_active=False,
        )
        cls.shop_book = ShopBook.objects.create(
            shop=cls.shop, title="Thermodynamics", author="Cengel", price=450, stock=3,
        )
        cls.hidden_book = ShopBook.objects.create(
            shop=cls.shop, title="Out of print", author="Unknown", price=100,
            is_available=False,
        )
        cls.closed_book = ShopBook.objects.create(
            shop=cls.closed_shop, title="Closed", author="Unknown", price=100,
        )

    def setUp(self):
        self.client = APIClient()
        self.client.force_authenticate(user=self.customer)

    def _place(self, **overrides):
        payload = {"shop_book_id": self.shop_book.pk, "quantity": 2, "customer_notes": "Call first"}
        payload.update(overrides)
        return self.client.post(reverse("shop-order-list"), payload, format="json")

    # ── Directory ────────────────────────────────────────────────────

    def test_directory_hides_inactive_shops(self):
        response = self.client.get(reverse("shop-list"))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        names = {shop["name"] for shop in response.data}
        self.assertEqual(names, {"Nilkhet Boi Ghor", "Banglabazar Books"})

    def test_catalogue_lists_available_books_only(self):
        response = self.client.get(reverse("shop-books", kwargs={"pk": self.shop.pk}))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([b["title"] for b in response.data], ["Thermodynamics"])

    # ── Placement ────────────────────────────────────────────────────

    def test_place_shop_order(self):
        response = self._place()
        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.assertEqual(response.data["status"], OrderStatus.PENDING)
        self.assertEqual(response.data["total_price"], 900)
        self.assertEqual(response.data["shop_name"], "Nilkhet Boi Ghor")
        self.assertTrue(response.data["order_number"].startswith("NLK-"))

        self.shop_book.refresh_from_db()
        self.assertEqual(self.shop_book.stock, 3)

    def test_quantity_above_stock_rejected(self):
        response = self._place(quantity=4)
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_unavailable_book_rejected(self):
        response = self._place(shop_book_id=self.hidden_book.pk, quantity=1)
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_inactive_shop_rejected(self):
        response = self._place(shop_book_id=self.closed_book.pk, quantity=1)
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(ShopOrder.objects.exists())

    # ── Owner inbox and notes ────────────────────────────────────────

    def test_owner_sees_incoming_orders(self):
        self._place()
        self.client.force_authenticate(user=self.owner)
        response = self.client.get(
            reverse("shop-incoming-order-list", kwargs={"shop_pk": self.shop.pk})
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 1)

    def test_other_owner_cannot_read_inbox(self):
        self._place()
        self.client.force_authenticate(user=self.rival_owner)
        response = self.client.get(
            reverse("shop-incoming-order-list", kwargs={"shop_pk": self.shop.pk})
        )
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_owner_edits_shop_notes_without_touching_status(self):
        order_id = self._place().data["id"]
        self.client.force_authenticate(user=self.owner)
        response = self.client.patch(
            reverse("shop-order-shop-notes", kwargs={"pk": order_id}),
            {"shop_notes": "Packed, ready for pickup"},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        order = ShopOrder.objects.get(pk=order_id)
        self.assertEqual(order.shop_notes, "Packed, ready for pickup")
        self.assertEqual(order.status, OrderStatus.PENDING)

    def test_customer_and_rival_cannot_edit_shop_notes(self):
        order_id = self._place().data["id"]
        url = reverse("shop-order-shop-notes", kwargs={"pk": order_id})

        response = self.client.patch(url, {"shop_notes": "hijack"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

        self.client.force_authenticate(user=self.rival_owner)
        response = self.client.patch(url, {"shop_notes": "hijack"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

        self.assertEqual(ShopOrder.objects.get(pk=order_id).shop_notes, "")

    def test_shop_owner_cannot_transition_status(self):
        order_id = self._place().data["id"]
        self.client.force_authenticate(user=self.owner)
        response = self.client.post(
            reverse("workflow-transition"),
            {"entity_kind": "shop_order", "entity_id": order_id, "status": "confirmed"},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_admin_transition_notifies_customer(self):
        order_id = self._place().data["id"]
        self.client.force_authenticate(user=self.admin)
        with self.captureOnCommitCallbacks(execute=True):
            response = self.client.post(
                reverse("workflow-transition"),
                {"entity_kind": "shop_order", "entity_id": order_id, "status": "confirmed"},
                format="json",
            )
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        notification = Notification.objects.get(recipient=self.customer)
        self.assertEqual(notification.title, "Nilkhet Order Status Updated")

    def test_order_detail_visible_to_owner_not_to_strangers(self):
        order_id = self._place().data["id"]
        url = reverse("shop-order-detail", kwargs={"pk": order_id})

        self.client.force_authenticate(user=self.owner)
        self.assertEqual(self.client.get(url).status_code, status.HTTP_200_OK)

        self.client.force_authenticate(user=self.rival_owner)
        self.assertEqual(self.client.get(url).status_code, status.HTTP_403_FORBIDDEN)
