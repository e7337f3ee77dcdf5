"""
Integration tests — orders, demands and the admin transition endpoint.

Endpoints under test:
    GET/POST /api/orders/                 (order-list)
    GET      /api/orders/{id}/            (order-detail)
    GET      /api/orders/{id}/history/    (order-history)
    GET/POST /api/demands/                (demand-list)
    POST     /api/workflow/transition/    (workflow-transition)
"""

from __future__ import annotations

from django.contrib.auth import get_user_model
from django.test import TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient

from accounts.models import Profile
from books.models import Book, BookStatus
from core.models import AdminAlert, AdminAlertType, Notification
from orders.models import Demand, DemandStatus, Order, OrderStatus

User = get_user_model()


class TestOrdersApi(TestCase):

    @classmethod
    def setUpTestData(cls):
        cls.admin = User.objects.create_user(
            username="ord_admin", email="ord_admin@example.com",
            password="Str0ng!Pass123", role="admin",
        )
        cls.buyer = User.objects.create_user(
            username="ord_buyer", email="ord_buyer@example.com",
            password="Str0ng!Pass123",
        )
        Profile.objects.create(user=cls.buyer, name="Karim Ahmed", phone_number="01766666666")
        cls.other = User.objects.create_user(
            username="ord_other", email="ord_other@example.com",
            password="Str0ng!Pass123",
        )
        cls.seller = User.objects.create_user(
            username="ord_seller", email="ord_seller@example.com",
            password="Str0ng!Pass123",
        )
        cls.book = Book.objects.create(
            title="Linear Algebra", author="Strang", price=380,
            seller=cls.seller, is_admin_listing=True,
        )
        cls.sold_book = Book.objects.create(
            title="Sold Out", author="Nobody", price=200,
            seller=cls.seller, status=BookStatus.SOLD,
        )

    def setUp(self):
        self.client = APIClient()
        self.client.force_authenticate(user=self.buyer)

    def _place(self, **overrides):
        payload = {"book_id": self.book.pk, "quantity": 2, "detail_address": "Hall 3, Room 210"}
        payload.update(overrides)
        return self.client.post(reverse("order-list"), payload, format="json")

    # ── Orders ───────────────────────────────────────────────────────

    def test_place_order_starts_pending_and_alerts_admin(self):
        with self.captureOnCommitCallbacks(execute=True):
            response = self._place()
        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.assertEqual(response.data["status"], OrderStatus.PENDING)
        self.assertEqual(response.data["total_price"], 760)
        self.assertTrue(response.data["order_number"].startswith("ORD-"))

        alert = AdminAlert.objects.get(alert_type=AdminAlertType.ORDER)
        self.assertEqual(alert.title, "New Order Received")
        self.assertEqual(alert.message, "New order placed by Karim Ahmed")

    def test_sold_book_cannot_be_ordered(self):
        response = self._place(book_id=self.sold_book.pk)
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(Order.objects.exists())

    def test_unknown_book_is_404(self):
        response = self._place(book_id=999999)
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_zero_quantity_rejected(self):
        response = self._place(quantity=0)
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_orders_are_private_to_their_buyer(self):
        order_id = self._place().data["id"]

        self.client.force_authenticate(user=self.other)
        self.assertEqual(self.client.get(reverse("order-list")).data, [])
        response = self.client.get(reverse("order-detail", kwargs={"pk": order_id}))
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

        self.client.force_authenticate(user=self.admin)
        self.assertEqual(len(self.client.get(reverse("order-list")).data), 1)

    # ── Demands ──────────────────────────────────────────────────────

    def test_create_demand_alerts_admin(self):
        with self.captureOnCommitCallbacks(execute=True):
            response = self.client.post(
                reverse("demand-list"),
                {"book_name": "Campbell Biology", "author_name": "Urry"},
                format="json",
            )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.assertEqual(response.data["status"], DemandStatus.REQUESTED)

        alert = AdminAlert.objects.get(alert_type=AdminAlertType.BOOK_DEMAND)
        self.assertEqual(alert.message, "Karim Ahmed requested: Campbell Biology")

    def test_blank_demand_rejected(self):
        response = self.client.post(reverse("demand-list"), {"book_name": "   "}, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(Demand.objects.exists())

    # ── Transition endpoint ──────────────────────────────────────────

    def _transition(self, entity_id, target, kind="order", notes=""):
        return self.client.post(
            reverse("workflow-transition"),
            {"entity_kind": kind, "entity_id": entity_id, "status": target, "notes": notes},
            format="json",
        )

    def test_admin_transition_then_history(self):
        order_id = self._place().data["id"]

        self.client.force_authenticate(user=self.admin)
        with self.captureOnCommitCallbacks(execute=True):
            response = self._transition(order_id, "confirmed", notes="Stock checked")
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(
            response.data,
            {
                "entity_kind": "order",
                "entity_id": order_id,
                "previous_status": "pending",
                "status": "confirmed",
                "changed": True,
            },
        )
        self.assertTrue(
            Notification.objects.filter(recipient=self.buyer, reference_id=str(order_id)).exists()
        )

        self.client.force_authenticate(user=self.buyer)
        history = self.client.get(reverse("order-history", kwargs={"pk": order_id}))
        self.assertEqual(history.status_code, status.HTTP_200_OK)
        self.assertEqual(len(history.data), 1)
        self.assertEqual(history.data[0]["to_status"], "confirmed")
        self.assertEqual(history.data[0]["notes"], "Stock checked")

    def test_retry_reports_unchanged(self):
        order_id = self._place().data["id"]
        self.client.force_authenticate(user=self.admin)
        self._transition(order_id, "confirmed")
        response = self._transition(order_id, "confirmed")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(response.data["changed"])

    def test_invalid_transition_is_409(self):
        order_id = self._place().data["id"]
        self.client.force_authenticate(user=self.admin)
        response = self._transition(order_id, "delivered")
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(response.data["code"], "invalid_transition")

    def test_buyer_cannot_transition_own_order(self):
        order_id = self._place().data["id"]
        response = self._transition(order_id, "cancelled")
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(Order.objects.get(pk=order_id).status, OrderStatus.PENDING)

    def test_unknown_entity_kind_rejected_by_serializer(self):
        self.client.force_authenticate(user=self.admin)
        response = self._transition(1, "paid", kind="invoice")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
