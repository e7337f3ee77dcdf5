"""
Integration tests for core endpoints.

Scope in this file:
- GET  /api/core/constants/
- GET  /api/core/notifications/
- GET  /api/core/notifications/unread-count/
- POST /api/core/notifications/{id}/read/
- POST /api/core/notifications/read-all/
"""

from django.test import TestCase, override_settings
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient

from accounts.models import User
from core.constants import NOTIFICATION_LIST_LIMIT
from core.models import Notification


class TestSystemConstants(TestCase):

    @override_settings(UNLOCK_PAYEE_BKASH_NUMBER="01786698614")
    def test_constants_are_public(self):
        response = APIClient().get(reverse("core:system-constants"))
        self.assertEqual(response.status_code, status.HTTP_200_OK)

        self.assertEqual(response.data["unlock_fee"], {"threshold": 500, "low": 10, "high": 20})
        self.assertEqual(response.data["payee_bkash_number"], "01786698614")
        order_values = [item["value"] for item in response.data["order_statuses"]]
        self.assertEqual(
            order_values,
            ["pending", "confirmed", "processing", "out_for_delivery", "delivered", "cancelled"],
        )
        demand_values = {item["value"] for item in response.data["demand_statuses"]}
        self.assertIn("requested", demand_values)
        target_values = {item["value"] for item in response.data["broadcast_targets"]}
        self.assertEqual(target_values, {"all", "institution", "department", "shop", "user"})


class TestNotificationEndpoints(TestCase):

    @classmethod
    def setUpTestData(cls):
        cls.user = User.objects.create_user(
            username="inbox_user", email="inbox_user@example.com", password="Str0ng!Pass123",
        )
        cls.other = User.objects.create_user(
            username="inbox_other", email="inbox_other@example.com", password="Str0ng!Pass123",
        )

    def setUp(self):
        self.client = APIClient()
        self.client.force_authenticate(user=self.user)
        self.first = Notification.objects.create(recipient=self.user, title="First", message="1")
        self.second = Notification.objects.create(recipient=self.user, title="Second", message="2")
        self.foreign = Notification.objects.create(recipient=self.other, title="Foreign", message="x")

    def test_list_newest_first_and_own_only(self):
        response = self.client.get(reverse("core:notification-list"))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([n["title"] for n in response.data], ["Second", "First"])

    def test_list_is_capped(self):
        Notification.objects.bulk_create(
            Notification(recipient=self.user, title=f"Bulk {i}", message="m")
            for i in range(NOTIFICATION_LIST_LIMIT + 5)
        )
        response = self.client.get(reverse("core:notification-list"))
        self.assertEqual(len(response.data), NOTIFICATION_LIST_LIMIT)

    def test_unread_count_and_mark_read(self):
        count_url = reverse("core:notification-unread-count")
        self.assertEqual(self.client.get(count_url).data, {"unread_count": 2})

        response = self.client.post(reverse("core:notification-read", kwargs={"pk": self.first.pk}))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data["is_read"])
        self.assertEqual(self.client.get(count_url).data, {"unread_count": 1})

    def test_mark_read_of_foreign_notification_is_404(self):
        response = self.client.post(reverse("core:notification-read", kwargs={"pk": self.foreign.pk}))
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.foreign.refresh_from_db()
        self.assertFalse(self.foreign.is_read)

    def test_mark_all_read(self):
        response = self.client.post(reverse("core:notification-read-all"))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data, {"updated": 2})
        self.assertFalse(Notification.objects.filter(recipient=self.user, is_read=False).exists())
        self.assertFalse(Notification.objects.get(pk=self.foreign.pk).is_read)

    def test_requires_authentication(self):
        response = APIClient().get(reverse("core:notification-list"))
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
