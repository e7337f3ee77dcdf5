"""
Integration tests — admin user management.

Endpoints under test:
    GET   /api/accounts/users/                    (accounts:user-list)
    PATCH /api/accounts/users/{id}/assign-role/   (accounts:user-assign-role)
"""

from __future__ import annotations

from django.contrib.auth import get_user_model
from django.test import TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient

User = get_user_model()


class TestAssignRole(TestCase):

    @classmethod
    def setUpTestData(cls):
        cls.admin = User.objects.create_user(
            username="role_admin",
            email="role_admin@example.com",
            password="Str0ng!Pass123",
            role="admin",
        )
        cls.member = User.objects.create_user(
            username="role_member",
            email="role_member@example.com",
            password="Str0ng!Pass123",
            phone_number="01755555555",
        )

    def setUp(self):
        self.client = APIClient()

    def _assign_url(self, user_id: int) -> str:
        return reverse("accounts:user-assign-role", kwargs={"pk": user_id})

    def test_admin_promotes_user(self):
        self.client.force_authenticate(user=self.admin)
        response = self.client.patch(
            self._assign_url(self.member.pk), {"role": "admin"}, format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.member.refresh_from_db()
        self.assertEqual(self.member.role, "admin")

    def test_regular_user_cannot_assign_roles(self):
        self.client.force_authenticate(user=self.member)
        response = self.client.patch(
            self._assign_url(self.member.pk), {"role": "admin"}, format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(response.data["code"], "permission_denied")
        self.member.refresh_from_db()
        self.assertEqual(self.member.role, "user")

    def test_admin_cannot_demote_self(self):
        self.client.force_authenticate(user=self.admin)
        response = self.client.patch(
            self._assign_url(self.admin.pk), {"role": "user"}, format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_unknown_role_rejected(self):
        self.client.force_authenticate(user=self.admin)
        response = self.client.patch(
            self._assign_url(self.member.pk), {"role": "shop_owner"}, format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_unknown_user_is_404(self):
        self.client.force_authenticate(user=self.admin)
        response = self.client.patch(self._assign_url(99999), {"role": "admin"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_list_users_admin_only(self):
        self.client.force_authenticate(user=self.member)
        self.assertEqual(
            self.client.get(reverse("accounts:user-list")).status_code,
            status.HTTP_403_FORBIDDEN,
        )

        self.client.force_authenticate(user=self.admin)
        response = self.client.get(reverse("accounts:user-list"), {"search": "0175555"})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([u["username"] for u in response.data], ["role_member"])
