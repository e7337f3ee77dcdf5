"""
Integration tests — current-user endpoint.

Endpoint under test:  GET / PATCH /api/accounts/me/
                      (named URL: accounts:me)
"""

from __future__ import annotations

from django.contrib.auth import get_user_model
from django.test import TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient

from accounts.models import Department, Institution, InstitutionType, Profile
from shops.models import Shop

User = get_user_model()


class TestAuthMe(TestCase):

    @classmethod
    def setUpTestData(cls):
        cls.du = Institution.objects.create(
            name="University of Dhaka",
            institution_type=InstitutionType.UNIVERSITY,
        )
        cls.nsu = Institution.objects.create(
            name="North South University",
            institution_type=InstitutionType.UNIVERSITY,
        )
        cls.du_math = Department.objects.create(institution=cls.du, name="Mathematics")

        cls.user = User.objects.create_user(
            username="me_user",
            email="me_user@example.com",
            password="Str0ng!Pass123",
            phone_number="01722222222",
        )
        Profile.objects.create(user=cls.user, name="Me User", phone_number="01722222222")

        cls.bare_user = User.objects.create_user(
            username="bare_user",
            email="bare_user@example.com",
            password="Str0ng!Pass123",
        )

    def setUp(self):
        self.client = APIClient()
        self.client.force_authenticate(user=self.user)
        self.url = reverse("accounts:me")

    def test_requires_authentication(self):
        response = APIClient().get(self.url)
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_get_returns_profile(self):
        response = self.client.get(self.url)
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["username"], "me_user")
        self.assertEqual(response.data["profile"]["name"], "Me User")
        self.assertFalse(response.data["is_shop_owner"])

    def test_shop_owner_flag(self):
        Shop.objects.create(owner=self.user, name="Nilkhet Corner", phone_number="01722222222")
        response = self.client.get(self.url)
        self.assertTrue(response.data["is_shop_owner"])

    def test_patch_updates_profile_and_syncs_phone(self):
        response = self.client.patch(
            self.url,
            {
                "name": "Renamed User",
                "phone_number": "01733333333",
                "institution": self.du.pk,
                "department": self.du_math.pk,
            },
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data["profile"]["name"], "Renamed User")
        self.assertEqual(response.data["profile"]["department_name"], "Mathematics")

        self.user.refresh_from_db()
        self.assertEqual(self.user.phone_number, "01733333333")

    def test_patch_rejects_department_outside_institution(self):
        response = self.client.patch(
            self.url,
            {"institution": self.nsu.pk, "department": self.du_math.pk},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["code"], "validation_error")

    def test_role_is_not_writable(self):
        self.client.patch(self.url, {"role": "admin"}, format="json")
        self.user.refresh_from_db()
        self.assertEqual(self.user.role, "user")

    def test_profile_missing_returns_null(self):
        self.client.force_authenticate(user=self.bare_user)
        response = self.client.get(self.url)
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIsNone(response.data["profile"])

    def test_first_patch_creates_profile(self):
        self.client.force_authenticate(user=self.bare_user)
        response = self.client.patch(
            self.url,
            {"name": "Bare User", "phone_number": "01744444444"},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertTrue(Profile.objects.filter(user=self.bare_user).exists())

    def test_first_patch_without_phone_rejected(self):
        self.client.force_authenticate(user=self.bare_user)
        response = self.client.patch(self.url, {"name": "Bare User"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
