"""
Integration tests — multi-identifier login.

Endpoint under test:  POST /api/accounts/auth/login/
                      (named URL: accounts:login)
Request payload:      {"identifier": "<username|email|phone>",
                       "password": "<password>"}
Success response:     HTTP 200, body contains {"access": "...", "refresh": "...",
                      "user": {...}}
Failure response:     HTTP 400 — serializer raises ValidationError when
                      credentials are invalid (CustomTokenObtainPairSerializer.validate)
"""

from __future__ import annotations

from django.contrib.auth import get_user_model
from django.test import TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import AccessToken

User = get_user_model()

# ── Constants ────────────────────────────────────────────────────────────────
_PASSWORD = "Str0ng!Pass99"

_USER_FIELDS = {
    "username":     "login_test_user",
    "email":        "login_test_user@example.com",
    "phone_number": "01730000099",
    "first_name":   "Login",
    "last_name":    "Tester",
}


class TestAuthLoginMultiIdentifier(TestCase):
    """Username, email (case-insensitive) and phone number all log in."""

    @classmethod
    def setUpTestData(cls):
        cls.user = User.objects.create_user(
            password=_PASSWORD,
            **_USER_FIELDS,
        )
        cls.admin = User.objects.create_user(
            username="login_admin",
            email="login_admin@example.com",
            password=_PASSWORD,
            role="admin",
        )

    def setUp(self):
        self.client = APIClient()
        self.login_url = reverse("accounts:login")

    # ── Helper ───────────────────────────────────────────────────────────────

    def _post_login(self, identifier: str, password: str = _PASSWORD):
        return self.client.post(
            self.login_url,
            {"identifier": identifier, "password": password},
            format="json",
        )

    # ── Success paths ───────────────────────────────────────────────────────

    def test_login_with_username(self):
        response = self._post_login(_USER_FIELDS["username"])
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data["user"]["id"], self.user.pk)

    def test_login_with_email_is_case_insensitive(self):
        response = self._post_login(_USER_FIELDS["email"].upper())
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data["user"]["id"], self.user.pk)

    def test_login_with_phone_number(self):
        response = self._post_login(_USER_FIELDS["phone_number"])
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)

    def test_access_token_carries_role_claim(self):
        response = self._post_login("login_admin")
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        token = AccessToken(response.data["access"])
        self.assertEqual(token["role"], "admin")

    def test_access_token_authenticates_me_endpoint(self):
        access = self._post_login(_USER_FIELDS["username"]).data["access"]
        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {access}")
        me = self.client.get(reverse("accounts:me"))
        self.assertEqual(me.status_code, status.HTTP_200_OK)
        self.assertEqual(me.data["username"], _USER_FIELDS["username"])

    def test_refresh_token_issues_new_access(self):
        refresh = self._post_login(_USER_FIELDS["username"]).data["refresh"]
        response = self.client.post(
            reverse("accounts:token-refresh"),
            {"refresh": refresh},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn("access", response.data)

    # ── Failure paths ───────────────────────────────────────────────────────

    def test_unknown_identifier_rejected(self):
        response = self._post_login("nobody@example.com")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_blank_identifier_rejected(self):
        response = self._post_login("")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_ambiguous_phone_number_rejected(self):
        User.objects.create_user(
            username="phone_twin",
            email="phone_twin@example.com",
            password=_PASSWORD,
            phone_number=_USER_FIELDS["phone_number"],
        )
        response = self._post_login(_USER_FIELDS["phone_number"])
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
