"""
Integration tests — user registration.

Endpoint under test:  POST /api/accounts/auth/register/
                      (named URL: accounts:register)
Success response:     HTTP 201, ``UserDetailSerializer`` body with nested profile.
Failure responses:    HTTP 400 for validation errors, HTTP 409 when the
                      username or email is already taken.
"""

from __future__ import annotations

from django.contrib.auth import get_user_model
from django.test import TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient

from accounts.models import Department, Institution, InstitutionType, Profile
from core.models import AdminAlert, AdminAlertType

User = get_user_model()


def _payload(**overrides) -> dict:
    data = {
        "username": "rahim",
        "email": "rahim@example.com",
        "password": "Str0ng!Pass123",
        "password_confirm": "Str0ng!Pass123",
        "name": "Rahim Uddin",
        "phone_number": "01711111111",
        "whatsapp_number": "01811111111",
    }
    data.update(overrides)
    return data


class TestAuthRegistration(TestCase):

    @classmethod
    def setUpTestData(cls):
        cls.du = Institution.objects.create(
            name="University of Dhaka",
            institution_type=InstitutionType.UNIVERSITY,
        )
        cls.buet = Institution.objects.create(
            name="BUET",
            institution_type=InstitutionType.UNIVERSITY,
        )
        cls.du_physics = Department.objects.create(institution=cls.du, name="Physics")
        cls.buet_cse = Department.objects.create(institution=cls.buet, name="CSE")

    def setUp(self):
        self.client = APIClient()
        self.url = reverse("accounts:register")

    def test_register_links_institution_and_department(self):
        response = self.client.post(
            self.url,
            _payload(institution_id=self.du.pk, department_id=self.du_physics.pk),
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)

        profile = Profile.objects.get(user__username="rahim")
        self.assertEqual(profile.institution_id, self.du.pk)
        self.assertEqual(profile.department_id, self.du_physics.pk)
        self.assertEqual(response.data["profile"]["institution_name"], "University of Dhaka")
        self.assertNotIn("password", response.data)

    def test_register_queues_signup_admin_alert(self):
        with self.captureOnCommitCallbacks(execute=True):
            response = self.client.post(self.url, _payload(), format="json")
        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)

        alert = AdminAlert.objects.get(alert_type=AdminAlertType.SIGNUP)
        self.assertEqual(alert.title, "New User Signup")
        self.assertEqual(alert.message, "Rahim Uddin (rahim@example.com) just signed up")
        self.assertEqual(alert.reference_id, str(response.data["id"]))

    def test_password_mismatch_rejected(self):
        response = self.client.post(
            self.url, _payload(password_confirm="Different!Pass1"), format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("password_confirm", response.data)
        self.assertFalse(User.objects.filter(username="rahim").exists())

    def test_short_phone_number_rejected(self):
        response = self.client.post(self.url, _payload(phone_number="01711"), format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("phone_number", response.data)

    def test_department_from_other_institution_rejected(self):
        response = self.client.post(
            self.url,
            _payload(institution_id=self.du.pk, department_id=self.buet_cse.pk),
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("department_id", response.data)

    def test_unknown_institution_rejected(self):
        response = self.client.post(self.url, _payload(institution_id=99999), format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("institution_id", response.data)

    def test_duplicate_email_is_conflict(self):
        User.objects.create_user(
            username="someone_else",
            email="RAHIM@example.com",
            password="Str0ng!Pass123",
        )
        response = self.client.post(self.url, _payload(), format="json")
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertIn("email", response.data["detail"])

    def test_missing_required_fields(self):
        response = self.client.post(self.url, {"username": "x"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        for field in ("email", "password", "password_confirm", "name", "phone_number"):
            self.assertIn(field, response.data)
