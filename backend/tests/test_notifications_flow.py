"""
Integration tests for broadcasts and the admin alert side-channel.

Scope in this file:
- POST /api/core/broadcasts/ for every target kind
- Audience resolution through profiles and the shop directory
- NotificationDispatcher.alert_admin and the admin mailbox email
- fire_and_forget on the background thread pool
"""

import itertools
import threading
from concurrent.futures import ThreadPoolExecutor
from smtplib import SMTPException
from unittest import mock

from django.core import mail
from django.test import TestCase, override_settings
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient

from accounts.models import Department, Institution, Profile, User
from core.constants import ADMIN_ALERT_SUBJECT_PREFIX
from core.domain import tasks
from core.domain.audience import BroadcastTarget
from core.domain.exceptions import DomainError
from core.domain.notifications import NotificationDispatcher
from core.models import AdminAlert, AdminAlertType, BroadcastLog, Notification, NotificationType
from core.services import BroadcastService
from shops.models import Shop

_phone_seq = itertools.count(1)


def _make_user(username, role="user", institution=None, department=None, with_profile=True):
    user = User.objects.create_user(
        username=username,
        email=f"{username}@example.com",
        password="Str0ng!Pass123",
        phone_number=f"018{next(_phone_seq):08d}",
    )
    if role != "user":
        user.role = role
        user.save(update_fields=["role"])
    if with_profile:
        Profile.objects.create(
            user=user,
            name=username.title(),
            phone_number=user.phone_number,
            institution=institution,
            department=department,
        )
    return user


class TestBroadcastFlow(TestCase):

    @classmethod
    def setUpTestData(cls):
        cls.du = Institution.objects.create(name="Dhaka University", institution_type="university")
        cls.buet = Institution.objects.create(name="BUET", institution_type="university")
        cls.physics = Department.objects.create(institution=cls.du, name="Physics")
        cls.cse = Department.objects.create(institution=cls.buet, name="CSE")

        cls.admin = _make_user("bc_admin", role="admin")
        cls.du_users = [
            _make_user("du_one", institution=cls.du, department=cls.physics),
            _make_user("du_two", institution=cls.du, department=cls.physics),
            _make_user("du_three", institution=cls.du),
        ]
        cls.buet_users = [
            _make_user("buet_one", institution=cls.buet, department=cls.cse),
            _make_user("buet_two", institution=cls.buet),
        ]
        cls.no_profile = _make_user("bc_ghost", with_profile=False)

        cls.shop_owner = _make_user("bc_shopkeeper")
        cls.shop = Shop.objects.create(
            owner=cls.shop_owner, name="Nilkhet Corner", phone_number="01700000099",
        )

    def setUp(self):
        self.client = APIClient()
        self.client.force_authenticate(user=self.admin)
        self.url = reverse("core:broadcast")

    def _broadcast(self, **payload):
        body = {"title": "Exam week", "message": "Deliveries may be delayed."}
        body.update(payload)
        return self.client.post(self.url, body, format="json")

    def test_institution_broadcast_reaches_only_its_members(self):
        response = self._broadcast(target="institution", institution_id=self.du.pk)
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data, {"sent_count": 3})

        recipients = set(
            Notification.objects.filter(notification_type=NotificationType.BROADCAST)
            .values_list("recipient_id", flat=True)
        )
        self.assertEqual(recipients, {u.pk for u in self.du_users})

        response = self._broadcast(target="institution", institution_id=self.buet.pk)
        self.assertEqual(response.data, {"sent_count": 2})

    def test_broadcast_is_logged(self):
        self._broadcast(target="institution", institution_id=self.buet.pk)
        log = BroadcastLog.objects.get()
        self.assertEqual(log.target_kind, "institution")
        self.assertEqual(log.target_institution_id, self.buet.pk)
        self.assertEqual(log.sent_count, 2)
        self.assertEqual(log.sent_by, self.admin)

    def test_all_target_reaches_every_profile(self):
        response = self._broadcast(target="all")
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data["sent_count"], Profile.objects.count())
        self.assertFalse(Notification.objects.filter(recipient=self.no_profile).exists())

    def test_department_target(self):
        response = self._broadcast(target="department", department_id=self.physics.pk)
        self.assertEqual(response.data, {"sent_count": 2})

    def test_shop_target_reaches_owner(self):
        response = self._broadcast(target="shop", shop_id=self.shop.pk)
        self.assertEqual(response.data, {"sent_count": 1})
        notification = Notification.objects.get()
        self.assertEqual(notification.recipient, self.shop_owner)
        self.assertEqual(notification.title, "Exam week")

    def test_unknown_shop_reaches_nobody(self):
        response = self._broadcast(target="shop", shop_id=999999)
        self.assertEqual(response.data, {"sent_count": 0})

    def test_user_target_without_profile_has_null_profile_link(self):
        response = self._broadcast(target="user", user_id=self.no_profile.pk)
        self.assertEqual(response.data, {"sent_count": 1})
        notification = Notification.objects.get(recipient=self.no_profile)
        self.assertIsNone(notification.profile_id)

    def test_user_target_links_profile(self):
        target = self.du_users[0]
        self._broadcast(target="user", user_id=target.pk)
        notification = Notification.objects.get(recipient=target)
        self.assertEqual(notification.profile_id, target.profile.pk)

    def test_nonexistent_user_target_sends_nothing(self):
        response = self._broadcast(target="user", user_id=999999)
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data, {"sent_count": 0})
        self.assertFalse(Notification.objects.exists())

    def test_non_admin_is_forbidden(self):
        self.client.force_authenticate(user=self.du_users[0])
        response = self._broadcast(target="all")
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(response.data["code"], "permission_denied")
        self.assertFalse(Notification.objects.exists())

    def test_non_positive_target_id_is_a_validation_error(self):
        for field, target in (("user_id", "user"), ("shop_id", "shop"), ("institution_id", "institution")):
            for bad_id in (-1, 0):
                with self.subTest(field=field, value=bad_id):
                    response = self._broadcast(target=target, **{field: bad_id})
                    self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
                    self.assertIn(field, response.data)
        self.assertFalse(BroadcastLog.objects.exists())
        self.assertFalse(Notification.objects.exists())

    def test_service_rejects_non_positive_target_id(self):
        with self.assertRaises(DomainError):
            BroadcastService.send(
                actor=self.admin,
                target=BroadcastTarget(kind="user", user_id=-1),
                title="Exam week",
                message="Deliveries may be delayed.",
            )
        self.assertFalse(BroadcastLog.objects.exists())

    def test_missing_target_id_is_rejected(self):
        response = self._broadcast(target="institution")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(BroadcastLog.objects.exists())

    def test_blank_content_is_rejected(self):
        response = self._broadcast(target="all", title="   ", message="x")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)


class TestAdminAlertEmail(TestCase):

    def _raise_alert(self):
        with self.captureOnCommitCallbacks(execute=True):
            return NotificationDispatcher.alert_admin(
                AdminAlertType.SIGNUP,
                "New user signup",
                "Rahim Uddin (rahim@example.com) just signed up",
            )

    @override_settings(ADMIN_ALERT_EMAIL="admin@boirajjo.test", ADMIN_ALERT_ASYNC=False)
    def test_alert_is_stored_and_mailed(self):
        alert = self._raise_alert()

        self.assertEqual(len(mail.outbox), 1)
        email = mail.outbox[0]
        self.assertEqual(email.subject, f"{ADMIN_ALERT_SUBJECT_PREFIX} New user signup")
        self.assertEqual(email.to, ["admin@boirajjo.test"])
        self.assertIn("just signed up", email.body)

        alert.refresh_from_db()
        self.assertTrue(alert.email_sent)

    @override_settings(ADMIN_ALERT_EMAIL="admin@boirajjo.test", ADMIN_ALERT_ASYNC=False)
    def test_mail_failure_is_swallowed(self):
        with mock.patch(
            "core.domain.notifications.send_mail",
            side_effect=SMTPException("relay down"),
        ):
            alert = self._raise_alert()

        self.assertIsNotNone(alert)
        alert.refresh_from_db()
        self.assertFalse(alert.email_sent)
        self.assertEqual(AdminAlert.objects.count(), 1)

    @override_settings(ADMIN_ALERT_EMAIL="", ADMIN_ALERT_ASYNC=False)
    def test_no_mailbox_configured(self):
        alert = self._raise_alert()
        self.assertEqual(len(mail.outbox), 0)
        alert.refresh_from_db()
        self.assertFalse(alert.email_sent)


class TestSideChannelTasks(TestCase):

    def setUp(self):
        self.executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="test-side-channel")
        self.addCleanup(self.executor.shutdown, wait=True)
        patcher = mock.patch("core.domain.tasks._get_executor", return_value=self.executor)
        patcher.start()
        self.addCleanup(patcher.stop)

    @override_settings(ADMIN_ALERT_ASYNC=True)
    def test_async_job_runs_on_worker_after_commit(self):
        calls = []

        def job(alert_id, *, channel):
            calls.append((alert_id, channel, threading.current_thread().name))

        with self.captureOnCommitCallbacks(execute=True) as callbacks:
            tasks.fire_and_forget(job, 7, channel="email")
            self.assertEqual(calls, [])
        self.executor.shutdown(wait=True)

        self.assertEqual(len(callbacks), 1)
        self.assertEqual(len(calls), 1)
        alert_id, channel, thread_name = calls[0]
        self.assertEqual((alert_id, channel), (7, "email"))
        self.assertTrue(thread_name.startswith("test-side-channel"))

    @override_settings(ADMIN_ALERT_ASYNC=True)
    def test_async_job_failure_is_logged(self):
        def job():
            raise SMTPException("relay down")

        with self.assertLogs("core.domain.tasks", level="ERROR") as logs:
            with self.captureOnCommitCallbacks(execute=True):
                tasks.fire_and_forget(job)
            self.executor.shutdown(wait=True)

        self.assertIn("Side-channel job job failed", logs.output[0])

    @override_settings(ADMIN_ALERT_ASYNC=True)
    def test_nothing_runs_without_commit(self):
        job = mock.Mock()
        with self.captureOnCommitCallbacks(execute=False):
            tasks.fire_and_forget(job)
        self.executor.shutdown(wait=True)
        job.assert_not_called()
