"""
Core app URL configuration.

URL prefix (registered in ``backend/urls.py``)::

    path('api/core/', include('core.urls'))

Endpoint summary
----------------
GET  /api/core/constants/                      — Choice enumerations + unlock fee schedule.
POST /api/core/broadcasts/                     — Admin broadcast to a resolved audience.
GET  /api/core/notifications/                  — Most recent notifications of the caller.
GET  /api/core/notifications/unread-count/     — Unread counter.
POST /api/core/notifications/{id}/read/        — Mark a single notification as read.
POST /api/core/notifications/read-all/         — Mark every notification as read.
"""

from django.urls import include, path
from rest_framework.routers import DefaultRouter

from . import views

app_name = "core"

# ── Router for ViewSet-based endpoints ───────────────────────────────
router = DefaultRouter()
router.register(
    prefix=r"notifications",
    viewset=views.NotificationViewSet,
    basename="notification",
)

urlpatterns = [
    # ── System Constants / Enums ─────────────────────────────────────
    path(
        "constants/",
        views.SystemConstantsView.as_view(),
        name="system-constants",
    ),

    # ── Broadcasts ───────────────────────────────────────────────────
    path(
        "broadcasts/",
        views.BroadcastView.as_view(),
        name="broadcast",
    ),

    # ── Notifications (router-generated URLs) ────────────────────────
    path("", include(router.urls)),
]
