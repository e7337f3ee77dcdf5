"""
Orders app URL configuration.

Route Hierarchy
---------------
  GET/POST /api/orders/                    → list / place order
  GET      /api/orders/{id}/               → retrieve
  GET      /api/orders/{id}/history/       → status transition log
  GET/POST /api/demands/                   → list / request a book
  GET      /api/demands/{id}/              → retrieve
  POST     /api/workflow/transition/       → admin status change (any kind)
"""

from django.urls import include, path
from rest_framework.routers import DefaultRouter

from .views import DemandViewSet, OrderViewSet, TransitionView

router = DefaultRouter()
router.register(
    prefix=r"orders",
    viewset=OrderViewSet,
    basename="order",
)
router.register(
    prefix=r"demands",
    viewset=DemandViewSet,
    basename="demand",
)

urlpatterns = [
    path("workflow/transition/", TransitionView.as_view(), name="workflow-transition"),
    path("", include(router.urls)),
]
