"""
Shops app URL configuration.

Route Hierarchy
---------------
  GET      /api/shops/                         → shop directory
  GET      /api/shops/{id}/                    → shop card
  GET      /api/shops/{id}/books/              → available catalogue
  GET      /api/shops/{shop_pk}/orders/        → shop owner's incoming orders
  GET/POST /api/shop-orders/                   → customer list / place
  GET      /api/shop-orders/{id}/              → retrieve
  PATCH    /api/shop-orders/{id}/shop-notes/   → shop owner annotation
"""

from django.urls import include, path
from rest_framework.routers import DefaultRouter
from rest_framework_nested.routers import NestedDefaultRouter

from .views import ShopIncomingOrderViewSet, ShopOrderViewSet, ShopViewSet

# ── Primary Router ──────────────────────────────────────────────────
router = DefaultRouter()
router.register(
    prefix=r"shops",
    viewset=ShopViewSet,
    basename="shop",
)
router.register(
    prefix=r"shop-orders",
    viewset=ShopOrderViewSet,
    basename="shop-order",
)

# ── Nested Router (under /shops/{shop_pk}/) ─────────────────────────
shops_router = NestedDefaultRouter(
    parent_router=router,
    parent_prefix=r"shops",
    lookup="shop",
)
shops_router.register(
    prefix=r"orders",
    viewset=ShopIncomingOrderViewSet,
    basename="shop-incoming-order",
)

urlpatterns = [
    path("", include(router.urls)),
    path("", include(shops_router.urls)),
]
