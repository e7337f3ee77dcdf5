"""
Unlocks app URL configuration.

Route Hierarchy
---------------
  GET/POST /api/unlocks/                         → list / submit payment
  GET      /api/unlocks/{id}/                    → retrieve
  POST     /api/unlocks/{id}/resolve/            → admin approve / reject
  POST     /api/unlocks/{id}/refund-request/     → payer asks for refund
  POST     /api/unlocks/{id}/refund-resolve/     → admin decides refund
  GET      /api/unlocks/quote/{book_id}/         → fee + payee number
  GET      /api/unlocks/contact/{book_id}/       → gated seller contact
"""

from rest_framework.routers import DefaultRouter

from .views import UnlockPaymentViewSet

router = DefaultRouter()
router.register(
    prefix=r"unlocks",
    viewset=UnlockPaymentViewSet,
    basename="unlock",
)

urlpatterns = router.urls
