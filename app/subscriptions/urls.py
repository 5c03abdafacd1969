"""
URL configuration for plans and subscriptions API.

Routes (mounted at /api/v1/subscriptions/):
    /                          - Subscribe (POST)
    /current/                  - Latest subscription (GET)
    /pause/                    - Pause (POST)
    /resume/                   - Resume (POST)
    /cancel/                   - Cancel (POST)
    /orders/                   - Order history (GET)
    /payments/                 - Payment history (GET)
    /admin/stats/              - Dashboard counters (GET, admin)
    /admin/subscriptions/      - All subscriptions (GET, admin)
    /admin/customers/          - Customers (GET, admin)
    /admin/products/           - Products (GET, POST, admin)
    /admin/products/{id}/      - Product (GET, PUT, PATCH, admin)

Plan routes (mounted at /api/v1/plans/ via plan_urlpatterns):
    /                          - List active plans (GET)
    /{id}/                     - Plan detail (GET)
"""

from rest_framework.routers import DefaultRouter, SimpleRouter

from subscriptions.views import PlanViewSet, ProductViewSet, SubscriptionViewSet

router = DefaultRouter()
router.register(r"admin/products", ProductViewSet, basename="admin-product")
router.register(r"", SubscriptionViewSet, basename="subscription")

plan_router = SimpleRouter()
plan_router.register(r"", PlanViewSet, basename="plan")

plan_urlpatterns = plan_router.urls

app_name = "subscriptions"
urlpatterns = router.urls
