"""
URL configuration for the Django application.

The `urlpatterns` list routes URLs to views. This is the root URL configuration
that includes all app-specific routes.

URL Structure:
    /                              - ReDoc API documentation
    /admin/                        - Django admin interface
    /health/                       - Health check endpoint (for load balancers, Docker)
    /schema/                       - OpenAPI schema (YAML)
    /api/v1/auth/                  - Authentication endpoints
        register/                  - Customer registration
        token/                     - Obtain JWT pair (email/password)
        token/refresh/             - Refresh access token
        me/                        - Current user (GET/PATCH)
    /api/v1/plans/                 - Active plan catalog (public)
        {id}/                      - Plan detail
    /api/v1/subscriptions/         - Subscribe (POST)
        current/                   - Current subscription
        pause/                     - Pause current subscription
        resume/                    - Resume paused subscription
        cancel/                    - Cancel current subscription
        orders/                    - Order history
        payments/                  - Payment history
        admin/stats/               - Dashboard counters (admin role)
        admin/subscriptions/       - All subscriptions (admin role)
        admin/customers/           - Customers with subscription state (admin role)
        admin/products/            - Product catalog (admin role)

For more information, see:
https://docs.djangoproject.com/en/5.2/topics/http/urls/
"""

from django.contrib import admin
from django.urls import include, path
from drf_spectacular.views import SpectacularAPIView, SpectacularRedocView

from core.views import health_check
from subscriptions.urls import plan_urlpatterns

# =============================================================================
# API v1 Routes
# =============================================================================
# All routes here are prefixed with /api/v1/ automatically
api_v1_patterns = [
    path("auth/", include("authentication.urls")),
    path("plans/", include((plan_urlpatterns, "plans"))),
    path("subscriptions/", include("subscriptions.urls")),
]

urlpatterns = [
    # Documentation
    path("", SpectacularRedocView.as_view(url_name="schema"), name="redoc"),
    path("schema/", SpectacularAPIView.as_view(), name="schema"),
    # Admin
    path("admin/", admin.site.urls),
    # Health check (Docker, Kubernetes, load balancers)
    path("health/", health_check, name="health_check"),
    # API v1
    path("api/v1/", include(api_v1_patterns)),
]

# =============================================================================
# Admin Site Customization
# =============================================================================
admin.site.site_header = "Subscription Box Admin"
admin.site.site_title = "Subscription Box Admin"
admin.site.index_title = "Plans, subscriptions and orders"
