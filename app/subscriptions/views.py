"""
Views for the plan catalog and subscription API.

ViewSets:
    PlanViewSet: Public read-only catalog of active plans
    SubscriptionViewSet: Subscribe, lifecycle actions, history and admin reports
    ProductViewSet: Admin product catalog (list, create, update)

Endpoints:
    Plans:
        GET /api/v1/plans/ - List active plans
        GET /api/v1/plans/{id}/ - Get active plan

    Subscriptions:
        POST /api/v1/subscriptions/ - Subscribe to a plan
        GET /api/v1/subscriptions/current/ - Latest subscription (or null)
        POST /api/v1/subscriptions/pause/ - Pause active subscription
        POST /api/v1/subscriptions/resume/ - Resume paused subscription
        POST /api/v1/subscriptions/cancel/ - Cancel active/paused subscription
        GET /api/v1/subscriptions/orders/ - Order history (newest first)
        GET /api/v1/subscriptions/payments/ - Payment history (newest first)

    Admin (admin role):
        GET /api/v1/subscriptions/admin/stats/ - Dashboard counters
        GET /api/v1/subscriptions/admin/subscriptions/ - All subscriptions (paginated)
        GET /api/v1/subscriptions/admin/customers/ - Customers with subscription state (paginated)
        GET /api/v1/subscriptions/admin/products/ - Products (paginated)
        POST /api/v1/subscriptions/admin/products/ - Create product
        GET/PUT/PATCH /api/v1/subscriptions/admin/products/{id}/ - Get or update product

Error responses use BaseApplicationError.to_dict():
    {"error": "...", "error_code": "...", "details": {...}}
"""

from __future__ import annotations

import logging

from drf_spectacular.utils import OpenApiResponse, extend_schema, extend_schema_view
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.settings import api_settings

from authentication.permissions import IsAdminRole
from core.exceptions import (
    BaseApplicationError,
    ConflictError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)
from subscriptions.catalog import PlanCatalog
from subscriptions.exceptions import PaymentDeclinedError, StorageError
from subscriptions.models import Product
from subscriptions.serializers import (
    AdminCustomerSerializer,
    AdminSubscriptionSerializer,
    CurrentSubscriptionSerializer,
    DashboardStatsSerializer,
    LifecycleResponseSerializer,
    OrderSerializer,
    PaymentSerializer,
    PlanSerializer,
    ProductSerializer,
    SubscribeRequestSerializer,
    SubscribeResponseSerializer,
)
from subscriptions.services import AdminReportService, SubscriptionOrchestrator

logger = logging.getLogger(__name__)

# Checked in order; the first matching class wins, so subclasses come first
ERROR_STATUS_CODES: list[tuple[type[BaseApplicationError], int]] = [
    (PaymentDeclinedError, status.HTTP_402_PAYMENT_REQUIRED),
    (StorageError, status.HTTP_503_SERVICE_UNAVAILABLE),
    (ConflictError, status.HTTP_409_CONFLICT),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (PermissionDeniedError, status.HTTP_403_FORBIDDEN),
]


def status_for_error(exc: BaseApplicationError) -> int:
    """Map a domain error to its HTTP status code."""
    for error_class, status_code in ERROR_STATUS_CODES:
        if isinstance(exc, error_class):
            return status_code
    return status.HTTP_400_BAD_REQUEST


ERROR_RESPONSES = {
    400: OpenApiResponse(description="Amount does not match plan price"),
    402: OpenApiResponse(description="Payment declined"),
    404: OpenApiResponse(description="Plan or subscription not found"),
    409: OpenApiResponse(description="Conflicting subscription state"),
    503: OpenApiResponse(description="Storage failure"),
}


# =============================================================================
# Plans
# =============================================================================


@extend_schema_view(
    list=extend_schema(
        operation_id="list_plans",
        summary="List plans",
        description="List all purchasable (active) plans, cheapest first.",
        tags=["Plans"],
    ),
    retrieve=extend_schema(
        operation_id="get_plan",
        summary="Get plan",
        description="Get an active plan by id.",
        tags=["Plans"],
    ),
)
class PlanViewSet(viewsets.ReadOnlyModelViewSet):
    """
    Public catalog of active plans.

    Inactive plans are hidden here but stay attached to the
    subscriptions that were bought on them.
    """

    permission_classes = [AllowAny]
    serializer_class = PlanSerializer
    pagination_class = None

    def get_queryset(self):
        return PlanCatalog().list_active_plans()


# =============================================================================
# Subscriptions
# =============================================================================


class SubscriptionViewSet(viewsets.ViewSet):
    """
    Subscription lifecycle for the authenticated customer.

    The customer is always request.user; there is no way to act on
    another customer's subscription through these endpoints.
    """

    permission_classes = [IsAuthenticated]
    orchestrator_class = SubscriptionOrchestrator

    def get_orchestrator(self) -> SubscriptionOrchestrator:
        return self.orchestrator_class()

    def handle_exception(self, exc):
        """Render domain errors with their mapped status code."""
        if isinstance(exc, BaseApplicationError):
            status_code = status_for_error(exc)
            logger.info(
                "Subscription request rejected",
                extra={
                    "error_code": exc.error_code,
                    "status_code": status_code,
                    "user_id": getattr(self.request.user, "pk", None),
                },
            )
            return Response(exc.to_dict(), status=status_code)
        return super().handle_exception(exc)

    # -------------------------------------------------------------------------
    # Subscribe
    # -------------------------------------------------------------------------

    @extend_schema(
        operation_id="subscribe",
        summary="Subscribe to a plan",
        description=(
            "Charge the plan price and create an active subscription with its "
            "first payment and pending order. Fails with 409 if the customer "
            "already has an active or paused subscription."
        ),
        request=SubscribeRequestSerializer,
        responses={201: SubscribeResponseSerializer, **ERROR_RESPONSES},
        tags=["Subscriptions"],
    )
    def create(self, request):
        serializer = SubscribeRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        result = self.get_orchestrator().subscribe(
            customer_id=request.user.pk,
            plan_id=data["plan_id"],
            amount=data["amount"],
            payment_method=data.get("payment_method"),
        )

        response = SubscribeResponseSerializer(
            {"subscription": result.subscription, "transaction_id": result.transaction_id}
        )
        return Response(response.data, status=status.HTTP_201_CREATED)

    # -------------------------------------------------------------------------
    # Current subscription and lifecycle
    # -------------------------------------------------------------------------

    @extend_schema(
        operation_id="get_current_subscription",
        summary="Get current subscription",
        description="Most recent subscription in any status, or null if none exists.",
        responses={200: CurrentSubscriptionSerializer},
        tags=["Subscriptions"],
    )
    @action(detail=False, methods=["get"])
    def current(self, request):
        subscription = self.get_orchestrator().get_subscription(request.user.pk)
        return Response(CurrentSubscriptionSerializer({"subscription": subscription}).data)

    @extend_schema(
        operation_id="pause_subscription",
        summary="Pause subscription",
        request=None,
        responses={200: LifecycleResponseSerializer, **ERROR_RESPONSES},
        tags=["Subscriptions"],
    )
    @action(detail=False, methods=["post"])
    def pause(self, request):
        subscription = self.get_orchestrator().pause(request.user.pk)
        return self._lifecycle_response("Subscription paused", subscription)

    @extend_schema(
        operation_id="resume_subscription",
        summary="Resume subscription",
        request=None,
        responses={200: LifecycleResponseSerializer, **ERROR_RESPONSES},
        tags=["Subscriptions"],
    )
    @action(detail=False, methods=["post"])
    def resume(self, request):
        subscription = self.get_orchestrator().resume(request.user.pk)
        return self._lifecycle_response("Subscription resumed", subscription)

    @extend_schema(
        operation_id="cancel_subscription",
        summary="Cancel subscription",
        request=None,
        responses={200: LifecycleResponseSerializer, **ERROR_RESPONSES},
        tags=["Subscriptions"],
    )
    @action(detail=False, methods=["post"])
    def cancel(self, request):
        subscription = self.get_orchestrator().cancel(request.user.pk)
        return self._lifecycle_response("Subscription cancelled", subscription)

    def _lifecycle_response(self, message, subscription):
        serializer = LifecycleResponseSerializer(
            {"message": message, "subscription": subscription}
        )
        return Response(serializer.data)

    # -------------------------------------------------------------------------
    # History
    # -------------------------------------------------------------------------

    @extend_schema(
        operation_id="list_orders",
        summary="List orders",
        description="Orders across all of the customer's subscriptions, newest first.",
        responses={200: OrderSerializer(many=True)},
        tags=["Subscriptions"],
    )
    @action(detail=False, methods=["get"])
    def orders(self, request):
        orders = self.get_orchestrator().get_orders(request.user.pk)
        return Response(OrderSerializer(orders, many=True).data)

    @extend_schema(
        operation_id="list_payments",
        summary="List payments",
        description="Payments across all of the customer's subscriptions, newest first.",
        responses={200: PaymentSerializer(many=True)},
        tags=["Subscriptions"],
    )
    @action(detail=False, methods=["get"])
    def payments(self, request):
        payments = self.get_orchestrator().get_payments(request.user.pk)
        return Response(PaymentSerializer(payments, many=True).data)

    # -------------------------------------------------------------------------
    # Admin reports
    # -------------------------------------------------------------------------

    @extend_schema(
        operation_id="admin_dashboard_stats",
        summary="Dashboard stats",
        responses={200: DashboardStatsSerializer},
        tags=["Subscriptions - Admin"],
    )
    @action(
        detail=False,
        methods=["get"],
        url_path="admin/stats",
        permission_classes=[IsAuthenticated, IsAdminRole],
    )
    def admin_stats(self, request):
        stats = AdminReportService.dashboard_stats()
        return Response(DashboardStatsSerializer(stats).data)

    @extend_schema(
        operation_id="admin_list_subscriptions",
        summary="List all subscriptions",
        responses={200: AdminSubscriptionSerializer(many=True)},
        tags=["Subscriptions - Admin"],
    )
    @action(
        detail=False,
        methods=["get"],
        url_path="admin/subscriptions",
        permission_classes=[IsAuthenticated, IsAdminRole],
    )
    def admin_subscriptions(self, request):
        return self._paginated(AdminReportService.subscriptions(), AdminSubscriptionSerializer)

    @extend_schema(
        operation_id="admin_list_customers",
        summary="List customers",
        responses={200: AdminCustomerSerializer(many=True)},
        tags=["Subscriptions - Admin"],
    )
    @action(
        detail=False,
        methods=["get"],
        url_path="admin/customers",
        permission_classes=[IsAuthenticated, IsAdminRole],
    )
    def admin_customers(self, request):
        return self._paginated(AdminReportService.customers(), AdminCustomerSerializer)

    def _paginated(self, queryset, serializer_class):
        paginator = api_settings.DEFAULT_PAGINATION_CLASS()
        page = paginator.paginate_queryset(queryset, self.request, view=self)
        serializer = serializer_class(page, many=True)
        return paginator.get_paginated_response(serializer.data)


# =============================================================================
# Products (admin)
# =============================================================================


@extend_schema_view(
    list=extend_schema(
        operation_id="admin_list_products",
        summary="List products",
        description="List all products, newest first, including inactive ones.",
        tags=["Subscriptions - Admin"],
    ),
    create=extend_schema(
        operation_id="admin_create_product",
        summary="Create product",
        tags=["Subscriptions - Admin"],
    ),
    retrieve=extend_schema(
        operation_id="admin_get_product",
        summary="Get product",
        tags=["Subscriptions - Admin"],
    ),
    update=extend_schema(
        operation_id="admin_update_product",
        summary="Update product",
        tags=["Subscriptions - Admin"],
    ),
    partial_update=extend_schema(
        operation_id="admin_partial_update_product",
        summary="Partially update product",
        tags=["Subscriptions - Admin"],
    ),
)
class ProductViewSet(viewsets.ModelViewSet):
    """
    Admin management of box products.

    Products are retired with is_active=False rather than deleted.
    """

    permission_classes = [IsAuthenticated, IsAdminRole]
    serializer_class = ProductSerializer
    queryset = Product.objects.all()
    http_method_names = ["get", "post", "put", "patch", "head", "options"]
