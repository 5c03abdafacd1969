"""
Read-only reporting for the admin dashboard.

Usage:
    from subscriptions.services import AdminReportService

    stats = AdminReportService.dashboard_stats()
    stats.total_revenue   # Decimal sum of completed payments
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import TYPE_CHECKING

from django.contrib.auth import get_user_model
from django.db.models import Count, DecimalField, OuterRef, Q, Subquery, Sum, Value
from django.db.models.functions import Coalesce

from authentication.models import UserRole
from core.services import BaseService
from subscriptions.models import Order, Payment, Subscription
from subscriptions.state_machines import PaymentStatus, SubscriptionStatus

if TYPE_CHECKING:
    from django.db.models import QuerySet


@dataclass(frozen=True)
class DashboardStats:
    """Headline counters for the admin dashboard."""

    total_customers: int
    active_subscriptions: int
    paused_subscriptions: int
    cancelled_subscriptions: int
    total_revenue: Decimal
    total_orders: int


class AdminReportService(BaseService):
    """Aggregate and listing queries backing the admin endpoints."""

    @classmethod
    def dashboard_stats(cls) -> DashboardStats:
        """
        Compute dashboard counters.

        Revenue counts completed payments only.
        """
        by_status = Subscription.objects.aggregate(
            active=Count("pk", filter=Q(status=SubscriptionStatus.ACTIVE)),
            paused=Count("pk", filter=Q(status=SubscriptionStatus.PAUSED)),
            cancelled=Count("pk", filter=Q(status=SubscriptionStatus.CANCELLED)),
        )
        revenue = Payment.objects.filter(status=PaymentStatus.COMPLETED).aggregate(
            total=Coalesce(
                Sum("amount"),
                Value(Decimal("0.00")),
                output_field=DecimalField(max_digits=12, decimal_places=2),
            )
        )["total"]

        stats = DashboardStats(
            total_customers=get_user_model().objects.filter(role=UserRole.CUSTOMER).count(),
            active_subscriptions=by_status["active"],
            paused_subscriptions=by_status["paused"],
            cancelled_subscriptions=by_status["cancelled"],
            total_revenue=revenue,
            total_orders=Order.objects.count(),
        )
        cls.get_logger().debug("Computed dashboard stats", extra={"stats": stats})
        return stats

    @classmethod
    def subscriptions(cls) -> QuerySet[Subscription]:
        """All subscriptions with customer and plan, newest first."""
        return Subscription.objects.select_related("customer", "plan").order_by("-created_at")

    @classmethod
    def customers(cls) -> QuerySet:
        """
        Customers annotated with their most recent subscription.

        Annotations:
            subscription_status: Status of the latest subscription (or None)
            plan_name: Plan name of the latest subscription (or None)
        """
        latest = Subscription.objects.filter(customer=OuterRef("pk")).order_by("-created_at")
        return (
            get_user_model()
            .objects.filter(role=UserRole.CUSTOMER)
            .annotate(
                subscription_status=Subquery(latest.values("status")[:1]),
                plan_name=Subquery(latest.values("plan__name")[:1]),
            )
            .order_by("-date_joined")
        )
