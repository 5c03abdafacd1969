"""
Serializers for the plan and subscription APIs.

Serializers:
    PlanSerializer: Public plan catalog entry
    SubscriptionSerializer: Subscription with flattened plan details
    SubscribeRequestSerializer: Subscribe request body
    SubscribeResponseSerializer: Subscribe response (subscription + transaction id)
    CurrentSubscriptionSerializer: {"subscription": obj | null}
    LifecycleResponseSerializer: Pause/resume/cancel confirmation
    OrderSerializer / PaymentSerializer: History rows
    DashboardStatsSerializer: Admin dashboard counters
    AdminSubscriptionSerializer: Subscription with customer details
    AdminCustomerSerializer: Customer with latest subscription status
    ProductSerializer: Admin product catalog entry
"""

from __future__ import annotations

from decimal import Decimal

from rest_framework import serializers

from authentication.models import User
from subscriptions.models import Order, Payment, Plan, Product, Subscription


class PlanSerializer(serializers.ModelSerializer):
    """Read-only serializer for plan catalog entries."""

    class Meta:
        model = Plan
        fields = [
            "id",
            "name",
            "description",
            "price",
            "billing_interval",
            "is_active",
        ]
        read_only_fields = fields


class SubscriptionSerializer(serializers.ModelSerializer):
    """
    Subscription with the plan's name, price and interval flattened in.

    Usage:
        SubscriptionSerializer(subscription).data
    """

    plan_id = serializers.UUIDField(source="plan.id", read_only=True)
    plan_name = serializers.CharField(source="plan.name", read_only=True)
    price = serializers.DecimalField(
        source="plan.price", max_digits=10, decimal_places=2, read_only=True
    )
    billing_interval = serializers.CharField(source="plan.billing_interval", read_only=True)

    class Meta:
        model = Subscription
        fields = [
            "id",
            "plan_id",
            "plan_name",
            "price",
            "billing_interval",
            "status",
            "current_period_start",
            "current_period_end",
            "cancelled_at",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class SubscribeRequestSerializer(serializers.Serializer):
    """Request body for subscribing to a plan."""

    plan_id = serializers.UUIDField()
    amount = serializers.DecimalField(
        max_digits=10,
        decimal_places=2,
        min_value=Decimal("0.01"),
        help_text="Must equal the plan price",
    )
    payment_method = serializers.CharField(max_length=30, required=False)


class SubscribeResponseSerializer(serializers.Serializer):
    subscription = SubscriptionSerializer()
    transaction_id = serializers.CharField()


class CurrentSubscriptionSerializer(serializers.Serializer):
    subscription = SubscriptionSerializer(allow_null=True)


class LifecycleResponseSerializer(serializers.Serializer):
    message = serializers.CharField()
    subscription = SubscriptionSerializer()


class OrderSerializer(serializers.ModelSerializer):
    class Meta:
        model = Order
        fields = ["id", "subscription", "status", "total_amount", "created_at"]
        read_only_fields = fields


class PaymentSerializer(serializers.ModelSerializer):
    class Meta:
        model = Payment
        fields = [
            "id",
            "subscription",
            "amount",
            "status",
            "method",
            "transaction_id",
            "created_at",
        ]
        read_only_fields = fields


class DashboardStatsSerializer(serializers.Serializer):
    """Admin dashboard counters."""

    total_customers = serializers.IntegerField()
    active_subscriptions = serializers.IntegerField()
    paused_subscriptions = serializers.IntegerField()
    cancelled_subscriptions = serializers.IntegerField()
    total_revenue = serializers.DecimalField(max_digits=12, decimal_places=2)
    total_orders = serializers.IntegerField()


class AdminSubscriptionSerializer(SubscriptionSerializer):
    """Subscription listing row for admins, including the customer."""

    customer_id = serializers.IntegerField(source="customer.id", read_only=True)
    customer_email = serializers.EmailField(source="customer.email", read_only=True)
    customer_name = serializers.CharField(source="customer.get_full_name", read_only=True)

    class Meta(SubscriptionSerializer.Meta):
        fields = [
            *SubscriptionSerializer.Meta.fields,
            "customer_id",
            "customer_email",
            "customer_name",
        ]
        read_only_fields = fields


class AdminCustomerSerializer(serializers.ModelSerializer):
    """Customer listing row with the latest subscription's status and plan."""

    subscription_status = serializers.CharField(read_only=True, allow_null=True)
    plan_name = serializers.CharField(read_only=True, allow_null=True)

    class Meta:
        model = User
        fields = [
            "id",
            "email",
            "first_name",
            "last_name",
            "date_joined",
            "subscription_status",
            "plan_name",
        ]
        read_only_fields = fields


class ProductSerializer(serializers.ModelSerializer):
    """Admin product catalog entry; PATCH updates only the given fields."""

    class Meta:
        model = Product
        fields = [
            "id",
            "name",
            "description",
            "price",
            "stock_quantity",
            "is_active",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["id", "created_at", "updated_at"]
