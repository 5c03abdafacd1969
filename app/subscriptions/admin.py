"""
Django admin configuration for subscription models.

- Plans are editable, except price and billing interval once subscribed to
- Products are fully editable
- Subscriptions, payments and orders are read-only; changes go through
  SubscriptionOrchestrator so locking and state rules apply
"""

from django.contrib import admin

from subscriptions.models import Order, Payment, Plan, Product, Subscription
from subscriptions.models.plan import FROZEN_PLAN_FIELDS


class ReadOnlyAdminMixin:
    """Disable add, change and delete in the admin."""

    def has_add_permission(self, request) -> bool:
        return False

    def has_change_permission(self, request, obj=None) -> bool:
        return False

    def has_delete_permission(self, request, obj=None) -> bool:
        return False


@admin.register(Plan)
class PlanAdmin(admin.ModelAdmin):
    """
    Admin configuration for Plan.

    Retire plans by unticking is_active; referenced plans cannot be
    deleted (PROTECT) and their price and interval are locked.
    """

    list_display = ["name", "price", "billing_interval", "is_active", "created_at"]
    list_filter = ["billing_interval", "is_active"]
    search_fields = ["name", "description"]
    ordering = ["price", "name"]

    def get_readonly_fields(self, request, obj=None):
        readonly = ["id", "created_at", "updated_at"]
        if obj is not None and obj.subscriptions.exists():
            readonly.extend(FROZEN_PLAN_FIELDS)
        return readonly


@admin.register(Subscription)
class SubscriptionAdmin(ReadOnlyAdminMixin, admin.ModelAdmin):
    list_display = [
        "id",
        "customer",
        "plan",
        "status",
        "current_period_start",
        "current_period_end",
        "created_at",
    ]
    list_filter = ["status", "plan"]
    search_fields = ["id", "customer__email"]
    list_select_related = ["customer", "plan"]
    date_hierarchy = "created_at"
    ordering = ["-created_at"]


@admin.register(Payment)
class PaymentAdmin(ReadOnlyAdminMixin, admin.ModelAdmin):
    """
    Admin configuration for Payment.

    Payments are append-only; corrections are new rows, never edits.
    """

    list_display = [
        "id",
        "subscription",
        "amount",
        "status",
        "method",
        "transaction_id",
        "created_at",
    ]
    list_filter = ["status", "method"]
    search_fields = ["id", "transaction_id", "subscription__customer__email"]
    date_hierarchy = "created_at"
    ordering = ["-created_at"]


@admin.register(Order)
class OrderAdmin(ReadOnlyAdminMixin, admin.ModelAdmin):
    list_display = ["id", "subscription", "status", "total_amount", "created_at"]
    list_filter = ["status"]
    search_fields = ["id", "subscription__customer__email"]
    ordering = ["-created_at"]


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = ["name", "price", "stock_quantity", "is_active", "created_at"]
    list_filter = ["is_active"]
    search_fields = ["name", "description"]
    readonly_fields = ["id", "created_at", "updated_at"]
