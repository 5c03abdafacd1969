"""
Tests for the plan and subscription API endpoints.

Covers request validation, the error-to-status mapping, role gating on
admin endpoints and response shapes.
"""

import uuid
from decimal import Decimal

import pytest
from django.urls import reverse
from rest_framework import status

from subscriptions.models import Order, Payment, Product, Subscription
from subscriptions.simulator import DeclineKind, PaymentOutcome
from subscriptions.state_machines import SubscriptionStatus
from subscriptions.tests.factories import (
    OrderFactory,
    PaymentFactory,
    ProductFactory,
    SubscriptionFactory,
)


def subscribe_url():
    return reverse("subscriptions:subscription-list")


def subscribe_payload(plan, amount="19.99"):
    return {"plan_id": str(plan.pk), "amount": amount}


# =============================================================================
# Plans
# =============================================================================


@pytest.mark.django_db
class TestPlanViews:
    """Tests for /api/v1/plans/."""

    def test_list_is_public_and_active_only(self, api_client, plan, annual_plan, inactive_plan):
        response = api_client.get(reverse("plans:plan-list"))

        assert response.status_code == status.HTTP_200_OK
        assert [p["name"] for p in response.data] == ["Basic Box", "Annual Box"]
        assert response.data[0]["price"] == "19.99"
        assert response.data[0]["billing_interval"] == "monthly"

    def test_detail(self, api_client, plan):
        response = api_client.get(reverse("plans:plan-detail", args=[plan.pk]))

        assert response.status_code == status.HTTP_200_OK
        assert response.data["id"] == str(plan.pk)

    def test_inactive_plan_detail_not_found(self, api_client, inactive_plan):
        response = api_client.get(reverse("plans:plan-detail", args=[inactive_plan.pk]))

        assert response.status_code == status.HTTP_404_NOT_FOUND


# =============================================================================
# Subscribe
# =============================================================================


@pytest.mark.django_db
class TestSubscribeView:
    """Tests for POST /api/v1/subscriptions/."""

    def test_subscribe(self, customer_client, customer, plan):
        response = customer_client.post(subscribe_url(), subscribe_payload(plan), format="json")

        assert response.status_code == status.HTTP_201_CREATED
        body = response.data["subscription"]
        assert body["status"] == SubscriptionStatus.ACTIVE
        assert body["plan_id"] == str(plan.pk)
        assert body["plan_name"] == "Basic Box"
        assert body["price"] == "19.99"
        assert response.data["transaction_id"].startswith("sim_")
        assert Subscription.objects.filter(customer=customer).count() == 1
        assert Payment.objects.filter(subscription__customer=customer).count() == 1
        assert Order.objects.filter(subscription__customer=customer).count() == 1

    def test_requires_authentication(self, api_client, plan):
        response = api_client.post(subscribe_url(), subscribe_payload(plan), format="json")

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_missing_fields(self, customer_client, plan):
        response = customer_client.post(subscribe_url(), {}, format="json")

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert "plan_id" in response.data
        assert "amount" in response.data

    def test_non_positive_amount(self, customer_client, plan):
        response = customer_client.post(
            subscribe_url(), subscribe_payload(plan, amount="0.00"), format="json"
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert "amount" in response.data

    def test_amount_mismatch(self, customer_client, customer, plan):
        response = customer_client.post(
            subscribe_url(), subscribe_payload(plan, amount="9.99"), format="json"
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data["error_code"] == "AMOUNT_MISMATCH"
        assert not Subscription.objects.filter(customer=customer).exists()

    def test_unknown_plan(self, customer_client, catalog):
        response = customer_client.post(
            subscribe_url(), {"plan_id": str(uuid.uuid4()), "amount": "19.99"}, format="json"
        )

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.data["error_code"] == "PLAN_NOT_FOUND"

    def test_second_subscription_conflicts(self, customer_client, plan, paused_subscription):
        response = customer_client.post(subscribe_url(), subscribe_payload(plan), format="json")

        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.data["error_code"] == "ACTIVE_SUBSCRIPTION_EXISTS"
        assert response.data["details"]["subscription_id"] == str(paused_subscription.pk)

    def test_lock_contention_conflicts(self, customer_client, plan, mock_redis, settings):
        settings.SUBSCRIPTION_LOCK_TIMEOUT_SECONDS = 0.1
        mock_redis.set.return_value = False

        response = customer_client.post(subscribe_url(), subscribe_payload(plan), format="json")

        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.data["error_code"] == "LOCK_ACQUISITION_FAILED"

    def test_declined_payment(self, mocker, customer_client, plan):
        mocker.patch(
            "subscriptions.simulator.PaymentSimulator.charge",
            return_value=PaymentOutcome(
                success=False,
                transaction_id="",
                amount=Decimal("19.99"),
                method="card",
                error_kind=DeclineKind.DECLINED,
            ),
        )

        response = customer_client.post(subscribe_url(), subscribe_payload(plan), format="json")

        assert response.status_code == status.HTTP_402_PAYMENT_REQUIRED
        assert response.data["error_code"] == "PAYMENT_DECLINED"


# =============================================================================
# Current subscription and lifecycle
# =============================================================================


@pytest.mark.django_db
class TestLifecycleViews:
    """Tests for current, pause, resume and cancel endpoints."""

    def test_current_none(self, customer_client):
        response = customer_client.get(reverse("subscriptions:subscription-current"))

        assert response.status_code == status.HTTP_200_OK
        assert response.data == {"subscription": None}

    def test_current_returns_cancelled(self, customer_client, cancelled_subscription):
        response = customer_client.get(reverse("subscriptions:subscription-current"))

        assert response.data["subscription"]["id"] == str(cancelled_subscription.pk)
        assert response.data["subscription"]["status"] == SubscriptionStatus.CANCELLED

    def test_pause_resume_cancel(self, customer_client, active_subscription):
        pause = customer_client.post(reverse("subscriptions:subscription-pause"))
        assert pause.status_code == status.HTTP_200_OK
        assert pause.data["message"] == "Subscription paused"
        assert pause.data["subscription"]["status"] == SubscriptionStatus.PAUSED

        resume = customer_client.post(reverse("subscriptions:subscription-resume"))
        assert resume.status_code == status.HTTP_200_OK
        assert resume.data["subscription"]["status"] == SubscriptionStatus.ACTIVE

        cancel = customer_client.post(reverse("subscriptions:subscription-cancel"))
        assert cancel.status_code == status.HTTP_200_OK
        assert cancel.data["subscription"]["status"] == SubscriptionStatus.CANCELLED
        assert cancel.data["subscription"]["cancelled_at"] is not None

    def test_pause_paused_conflicts(self, customer_client, paused_subscription):
        response = customer_client.post(reverse("subscriptions:subscription-pause"))

        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.data["error_code"] == "INVALID_STATE_TRANSITION"

    def test_resume_active_conflicts(self, customer_client, active_subscription):
        response = customer_client.post(reverse("subscriptions:subscription-resume"))

        assert response.status_code == status.HTTP_409_CONFLICT

    @pytest.mark.parametrize("action", ["pause", "resume", "cancel"])
    def test_no_subscription_not_found(self, customer_client, cancelled_subscription, action):
        response = customer_client.post(reverse(f"subscriptions:subscription-{action}"))

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.data["error_code"] == "SUBSCRIPTION_NOT_FOUND"

    def test_requires_authentication(self, api_client):
        response = api_client.post(reverse("subscriptions:subscription-cancel"))

        assert response.status_code == status.HTTP_401_UNAUTHORIZED


# =============================================================================
# History
# =============================================================================


@pytest.mark.django_db
class TestHistoryViews:
    """Tests for order and payment history endpoints."""

    def test_orders_only_for_current_customer(
        self, customer_client, other_customer, plan, active_subscription
    ):
        own = OrderFactory(subscription=active_subscription)
        OrderFactory(subscription=SubscriptionFactory(customer=other_customer, plan=plan))

        response = customer_client.get(reverse("subscriptions:subscription-orders"))

        assert response.status_code == status.HTTP_200_OK
        assert [o["id"] for o in response.data] == [str(own.pk)]
        assert response.data[0]["status"] == "pending"
        assert response.data[0]["total_amount"] == "19.99"

    def test_payments(self, customer_client, active_subscription):
        payment = PaymentFactory(subscription=active_subscription)

        response = customer_client.get(reverse("subscriptions:subscription-payments"))

        assert response.status_code == status.HTTP_200_OK
        assert [p["id"] for p in response.data] == [str(payment.pk)]
        assert response.data[0]["transaction_id"] == payment.transaction_id

    def test_empty_history(self, customer_client):
        response = customer_client.get(reverse("subscriptions:subscription-payments"))

        assert response.status_code == status.HTTP_200_OK
        assert response.data == []


# =============================================================================
# Admin
# =============================================================================


@pytest.mark.django_db
class TestAdminViews:
    """Tests for role-gated admin endpoints."""

    @pytest.mark.parametrize(
        "name",
        [
            "subscriptions:subscription-admin-stats",
            "subscriptions:subscription-admin-subscriptions",
            "subscriptions:subscription-admin-customers",
        ],
    )
    def test_customer_forbidden(self, customer_client, name):
        response = customer_client.get(reverse(name))

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_stats(self, admin_client, customer, plan):
        subscription = SubscriptionFactory(customer=customer, plan=plan)
        PaymentFactory(subscription=subscription)
        OrderFactory(subscription=subscription)

        response = admin_client.get(reverse("subscriptions:subscription-admin-stats"))

        assert response.status_code == status.HTTP_200_OK
        assert response.data["total_customers"] == 1
        assert response.data["active_subscriptions"] == 1
        assert response.data["total_revenue"] == "19.99"
        assert response.data["total_orders"] == 1

    def test_subscriptions_paginated(self, admin_client, customer, active_subscription):
        response = admin_client.get(reverse("subscriptions:subscription-admin-subscriptions"))

        assert response.status_code == status.HTTP_200_OK
        assert response.data["count"] == 1
        row = response.data["results"][0]
        assert row["id"] == str(active_subscription.pk)
        assert row["customer_email"] == customer.email
        assert row["customer_name"] == "Test Customer"

    def test_customers(self, admin_client, customer, paused_subscription):
        response = admin_client.get(reverse("subscriptions:subscription-admin-customers"))

        assert response.status_code == status.HTTP_200_OK
        assert response.data["count"] == 1
        row = response.data["results"][0]
        assert row["email"] == customer.email
        assert row["subscription_status"] == SubscriptionStatus.PAUSED
        assert row["plan_name"] == "Basic Box"


# =============================================================================
# Products (admin)
# =============================================================================


def product_list_url():
    return reverse("subscriptions:admin-product-list")


def product_detail_url(product):
    return reverse("subscriptions:admin-product-detail", args=[product.pk])


@pytest.mark.django_db
class TestProductViews:
    """Tests for /api/v1/subscriptions/admin/products/."""

    def test_anonymous_unauthorized(self, api_client):
        response = api_client.get(product_list_url())

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_customer_forbidden(self, customer_client):
        product = ProductFactory()

        assert customer_client.get(product_list_url()).status_code == status.HTTP_403_FORBIDDEN
        response = customer_client.post(product_list_url(), {"name": "Mug", "price": "9.00"})
        assert response.status_code == status.HTTP_403_FORBIDDEN
        response = customer_client.patch(product_detail_url(product), {"stock_quantity": 0})
        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_list_includes_inactive(self, admin_client):
        active = ProductFactory()
        retired = ProductFactory(is_active=False)

        response = admin_client.get(product_list_url())

        assert response.status_code == status.HTTP_200_OK
        assert response.data["count"] == 2
        assert {row["id"] for row in response.data["results"]} == {
            str(active.pk),
            str(retired.pk),
        }

    def test_create(self, admin_client):
        response = admin_client.post(
            product_list_url(),
            {"name": "Scented Candle", "description": "Lavender", "price": "12.50"},
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data["stock_quantity"] == 0
        assert response.data["is_active"] is True
        product = Product.objects.get(pk=response.data["id"])
        assert product.price == Decimal("12.50")

    @pytest.mark.parametrize(
        "payload",
        [
            {"price": "12.50"},
            {"name": "Scented Candle"},
            {"name": "Scented Candle", "price": "0.00"},
            {"name": "Scented Candle", "price": "12.50", "stock_quantity": -1},
        ],
    )
    def test_create_invalid(self, admin_client, payload):
        response = admin_client.post(product_list_url(), payload)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert not Product.objects.exists()

    def test_partial_update_keeps_other_fields(self, admin_client):
        product = ProductFactory(name="Tea Sampler", price=Decimal("6.00"), stock_quantity=5)

        response = admin_client.patch(
            product_detail_url(product), {"stock_quantity": 20, "is_active": False}
        )

        assert response.status_code == status.HTTP_200_OK
        stored = Product.objects.get(pk=product.pk)
        assert stored.stock_quantity == 20
        assert stored.is_active is False
        assert stored.name == "Tea Sampler"
        assert stored.price == Decimal("6.00")

    def test_update_missing_product(self, admin_client):
        response = admin_client.patch(
            reverse("subscriptions:admin-product-detail", args=[uuid.uuid4()]),
            {"stock_quantity": 1},
        )

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_delete_not_allowed(self, admin_client):
        product = ProductFactory()

        response = admin_client.delete(product_detail_url(product))

        assert response.status_code == status.HTTP_405_METHOD_NOT_ALLOWED
        assert Product.objects.filter(pk=product.pk).exists()
