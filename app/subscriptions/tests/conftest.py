"""
Pytest fixtures for subscription tests.

Redis is mocked for every test in this package so the per-customer lock
always acquires without a running server. Tests that exercise contention
reconfigure ``mock_redis.set``.

The seeded catalog plans are deactivated so each test controls which
plans are purchasable.

Usage:
    def test_pause(customer, active_subscription):
        SubscriptionOrchestrator().pause(customer.pk)
"""

from decimal import Decimal

import pytest
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

from authentication.tests.factories import AdminUserFactory, UserFactory
from subscriptions.models import Plan
from subscriptions.state_machines import BillingInterval, SubscriptionStatus
from subscriptions.tests.factories import PlanFactory, SubscriptionFactory


# =============================================================================
# Infrastructure
# =============================================================================


@pytest.fixture(autouse=True)
def mock_redis(mocker):
    """
    Mock Redis client for distributed lock tests.

    Returns a MagicMock configured so locks acquire and release cleanly.
    """
    mock_client = mocker.MagicMock()
    mock_client.set.return_value = True
    mock_client.eval.return_value = 1

    mocker.patch(
        "subscriptions.locks.get_redis_connection",
        return_value=mock_client,
    )
    return mock_client


@pytest.fixture
def catalog(db):
    """Deactivate seeded plans so tests start from an empty catalog."""
    Plan.objects.update(is_active=False)


# =============================================================================
# Users and Clients
# =============================================================================


@pytest.fixture
def customer(db):
    """Create a customer."""
    return UserFactory(first_name="Test", last_name="Customer")


@pytest.fixture
def other_customer(db):
    return UserFactory()


@pytest.fixture
def admin_user(db):
    """Create a user holding the admin role."""
    return AdminUserFactory()


def _client_for(user):
    client = APIClient()
    refresh = RefreshToken.for_user(user)
    client.credentials(HTTP_AUTHORIZATION=f"Bearer {refresh.access_token}")
    return client


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def customer_client(customer):
    """API client authenticated as the customer fixture."""
    return _client_for(customer)


@pytest.fixture
def admin_client(admin_user):
    """API client authenticated as the admin fixture."""
    return _client_for(admin_user)


# =============================================================================
# Plans
# =============================================================================


@pytest.fixture
def plan(catalog):
    """Active monthly plan at 19.99."""
    return PlanFactory(name="Basic Box", price=Decimal("19.99"))


@pytest.fixture
def quarterly_plan(catalog):
    return PlanFactory(
        name="Quarterly Box",
        price=Decimal("54.99"),
        billing_interval=BillingInterval.QUARTERLY,
    )


@pytest.fixture
def annual_plan(catalog):
    return PlanFactory(
        name="Annual Box",
        price=Decimal("199.99"),
        billing_interval=BillingInterval.ANNUALLY,
    )


@pytest.fixture
def inactive_plan(catalog):
    return PlanFactory(name="Retired Box", is_active=False)


# =============================================================================
# Subscriptions
# =============================================================================


@pytest.fixture
def active_subscription(customer, plan):
    """Active subscription for the customer fixture."""
    return SubscriptionFactory(customer=customer, plan=plan)


@pytest.fixture
def paused_subscription(customer, plan):
    """Paused subscription for the customer fixture."""
    return SubscriptionFactory(customer=customer, plan=plan, status=SubscriptionStatus.PAUSED)


@pytest.fixture
def cancelled_subscription(customer, plan):
    """Cancelled subscription for the customer fixture."""
    return SubscriptionFactory(
        customer=customer, plan=plan, status=SubscriptionStatus.CANCELLED
    )
