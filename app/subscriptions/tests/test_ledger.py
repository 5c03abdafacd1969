"""
Tests for SubscriptionLedger.

Covers creation under the one-non-terminal-subscription invariant
(including when the application-level lookup misses a concurrent create),
status transitions and customer history lookups.
"""

import uuid
from datetime import timedelta

import pytest
from django.db import DatabaseError
from django.db.models import QuerySet
from django.utils import timezone
from freezegun import freeze_time

from core.exceptions import NotFoundError
from subscriptions.exceptions import (
    ActiveSubscriptionExistsError,
    InvalidTransitionError,
    StorageError,
    SubscriptionNotFoundError,
)
from subscriptions.ledger import SubscriptionLedger
from subscriptions.models import Subscription
from subscriptions.state_machines import SubscriptionStatus
from subscriptions.tests.factories import (
    OrderFactory,
    PaymentFactory,
    SubscriptionFactory,
)


def period():
    start = timezone.now()
    return start, start + timedelta(days=30)


@pytest.mark.django_db
class TestLedgerCreate:
    """Tests for SubscriptionLedger.create."""

    def test_creates_active_subscription(self, customer, plan):
        start, end = period()

        subscription = SubscriptionLedger().create(customer.pk, plan.pk, start, end)

        stored = Subscription.objects.get(pk=subscription.pk)
        assert stored.status == SubscriptionStatus.ACTIVE
        assert stored.customer_id == customer.pk
        assert stored.plan_id == plan.pk
        assert stored.current_period_start == start
        assert stored.current_period_end == end

    def test_rejects_when_active_exists(self, customer, plan, active_subscription):
        with pytest.raises(ActiveSubscriptionExistsError) as exc_info:
            SubscriptionLedger().create(customer.pk, plan.pk, *period())

        assert exc_info.value.details["subscription_id"] == str(active_subscription.pk)

    def test_rejects_when_paused_exists(self, customer, plan, paused_subscription):
        with pytest.raises(ActiveSubscriptionExistsError):
            SubscriptionLedger().create(customer.pk, plan.pk, *period())

    def test_allows_create_after_cancellation(self, customer, plan, cancelled_subscription):
        subscription = SubscriptionLedger().create(customer.pk, plan.pk, *period())

        assert subscription.status == SubscriptionStatus.ACTIVE

    def test_constraint_violation_reported_as_conflict(
        self, mocker, customer, plan, active_subscription
    ):
        """A create that slips past the lookup still fails as a conflict."""
        ledger = SubscriptionLedger()
        mocker.patch.object(ledger, "find_non_terminal", return_value=None)

        with pytest.raises(ActiveSubscriptionExistsError):
            ledger.create(customer.pk, plan.pk, *period())

        assert Subscription.objects.filter(customer=customer).count() == 1

    def test_unknown_customer(self, plan):
        with pytest.raises(NotFoundError) as exc_info:
            SubscriptionLedger().create(999999, plan.pk, *period())

        assert exc_info.value.error_code == "CUSTOMER_NOT_FOUND"

    def test_database_failure_becomes_storage_error(self, mocker, customer, plan):
        mocker.patch.object(QuerySet, "create", side_effect=DatabaseError("disk full"))

        with pytest.raises(StorageError):
            SubscriptionLedger().create(customer.pk, plan.pk, *period())


@pytest.mark.django_db
class TestLedgerTransition:
    """Tests for SubscriptionLedger.transition."""

    def test_pause(self, active_subscription):
        result = SubscriptionLedger().transition(
            active_subscription.pk, SubscriptionStatus.PAUSED
        )

        assert result.status == SubscriptionStatus.PAUSED
        stored = Subscription.objects.get(pk=active_subscription.pk)
        assert stored.status == SubscriptionStatus.PAUSED

    def test_resume(self, paused_subscription):
        result = SubscriptionLedger().transition(
            paused_subscription.pk, SubscriptionStatus.ACTIVE
        )

        assert result.status == SubscriptionStatus.ACTIVE

    def test_cancel_sets_cancelled_at(self, paused_subscription):
        result = SubscriptionLedger().transition(
            paused_subscription.pk, SubscriptionStatus.CANCELLED
        )

        assert result.status == SubscriptionStatus.CANCELLED
        assert Subscription.objects.get(pk=paused_subscription.pk).cancelled_at is not None

    def test_pause_paused_is_invalid(self, paused_subscription):
        with pytest.raises(InvalidTransitionError) as exc_info:
            SubscriptionLedger().transition(paused_subscription.pk, SubscriptionStatus.PAUSED)

        assert exc_info.value.details["current_status"] == SubscriptionStatus.PAUSED

    def test_cancelled_is_terminal(self, cancelled_subscription):
        with pytest.raises(InvalidTransitionError):
            SubscriptionLedger().transition(
                cancelled_subscription.pk, SubscriptionStatus.ACTIVE
            )

        stored = Subscription.objects.get(pk=cancelled_subscription.pk)
        assert stored.status == SubscriptionStatus.CANCELLED

    def test_unreachable_target_is_invalid(self, active_subscription):
        with pytest.raises(InvalidTransitionError):
            SubscriptionLedger().transition(
                active_subscription.pk, SubscriptionStatus.PAST_DUE
            )

    def test_unknown_subscription(self, db):
        with pytest.raises(SubscriptionNotFoundError):
            SubscriptionLedger().transition(uuid.uuid4(), SubscriptionStatus.PAUSED)


@pytest.mark.django_db
class TestLedgerLookups:
    """Tests for customer lookups."""

    def test_find_non_terminal(self, customer, plan, cancelled_subscription):
        assert SubscriptionLedger().find_non_terminal(customer.pk) is None

        paused = SubscriptionFactory(
            customer=customer, plan=plan, status=SubscriptionStatus.PAUSED
        )

        assert SubscriptionLedger().find_non_terminal(customer.pk) == paused

    def test_latest_for_customer_includes_cancelled(self, customer, cancelled_subscription):
        assert SubscriptionLedger().latest_for_customer(customer.pk) == cancelled_subscription

    def test_latest_for_customer_none(self, customer):
        assert SubscriptionLedger().latest_for_customer(customer.pk) is None

    def test_history_spans_subscriptions_newest_first(
        self, customer, other_customer, plan, cancelled_subscription
    ):
        current = SubscriptionFactory(customer=customer, plan=plan)
        with freeze_time("2024-01-01 10:00:00"):
            first_order = OrderFactory(subscription=cancelled_subscription)
            first_payment = PaymentFactory(subscription=cancelled_subscription)
        with freeze_time("2024-02-01 10:00:00"):
            second_order = OrderFactory(subscription=current)
            second_payment = PaymentFactory(subscription=current)
        OrderFactory(subscription=SubscriptionFactory(customer=other_customer, plan=plan))

        ledger = SubscriptionLedger()

        assert list(ledger.orders_for_customer(customer.pk)) == [second_order, first_order]
        assert list(ledger.payments_for_customer(customer.pk)) == [
            second_payment,
            first_payment,
        ]
