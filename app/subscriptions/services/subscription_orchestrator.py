"""
Subscription orchestrator: the entry point for lifecycle operations.

The orchestrator composes the plan catalog, billing calculator, ledger,
payment processor and record writers into:

- subscribe: validate, charge, then create subscription + payment + order
  as one atomic unit
- pause / resume / cancel: move the customer's current subscription
  along the state machine
- read helpers for the current subscription, orders and payments

Every lifecycle operation for a customer runs under that customer's
distributed lock, so the check-charge-create sequence never interleaves
with another request for the same customer.

Usage:
    from subscriptions.services import SubscriptionOrchestrator

    orchestrator = SubscriptionOrchestrator()
    result = orchestrator.subscribe(
        customer_id=user.pk,
        plan_id=plan.pk,
        amount=Decimal("19.99"),
    )
    result.subscription.status   # "active"
    result.transaction_id        # "sim_..."
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import TYPE_CHECKING

from django.conf import settings
from django.db import DEFAULT_DB_ALIAS, DatabaseError
from django.utils import timezone

from core.services import BaseService
from subscriptions.billing import compute_period_end
from subscriptions.catalog import PlanCatalog
from subscriptions.exceptions import (
    ActiveSubscriptionExistsError,
    AmountMismatchError,
    PaymentDeclinedError,
    StorageError,
    SubscriptionNotFoundError,
)
from subscriptions.ledger import SubscriptionLedger
from subscriptions.locks import customer_lock
from subscriptions.records import OrderEmitter, PaymentRecorder
from subscriptions.simulator import PaymentSimulator
from subscriptions.state_machines import SubscriptionStatus

if TYPE_CHECKING:
    from collections.abc import Callable
    from contextlib import AbstractContextManager
    from typing import Any

    from subscriptions.models import Order, Payment, Plan, Subscription
    from subscriptions.simulator import PaymentProcessor


# =============================================================================
# Result Types
# =============================================================================


@dataclass(frozen=True)
class SubscribeResult:
    """
    Outcome of a successful subscribe call.

    Attributes:
        subscription: The new active subscription
        payment: The completed payment row
        order: The pending initial order
        transaction_id: Processor reference for the charge
    """

    subscription: Subscription
    payment: Payment
    order: Order
    transaction_id: str


# =============================================================================
# Subscription Orchestrator
# =============================================================================


class SubscriptionOrchestrator(BaseService):
    """
    Coordinates subscription lifecycle operations.

    All collaborators are injected through __init__ and default to the
    database-backed implementations on the given alias:

        catalog          PlanCatalog
        ledger           SubscriptionLedger
        processor        PaymentSimulator (any PaymentProcessor)
        payment_recorder PaymentRecorder
        order_emitter    OrderEmitter
        lock_factory     customer_id -> context manager (customer_lock)
    """

    def __init__(
        self,
        *,
        using: str = DEFAULT_DB_ALIAS,
        catalog: PlanCatalog | None = None,
        ledger: SubscriptionLedger | None = None,
        processor: PaymentProcessor | None = None,
        payment_recorder: PaymentRecorder | None = None,
        order_emitter: OrderEmitter | None = None,
        lock_factory: Callable[[Any], AbstractContextManager] | None = None,
    ) -> None:
        self.using = using
        self.catalog = catalog or PlanCatalog(using=using)
        self.ledger = ledger or SubscriptionLedger(using=using)
        self.processor = processor or PaymentSimulator()
        self.payment_recorder = payment_recorder or PaymentRecorder(using=using)
        self.order_emitter = order_emitter or OrderEmitter(using=using)
        self.lock_factory = lock_factory or customer_lock

    # =========================================================================
    # Subscribe
    # =========================================================================

    def subscribe(
        self,
        customer_id,
        plan_id,
        amount,
        payment_method: str | None = None,
    ) -> SubscribeResult:
        """
        Subscribe a customer to a plan.

        Steps (under the customer's lock):
            1. Reject if the customer already has an active/paused subscription
            2. Load the active plan
            3. Check the submitted amount against the plan price
            4. Charge through the payment processor
            5. Compute the billing period from now
            6. Create subscription, payment and order in one transaction

        Raises:
            ActiveSubscriptionExistsError: Customer has a non-terminal subscription
            PlanNotFoundError: Plan missing or inactive
            AmountMismatchError: Amount differs from plan price (nothing persisted)
            PaymentDeclinedError: Processor reported failure (nothing persisted)
            StorageError: Records could not be written (all rolled back)
            LockAcquisitionError: Another request for the customer is in flight
        """
        logger = self.get_logger()
        method = payment_method or settings.SUBSCRIPTION_DEFAULT_PAYMENT_METHOD
        log_context = {"customer_id": str(customer_id), "plan_id": str(plan_id)}

        with self.lock_factory(customer_id):
            existing = self.ledger.find_non_terminal(customer_id)
            if existing is not None:
                logger.warning(
                    "Subscribe rejected: non-terminal subscription exists",
                    extra={**log_context, "subscription_id": str(existing.pk)},
                )
                raise ActiveSubscriptionExistsError(
                    "Customer already has an active or paused subscription",
                    details={
                        "subscription_id": str(existing.pk),
                        "status": existing.status,
                    },
                )

            plan = self.catalog.get_active_plan(plan_id)
            charge_amount = self._validate_amount(amount, plan)

            outcome = self.processor.charge(charge_amount, method)
            if not outcome.success:
                logger.warning(
                    "Subscribe rejected: payment declined",
                    extra={**log_context, "error_kind": str(outcome.error_kind)},
                )
                raise PaymentDeclinedError(
                    "Payment was declined",
                    details={
                        "error_kind": outcome.error_kind.value if outcome.error_kind else None,
                        "amount": str(charge_amount),
                    },
                )

            period_start = timezone.now()
            period_end = compute_period_end(period_start, plan.billing_interval)

            try:
                with self.atomic(using=self.using):
                    subscription = self.ledger.create(
                        customer_id, plan.pk, period_start, period_end
                    )
                    payment = self.payment_recorder.record(subscription, outcome)
                    order = self.order_emitter.create_initial_order(
                        subscription, charge_amount
                    )
            except DatabaseError as exc:
                logger.error(
                    "Subscribe failed while writing records",
                    extra={**log_context, "transaction_id": outcome.transaction_id},
                    exc_info=True,
                )
                raise StorageError(
                    "Subscription records could not be stored",
                    details={"transaction_id": outcome.transaction_id},
                ) from exc

        logger.info(
            "Customer subscribed",
            extra={
                **log_context,
                "subscription_id": str(subscription.pk),
                "transaction_id": outcome.transaction_id,
                "period_end": period_end.isoformat(),
            },
        )
        return SubscribeResult(
            subscription=subscription,
            payment=payment,
            order=order,
            transaction_id=outcome.transaction_id,
        )

    @staticmethod
    def _validate_amount(amount, plan: Plan) -> Decimal:
        """
        Return the plan price if the submitted amount equals it exactly.

        Trailing zeros are ignored (19.990 == 19.99) but no rounding is
        applied, so 19.994 is a mismatch.
        """
        try:
            submitted = Decimal(str(amount))
        except (InvalidOperation, ValueError, TypeError):
            submitted = None
        if submitted is None or not submitted.is_finite():
            raise AmountMismatchError(
                f"Amount {amount!r} is not a valid decimal",
                details={"amount": str(amount), "expected": str(plan.price)},
            )

        if submitted != plan.price:
            raise AmountMismatchError(
                f"Amount {submitted} does not match plan price {plan.price}",
                details={"amount": str(submitted), "expected": str(plan.price)},
            )
        return plan.price

    # =========================================================================
    # Lifecycle Transitions
    # =========================================================================

    def pause(self, customer_id) -> Subscription:
        """
        Pause the customer's active subscription.

        Raises:
            SubscriptionNotFoundError: No active or paused subscription
            InvalidTransitionError: The subscription is already paused
        """
        return self._transition_current(customer_id, SubscriptionStatus.PAUSED)

    def resume(self, customer_id) -> Subscription:
        """
        Resume the customer's paused subscription.

        Raises:
            SubscriptionNotFoundError: No active or paused subscription
            InvalidTransitionError: The subscription is already active
        """
        return self._transition_current(customer_id, SubscriptionStatus.ACTIVE)

    def cancel(self, customer_id) -> Subscription:
        """
        Cancel the customer's active or paused subscription.

        Raises:
            SubscriptionNotFoundError: No active or paused subscription
        """
        return self._transition_current(customer_id, SubscriptionStatus.CANCELLED)

    def _transition_current(self, customer_id, target_status: str) -> Subscription:
        with self.lock_factory(customer_id):
            current = self.ledger.find_non_terminal(customer_id)
            if current is None:
                self.get_logger().warning(
                    "No active or paused subscription",
                    extra={"customer_id": str(customer_id), "target_status": target_status},
                )
                raise SubscriptionNotFoundError(
                    "No active or paused subscription found",
                    details={"customer_id": str(customer_id)},
                )
            return self.ledger.transition(current.pk, target_status)

    # =========================================================================
    # Reads
    # =========================================================================

    def get_subscription(self, customer_id) -> Subscription | None:
        """Most recent subscription for the customer, in any status."""
        return self.ledger.latest_for_customer(customer_id)

    def get_orders(self, customer_id) -> list[Order]:
        """Orders across all of the customer's subscriptions, newest first."""
        return list(self.ledger.orders_for_customer(customer_id))

    def get_payments(self, customer_id) -> list[Payment]:
        """Payments across all of the customer's subscriptions, newest first."""
        return list(self.ledger.payments_for_customer(customer_id))
