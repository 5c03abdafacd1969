"""
Writers for the payment and order rows of a billing event.

Both run inside the orchestrator's transaction, so a failure in either
rolls back the subscription row created alongside them.
"""

from __future__ import annotations

from decimal import Decimal
from typing import TYPE_CHECKING

from django.db import DEFAULT_DB_ALIAS

from subscriptions.models import Order, Payment
from subscriptions.state_machines import OrderStatus, PaymentStatus

if TYPE_CHECKING:
    from subscriptions.models import Subscription
    from subscriptions.simulator import PaymentOutcome


class PaymentRecorder:
    """Insert the append-only payment row for a charge outcome."""

    def __init__(self, using: str = DEFAULT_DB_ALIAS) -> None:
        self.using = using

    def record(self, subscription: Subscription, outcome: PaymentOutcome) -> Payment:
        status = PaymentStatus.COMPLETED if outcome.success else PaymentStatus.FAILED
        return Payment.objects.using(self.using).create(
            subscription=subscription,
            amount=outcome.amount,
            status=status,
            method=outcome.method,
            transaction_id=outcome.transaction_id,
        )


class OrderEmitter:
    """Create the fulfillment order for a billing event."""

    def __init__(self, using: str = DEFAULT_DB_ALIAS) -> None:
        self.using = using

    def create_initial_order(self, subscription: Subscription, amount: Decimal) -> Order:
        """Create the pending order for a new subscription's first box."""
        return Order.objects.using(self.using).create(
            subscription=subscription,
            status=OrderStatus.PENDING,
            total_amount=amount,
        )
