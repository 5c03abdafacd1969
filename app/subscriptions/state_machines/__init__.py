"""
State machine enums for subscription models.
"""

from subscriptions.state_machines.states import (
    BillingInterval,
    OrderStatus,
    PaymentStatus,
    SubscriptionStatus,
)

__all__ = [
    "BillingInterval",
    "OrderStatus",
    "PaymentStatus",
    "SubscriptionStatus",
]
