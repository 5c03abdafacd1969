"""
Subscription domain models.

- Plan: Purchasable catalog entry
- Subscription: A customer's subscription with FSM-managed status
- Payment: Append-only charge record
- Order: Fulfillment record created per billing event
- Product: Admin-managed box item
"""

from subscriptions.models.plan import Plan
from subscriptions.models.order import Order
from subscriptions.models.payment import Payment
from subscriptions.models.product import Product
from subscriptions.models.subscription import Subscription

__all__ = [
    "Order",
    "Payment",
    "Plan",
    "Product",
    "Subscription",
]
