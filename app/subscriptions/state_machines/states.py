"""
State enums for subscription models.

These are Django TextChoices for database storage and admin integration.
Subscription status is managed with django-fsm.

State Machines Overview:

Subscription States:
    (subscribe) → active
    active → paused → active
    active/paused → cancelled

Order States:
    pending → processing → shipped → delivered
    (only pending is produced here; fulfillment drives the rest)

Payment States:
    pending → completed / failed
"""

from django.db import models


class SubscriptionStatus(models.TextChoices):
    """
    States for the Subscription model lifecycle.

    Non-terminal states: ACTIVE, PAUSED
    Terminal states: CANCELLED, PAST_DUE

    State Flow:
        ACTIVE → PAUSED (pause)
        PAUSED → ACTIVE (resume)
        ACTIVE → CANCELLED (cancel)
        PAUSED → CANCELLED (cancel)

    PAST_DUE is reserved for recurring billing failures and is never
    entered by the lifecycle operations.
    """

    ACTIVE = "active", "Active"
    PAUSED = "paused", "Paused"
    CANCELLED = "cancelled", "Cancelled"
    PAST_DUE = "past_due", "Past Due"

    @classmethod
    def non_terminal(cls) -> list[str]:
        """States that count toward the one-per-customer limit."""
        return [cls.ACTIVE, cls.PAUSED]


class BillingInterval(models.TextChoices):
    """Billing cadence of a plan."""

    MONTHLY = "monthly", "Monthly"
    QUARTERLY = "quarterly", "Quarterly"
    ANNUALLY = "annually", "Annually"


class PaymentStatus(models.TextChoices):
    """
    States for a recorded payment.

    Payments are append-only; the status is fixed at insert time.
    """

    PENDING = "pending", "Pending"
    COMPLETED = "completed", "Completed"
    FAILED = "failed", "Failed"


class OrderStatus(models.TextChoices):
    """
    States for a fulfillment order.

    State Flow:
        PENDING → PROCESSING → SHIPPED → DELIVERED
    """

    PENDING = "pending", "Pending"
    PROCESSING = "processing", "Processing"
    SHIPPED = "shipped", "Shipped"
    DELIVERED = "delivered", "Delivered"
