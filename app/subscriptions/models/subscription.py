"""
Subscription model for recurring box deliveries.

A customer may accumulate many subscriptions over time, but at most one
in a non-terminal status (active or paused). The invariant is enforced at
the storage layer with a partial unique constraint, so it holds even when
two requests race past the application-level checks.

Usage:
    from subscriptions.models import Subscription

    subscription.pause()     # active -> paused
    subscription.save()

    subscription.cancel()    # active/paused -> cancelled
    subscription.save()
"""

from __future__ import annotations

from django.conf import settings
from django.db import models
from django.utils import timezone

from django_fsm import FSMField, transition

from core.model_mixins import UUIDPrimaryKeyMixin
from core.models import BaseModel
from subscriptions.state_machines import SubscriptionStatus


class Subscription(UUIDPrimaryKeyMixin, BaseModel):
    """
    A customer's subscription to a plan.

    State Flow:
        ACTIVE -> PAUSED (pause)
        PAUSED -> ACTIVE (resume)
        ACTIVE/PAUSED -> CANCELLED (cancel)

    Fields:
        customer: User owning the subscription
        plan: Plan the subscription was bought on (never owned, PROTECT)
        status: Current FSM status (protected; change via transitions)
        current_period_start/end: Billing period [start, end)
        cancelled_at: When the subscription was cancelled
    """

    # ==========================================================================
    # Relationships
    # ==========================================================================

    customer = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="subscriptions",
        help_text="Customer owning the subscription",
    )

    plan = models.ForeignKey(
        "subscriptions.Plan",
        on_delete=models.PROTECT,
        related_name="subscriptions",
        help_text="Plan the subscription was purchased on",
    )

    # ==========================================================================
    # State
    # ==========================================================================

    status = FSMField(
        default=SubscriptionStatus.ACTIVE,
        choices=SubscriptionStatus.choices,
        db_index=True,
        protected=True,
        help_text="Current status of the subscription (managed by FSM)",
    )

    # ==========================================================================
    # Billing Period
    # ==========================================================================

    current_period_start = models.DateTimeField(
        help_text="Start of current billing period (inclusive)",
    )

    current_period_end = models.DateTimeField(
        help_text="End of current billing period (exclusive)",
    )

    cancelled_at = models.DateTimeField(
        null=True,
        blank=True,
        help_text="When subscription was cancelled",
    )

    # ==========================================================================
    # Meta & Methods
    # ==========================================================================

    class Meta:
        db_table = "subscriptions"
        ordering = ["-created_at"]
        verbose_name = "Subscription"
        verbose_name_plural = "Subscriptions"
        indexes = [
            models.Index(fields=["customer", "status"], name="subscription_customer_status"),
            models.Index(
                fields=["status", "current_period_end"], name="subscription_status_period"
            ),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=["customer"],
                condition=models.Q(
                    status__in=[SubscriptionStatus.ACTIVE, SubscriptionStatus.PAUSED]
                ),
                name="one_non_terminal_subscription_per_customer",
            ),
            models.CheckConstraint(
                condition=models.Q(current_period_end__gt=models.F("current_period_start")),
                name="subscription_period_end_after_start",
            ),
        ]

    def __str__(self) -> str:
        return f"Subscription({self.id}, {self.status}, customer={self.customer_id})"

    # ==========================================================================
    # State Transitions (django-fsm)
    # ==========================================================================

    @transition(
        field=status,
        source=SubscriptionStatus.ACTIVE,
        target=SubscriptionStatus.PAUSED,
    )
    def pause(self):
        """
        Pause deliveries.

        Transition: ACTIVE -> PAUSED
        """

    @transition(
        field=status,
        source=SubscriptionStatus.PAUSED,
        target=SubscriptionStatus.ACTIVE,
    )
    def resume(self):
        """
        Resume a paused subscription.

        Transition: PAUSED -> ACTIVE
        """

    @transition(
        field=status,
        source=[SubscriptionStatus.ACTIVE, SubscriptionStatus.PAUSED],
        target=SubscriptionStatus.CANCELLED,
    )
    def cancel(self):
        """
        Cancel the subscription.

        Transition: ACTIVE/PAUSED -> CANCELLED
        """
        self.cancelled_at = timezone.now()

    # ==========================================================================
    # Helper Properties
    # ==========================================================================

    @property
    def is_non_terminal(self) -> bool:
        return self.status in SubscriptionStatus.non_terminal()

    @property
    def is_cancelled(self) -> bool:
        return self.status == SubscriptionStatus.CANCELLED
