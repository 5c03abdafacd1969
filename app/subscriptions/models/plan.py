"""
Plan model: the purchasable catalog entries.

A plan is immutable once any subscription references it: price and
billing interval are frozen, and deletion is blocked by the PROTECT
foreign key on Subscription. Deactivation (is_active=False) is the
only way to retire a plan.

Usage:
    from subscriptions.models import Plan
    from subscriptions.state_machines import BillingInterval

    plan = Plan.objects.create(
        name="Basic Box",
        description="Monthly surprise box with 3-5 items",
        price=Decimal("19.99"),
        billing_interval=BillingInterval.MONTHLY,
    )
"""

from __future__ import annotations

from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models

from core.model_mixins import UUIDPrimaryKeyMixin
from core.models import BaseModel
from subscriptions.exceptions import PlanImmutableError
from subscriptions.state_machines import BillingInterval

# Fields that may not change once a subscription references the plan
FROZEN_PLAN_FIELDS = ("price", "billing_interval")


class Plan(UUIDPrimaryKeyMixin, BaseModel):
    """
    A purchasable subscription plan.

    Fields:
        name: Display name
        description: Marketing description
        price: Fixed-point price charged per billing period
        billing_interval: monthly, quarterly or annually
        is_active: Only active plans can be subscribed to
    """

    name = models.CharField(max_length=100)

    description = models.TextField(blank=True)

    price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.01"))],
        help_text="Price charged per billing period",
    )

    billing_interval = models.CharField(
        max_length=20,
        choices=BillingInterval.choices,
        help_text="Length of one billing period",
    )

    is_active = models.BooleanField(
        default=True,
        db_index=True,
        help_text="Inactive plans stay valid for existing subscriptions but cannot be purchased",
    )

    class Meta:
        db_table = "subscription_plans"
        ordering = ["price", "name"]
        verbose_name = "Plan"
        verbose_name_plural = "Plans"
        constraints = [
            models.CheckConstraint(
                condition=models.Q(price__gt=0),
                name="plan_price_positive",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.name} ({self.price}/{self.billing_interval})"

    def save(self, *args, **kwargs):
        """
        Save, refusing price or interval changes on referenced plans.

        Raises:
            PlanImmutableError: If a frozen field changed and the plan
                already has subscriptions
        """
        if not self._state.adding:
            self._check_frozen_fields(kwargs.get("using") or self._state.db)
        super().save(*args, **kwargs)

    def _check_frozen_fields(self, using: str | None) -> None:
        stored = (
            type(self)
            ._default_manager.db_manager(using)
            .filter(pk=self.pk)
            .values(*FROZEN_PLAN_FIELDS)
            .first()
        )
        if stored is None:
            return

        changed = [
            name
            for name in FROZEN_PLAN_FIELDS
            if stored[name] != self._meta.get_field(name).to_python(getattr(self, name))
        ]
        if changed and self.subscriptions.using(using).exists():
            raise PlanImmutableError(
                f"Plan {self.pk} is referenced by subscriptions; "
                f"{', '.join(changed)} cannot change",
                details={"plan_id": str(self.pk), "fields": changed},
            )
