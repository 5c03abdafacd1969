"""
Payment model: append-only charge records owned by a Subscription.

One payment is written per successful billing event and never mutated;
corrections are made by inserting new rows.
"""

from __future__ import annotations

from django.db import models

from core.exceptions import ValidationError
from core.model_mixins import UUIDPrimaryKeyMixin
from core.models import BaseModel
from subscriptions.state_machines import PaymentStatus


class Payment(UUIDPrimaryKeyMixin, BaseModel):
    """
    A recorded charge for a subscription billing event.

    Fields:
        subscription: Owning subscription
        amount: Charged amount
        status: pending, completed or failed (fixed at insert)
        method: Payment method tag (e.g. "card")
        transaction_id: Processor reference for the charge
    """

    subscription = models.ForeignKey(
        "subscriptions.Subscription",
        on_delete=models.PROTECT,
        related_name="payments",
    )

    amount = models.DecimalField(max_digits=10, decimal_places=2)

    status = models.CharField(
        max_length=20,
        choices=PaymentStatus.choices,
        default=PaymentStatus.PENDING,
        db_index=True,
    )

    method = models.CharField(max_length=30, default="card")

    transaction_id = models.CharField(
        max_length=64,
        blank=True,
        db_index=True,
        help_text="Processor transaction reference",
    )

    class Meta:
        db_table = "subscription_payments"
        ordering = ["-created_at"]
        verbose_name = "Payment"
        verbose_name_plural = "Payments"
        constraints = [
            models.CheckConstraint(
                condition=models.Q(amount__gt=0),
                name="subscription_payment_amount_positive",
            ),
        ]

    def __str__(self) -> str:
        return f"Payment({self.id}, {self.amount}, {self.status})"

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ValidationError(
                "Payments are append-only and cannot be modified",
                error_code="PAYMENT_IMMUTABLE",
                details={"payment_id": str(self.pk)},
            )
        super().save(*args, **kwargs)
