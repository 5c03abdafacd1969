"""
Order model: fulfillment records owned by a Subscription.

One order is created per billing event. Only PENDING orders are created
here; later statuses are driven by fulfillment.
"""

from __future__ import annotations

from django.db import models

from core.model_mixins import UUIDPrimaryKeyMixin
from core.models import BaseModel
from subscriptions.state_machines import OrderStatus


class Order(UUIDPrimaryKeyMixin, BaseModel):
    """
    A fulfillment record for one billing event of a subscription.

    Fields:
        subscription: Owning subscription
        status: Fulfillment status (created as pending)
        total_amount: Amount billed for the box
    """

    subscription = models.ForeignKey(
        "subscriptions.Subscription",
        on_delete=models.PROTECT,
        related_name="orders",
    )

    status = models.CharField(
        max_length=20,
        choices=OrderStatus.choices,
        default=OrderStatus.PENDING,
        db_index=True,
    )

    total_amount = models.DecimalField(max_digits=10, decimal_places=2)

    class Meta:
        db_table = "subscription_orders"
        ordering = ["-created_at"]
        verbose_name = "Order"
        verbose_name_plural = "Orders"

    def __str__(self) -> str:
        return f"Order({self.id}, {self.total_amount}, {self.status})"
