"""
Product model: items that can go into a subscription box.

Products are managed by admins only. They are not purchasable on their
own and have no link to plans or orders; retire one with is_active=False.
"""

from __future__ import annotations

from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models

from core.model_mixins import UUIDPrimaryKeyMixin
from core.models import BaseModel


class Product(UUIDPrimaryKeyMixin, BaseModel):
    """
    A box item tracked in the admin catalog.

    Fields:
        name: Display name
        description: Free-form description
        price: Unit price
        stock_quantity: Units on hand
        is_active: Whether the item is still offered
    """

    name = models.CharField(max_length=100)

    description = models.TextField(blank=True)

    price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.01"))],
    )

    stock_quantity = models.PositiveIntegerField(default=0)

    is_active = models.BooleanField(default=True, db_index=True)

    class Meta:
        db_table = "subscription_products"
        ordering = ["-created_at"]
        verbose_name = "Product"
        verbose_name_plural = "Products"
        constraints = [
            models.CheckConstraint(
                condition=models.Q(price__gt=0),
                name="product_price_positive",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.name} ({self.stock_quantity} in stock)"
