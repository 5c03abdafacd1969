"""
Reusable model mixins.

Mixins:
    UUIDPrimaryKeyMixin: UUID as primary key

Usage:
    from core.models import BaseModel
    from core.model_mixins import UUIDPrimaryKeyMixin

    class Subscription(UUIDPrimaryKeyMixin, BaseModel):
        ...
"""

from __future__ import annotations

import uuid

from django.db import models


class UUIDPrimaryKeyMixin(models.Model):
    """
    Use UUID as primary key instead of auto-increment integer.

    Plan, subscription, payment and order ids are exposed in API
    responses, so they should not reveal record counts or creation order.

    Fields:
        id: UUIDField as primary key (auto-generated)
    """

    id = models.UUIDField(
        primary_key=True,
        default=uuid.uuid4,
        editable=False,
        help_text="Unique identifier for this record",
    )

    class Meta:
        abstract = True
