"""
Base service layer patterns for business logic encapsulation.

Services encapsulate business logic separate from views and models.
Views handle HTTP concerns, models handle data, services handle logic.

Usage:
    from core.services import BaseService

    class SubscriptionOrchestrator(BaseService):
        def subscribe(self, customer_id, plan_id, amount):
            with self.atomic(using=self.using):
                subscription = self.ledger.create(...)
                self.order_emitter.create_initial_order(subscription, amount)

            self.get_logger().info("Subscription created", extra={...})

Related:
    - core.exceptions: Errors raised by services and mapped by views
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import TYPE_CHECKING

from django.db import DEFAULT_DB_ALIAS, transaction

if TYPE_CHECKING:
    from collections.abc import Generator


class BaseService:
    """
    Base class for service layer classes.

    Provides common utilities for services:
    - Logging setup per service
    - Database transaction management

    Design Notes:
        - Raise core.exceptions errors for business rule failures
        - Keep HTTP concerns (status codes, serializers) in views
    """

    @classmethod
    def get_logger(cls) -> logging.Logger:
        """
        Get logger for this service.

        Returns a logger named after the service class for
        easy filtering in logs.
        """
        return logging.getLogger(f"{cls.__module__}.{cls.__name__}")

    @classmethod
    @contextmanager
    def atomic(cls, using: str = DEFAULT_DB_ALIAS) -> Generator[None, None, None]:
        """
        Execute operations in a database transaction.

        All database operations within this context manager are
        wrapped in a transaction. If any operation fails, all
        changes are rolled back.

        Args:
            using: Database alias the transaction is opened on

        Example:
            with cls.atomic():
                subscription = Subscription.objects.create(...)
                Order.objects.create(subscription=subscription, ...)
                # If Order creation fails, Subscription is also rolled back
        """
        with transaction.atomic(using=using):
            yield
