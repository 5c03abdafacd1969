"""
Subscription ledger: owns subscription records and their status transitions.

The ledger enforces the one-non-terminal-subscription-per-customer
invariant at creation time, independent of any check the caller already
made:

1. The customer row is locked with SELECT ... FOR UPDATE, serializing
   concurrent creates for the same customer on databases that support it.
2. The non-terminal lookup is repeated under that lock.
3. The partial unique constraint on (customer) WHERE status IN
   (active, paused) backs both; its IntegrityError is reported as the
   same conflict.

Transitions run on a row locked with select_for_update and go through the
django-fsm transition methods on Subscription, so the allowed edges live
in exactly one place.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import DEFAULT_DB_ALIAS, DatabaseError, IntegrityError, transaction
from django_fsm import can_proceed

from core.exceptions import NotFoundError
from subscriptions.exceptions import (
    ActiveSubscriptionExistsError,
    InvalidTransitionError,
    StorageError,
    SubscriptionNotFoundError,
)
from subscriptions.models import Order, Payment, Subscription
from subscriptions.state_machines import SubscriptionStatus

if TYPE_CHECKING:
    from datetime import datetime

    from django.db.models import QuerySet

logger = logging.getLogger(__name__)

# Target status -> name of the Subscription transition method reaching it
TRANSITIONS: dict[str, str] = {
    SubscriptionStatus.PAUSED: "pause",
    SubscriptionStatus.ACTIVE: "resume",
    SubscriptionStatus.CANCELLED: "cancel",
}


class SubscriptionLedger:
    """
    Persistence and state machine enforcement for subscriptions.

    Usage:
        ledger = SubscriptionLedger()
        subscription = ledger.create(customer_id, plan_id, start, end)
        ledger.transition(subscription.id, SubscriptionStatus.PAUSED)
    """

    def __init__(self, using: str = DEFAULT_DB_ALIAS) -> None:
        self.using = using

    def _subscriptions(self) -> QuerySet[Subscription]:
        return Subscription.objects.using(self.using)

    # =========================================================================
    # Lookups
    # =========================================================================

    def find_non_terminal(self, customer_id) -> Subscription | None:
        """Return the customer's active or paused subscription, if any."""
        return (
            self._subscriptions()
            .select_related("plan")
            .filter(customer_id=customer_id, status__in=SubscriptionStatus.non_terminal())
            .first()
        )

    def latest_for_customer(self, customer_id) -> Subscription | None:
        """Most recently created subscription in any status."""
        return (
            self._subscriptions()
            .select_related("plan")
            .filter(customer_id=customer_id)
            .order_by("-created_at")
            .first()
        )

    def orders_for_customer(self, customer_id) -> QuerySet[Order]:
        """All orders across the customer's subscriptions, newest first."""
        return (
            Order.objects.using(self.using)
            .filter(subscription__customer_id=customer_id)
            .order_by("-created_at")
        )

    def payments_for_customer(self, customer_id) -> QuerySet[Payment]:
        """All payments across the customer's subscriptions, newest first."""
        return (
            Payment.objects.using(self.using)
            .filter(subscription__customer_id=customer_id)
            .order_by("-created_at")
        )

    # =========================================================================
    # Writes
    # =========================================================================

    def create(self, customer_id, plan_id, start: datetime, end: datetime) -> Subscription:
        """
        Create an active subscription for the customer.

        Runs in its own atomic block (a savepoint when the caller already
        holds a transaction).

        Raises:
            ActiveSubscriptionExistsError: The customer already holds an
                active or paused subscription
            NotFoundError: The customer does not exist
            StorageError: Any other database failure
        """
        try:
            with transaction.atomic(using=self.using):
                self._lock_customer(customer_id)

                existing = self.find_non_terminal(customer_id)
                if existing is not None:
                    raise self._conflict(customer_id, existing)

                subscription = self._subscriptions().create(
                    customer_id=customer_id,
                    plan_id=plan_id,
                    status=SubscriptionStatus.ACTIVE,
                    current_period_start=start,
                    current_period_end=end,
                )
        except IntegrityError as exc:
            if self._non_terminal_exists(customer_id):
                raise self._conflict(customer_id) from exc
            logger.error(
                "Subscription insert violated a constraint",
                extra={"customer_id": str(customer_id), "plan_id": str(plan_id)},
                exc_info=True,
            )
            raise StorageError(
                "Subscription could not be stored",
                details={"customer_id": str(customer_id), "reason": "integrity"},
            ) from exc
        except DatabaseError as exc:
            logger.error(
                "Subscription insert failed",
                extra={"customer_id": str(customer_id), "plan_id": str(plan_id)},
                exc_info=True,
            )
            raise StorageError(
                "Subscription could not be stored",
                details={"customer_id": str(customer_id)},
            ) from exc

        logger.info(
            "Subscription created",
            extra={
                "subscription_id": str(subscription.pk),
                "customer_id": str(customer_id),
                "plan_id": str(plan_id),
            },
        )
        return subscription

    def transition(self, subscription_id, target_status: str) -> Subscription:
        """
        Move a subscription to ``target_status`` along a permitted edge.

        Raises:
            SubscriptionNotFoundError: No subscription with that id
            InvalidTransitionError: The edge is not in the state machine
            StorageError: The update could not be written
        """
        method_name = TRANSITIONS.get(target_status)

        try:
            with transaction.atomic(using=self.using):
                subscription = self._get_for_update(subscription_id)
                current = subscription.status

                if method_name is None or not can_proceed(
                    getattr(subscription, method_name)
                ):
                    raise InvalidTransitionError(
                        f"Cannot move subscription from '{current}' to '{target_status}'",
                        details={
                            "subscription_id": str(subscription_id),
                            "current_status": current,
                            "target_status": target_status,
                        },
                    )

                getattr(subscription, method_name)()
                subscription.save(using=self.using)
        except DatabaseError as exc:
            logger.error(
                "Subscription transition failed",
                extra={"subscription_id": str(subscription_id), "target_status": target_status},
                exc_info=True,
            )
            raise StorageError(
                "Subscription status could not be updated",
                details={"subscription_id": str(subscription_id)},
            ) from exc

        logger.info(
            "Subscription transitioned",
            extra={
                "subscription_id": str(subscription_id),
                "from_status": current,
                "to_status": subscription.status,
            },
        )
        return subscription

    # =========================================================================
    # Helpers
    # =========================================================================

    def _get_for_update(self, subscription_id) -> Subscription:
        try:
            return self._subscriptions().select_for_update().get(pk=subscription_id)
        except (Subscription.DoesNotExist, DjangoValidationError, ValueError):
            raise SubscriptionNotFoundError(
                f"Subscription {subscription_id} not found",
                details={"subscription_id": str(subscription_id)},
            ) from None

    def _non_terminal_exists(self, customer_id) -> bool:
        return (
            self._subscriptions()
            .filter(customer_id=customer_id, status__in=SubscriptionStatus.non_terminal())
            .exists()
        )

    def _lock_customer(self, customer_id) -> None:
        user_model = get_user_model()
        locked = (
            user_model._default_manager.db_manager(self.using)
            .select_for_update()
            .filter(pk=customer_id)
            .values_list("pk", flat=True)
            .first()
        )
        if locked is None:
            raise NotFoundError(
                f"Customer {customer_id} not found",
                error_code="CUSTOMER_NOT_FOUND",
                details={"customer_id": str(customer_id)},
            )

    @staticmethod
    def _conflict(
        customer_id, existing: Subscription | None = None
    ) -> ActiveSubscriptionExistsError:
        details = {"customer_id": str(customer_id)}
        if existing is not None:
            details["subscription_id"] = str(existing.pk)
            details["status"] = existing.status
        logger.warning("Non-terminal subscription already exists", extra=details)
        return ActiveSubscriptionExistsError(
            "Customer already has an active or paused subscription",
            details=details,
        )
