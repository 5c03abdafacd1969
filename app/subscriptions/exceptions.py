"""
Subscription-specific exceptions.

Exception Hierarchy:
    core.exceptions.ConflictError
    ├── ActiveSubscriptionExistsError - Customer already holds an active/paused subscription
    ├── InvalidTransitionError - FSM transition not allowed from current status
    └── LockAcquisitionError - Per-customer lock timeout

    core.exceptions.NotFoundError
    ├── PlanNotFoundError - Plan missing or inactive
    └── SubscriptionNotFoundError - No subscription (in the required state)

    core.exceptions.ValidationError
    ├── AmountMismatchError - Submitted amount differs from plan price
    └── PlanImmutableError - Price/interval change on a referenced plan

    SubscriptionError (base for subscription domain failures)
    ├── PaymentDeclinedError - Payment processor reported failure
    └── StorageError - Database failure other than the invariant violation

Usage:
    from subscriptions.exceptions import InvalidTransitionError

    raise InvalidTransitionError(
        "Cannot pause subscription in 'paused' status",
        details={"current_status": "paused", "target_status": "paused"},
    )
"""

from __future__ import annotations

from core.exceptions import (
    BaseApplicationError,
    ConflictError,
    NotFoundError,
    ValidationError,
)


class SubscriptionError(BaseApplicationError):
    """Base exception for subscription domain failures without a generic counterpart."""

    default_error_code: str = "SUBSCRIPTION_ERROR"


# =============================================================================
# Conflicts (HTTP 409)
# =============================================================================


class ActiveSubscriptionExistsError(ConflictError):
    """
    Raised when a customer already holds a non-terminal subscription.

    Raised by the orchestrator's pre-check and again by the ledger when the
    re-check or the partial unique constraint catches a concurrent create.
    """

    default_error_code: str = "ACTIVE_SUBSCRIPTION_EXISTS"


class InvalidTransitionError(ConflictError):
    """
    Raised when a status transition is not permitted.

    Example:
        raise InvalidTransitionError(
            "Cannot resume subscription in 'active' status",
            details={"current_status": "active", "target_status": "active"},
        )
    """

    default_error_code: str = "INVALID_STATE_TRANSITION"


class LockAcquisitionError(ConflictError):
    """
    Raised when the per-customer distributed lock cannot be acquired.

    Another request for the same customer is in flight.
    """

    default_error_code: str = "LOCK_ACQUISITION_FAILED"


# =============================================================================
# Not Found (HTTP 404)
# =============================================================================


class PlanNotFoundError(NotFoundError):
    """Raised when a plan does not exist or is not purchasable."""

    default_error_code: str = "PLAN_NOT_FOUND"


class SubscriptionNotFoundError(NotFoundError):
    """Raised when no subscription exists in the state an operation requires."""

    default_error_code: str = "SUBSCRIPTION_NOT_FOUND"


# =============================================================================
# Validation (HTTP 400)
# =============================================================================


class AmountMismatchError(ValidationError):
    """
    Raised when the submitted amount differs from the stored plan price.

    Example:
        raise AmountMismatchError(
            "Amount 9.99 does not match plan price 19.99",
            details={"amount": "9.99", "expected": "19.99"},
        )
    """

    default_error_code: str = "AMOUNT_MISMATCH"


class PlanImmutableError(ValidationError):
    """Raised when price or billing interval changes on a plan that has subscriptions."""

    default_error_code: str = "PLAN_IMMUTABLE"


# =============================================================================
# Processing Failures
# =============================================================================


class PaymentDeclinedError(SubscriptionError):
    """
    Raised when the payment processor reports an unsuccessful charge.

    No subscription, payment or order is persisted.
    """

    default_error_code: str = "PAYMENT_DECLINED"


class StorageError(SubscriptionError):
    """
    Raised when persisting subscription records fails for a reason other
    than the one-non-terminal-subscription invariant.

    Not retried; the surrounding transaction has been rolled back.
    """

    default_error_code: str = "STORAGE_ERROR"
