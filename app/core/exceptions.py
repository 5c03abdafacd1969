"""
Base exception classes for application-wide error handling.

This module provides a standardized exception hierarchy that enables:
- Consistent error responses across the application
- Machine-readable error codes for client handling
- Detailed error information for debugging

Exception Hierarchy:
    BaseApplicationError (base)
    ├── ValidationError - Input validation failures
    ├── NotFoundError - Resource not found
    ├── PermissionDeniedError - Authorization failures
    └── ConflictError - State conflicts (duplicates, concurrent modifications)

Usage:
    from core.exceptions import ConflictError, NotFoundError

    raise NotFoundError(
        "Plan 42 not found or inactive",
        error_code="PLAN_NOT_FOUND",
        details={"plan_id": "42"},
    )

    try:
        ...
    except BaseApplicationError as e:
        return Response(e.to_dict(), status=409)

Note:
    These exceptions are for domain/business logic errors.
    DRF handles API-layer exceptions (serialization, authentication, etc.).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from typing import Any


class BaseApplicationError(Exception):
    """
    Base exception for all application-specific errors.

    Attributes:
        message: Human-readable error description
        error_code: Machine-readable code for client-side handling
        details: Additional error context (ids, states, amounts)

    Example:
        try:
            plan = PlanCatalog().get_active_plan(plan_id)
        except NotFoundError as e:
            logger.warning(f"Plan lookup failed: {e.error_code}")
            return Response(e.to_dict(), status=404)
    """

    default_error_code: str = "APPLICATION_ERROR"

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        """
        Initialize the exception.

        Args:
            message: Human-readable error description
            error_code: Machine-readable error code (defaults to class default)
            details: Additional error context
        """
        self.message = message
        self.error_code = error_code or self.default_error_code
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """
        Convert exception to dictionary for API response.

        Example:
            {
                "error": "Customer already has a non-terminal subscription",
                "error_code": "ACTIVE_SUBSCRIPTION_EXISTS",
                "details": {"subscription_id": "..."}
            }
        """
        result: dict[str, Any] = {
            "error": self.message,
            "error_code": self.error_code,
        }
        if self.details:
            result["details"] = self.details
        return result

    def __str__(self) -> str:
        """Return string representation with error code."""
        return f"[{self.error_code}] {self.message}"

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"error_code={self.error_code!r}, "
            f"details={self.details!r})"
        )


class ValidationError(BaseApplicationError):
    """
    Raised when input validation fails in the service layer.

    Use for business rule violations that a serializer cannot see,
    such as a submitted amount that does not match the stored plan price.

    Note:
        For request shape validation, use DRF serializers.
    """

    default_error_code: str = "VALIDATION_ERROR"


class NotFoundError(BaseApplicationError):
    """
    Raised when a requested resource is not found.

    Example:
        plan = Plan.objects.filter(pk=plan_id, is_active=True).first()
        if plan is None:
            raise NotFoundError(
                f"Plan {plan_id} not found",
                error_code="PLAN_NOT_FOUND",
                details={"plan_id": str(plan_id)},
            )
    """

    default_error_code: str = "NOT_FOUND"


class PermissionDeniedError(BaseApplicationError):
    """
    Raised when a user lacks permission for an operation.

    Note:
        For authentication failures (missing/invalid token), DRF's
        AuthenticationFailed applies. This is for authorization failures.
    """

    default_error_code: str = "PERMISSION_DENIED"


class ConflictError(BaseApplicationError):
    """
    Raised when an operation conflicts with current resource state.

    Use for:
    - Duplicate entries (unique constraint violations)
    - Concurrent modification conflicts
    - Invalid state transitions

    Note:
        HTTP 409 Conflict is the appropriate status for these errors.
    """

    default_error_code: str = "CONFLICT"
