"""
Payment processing for subscription billing events.

PaymentProcessor is the seam a real gateway would plug into. The
PaymentSimulator shipped here always succeeds; callers must still branch
on ``outcome.success`` so a failing processor can be swapped in.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Protocol

logger = logging.getLogger(__name__)


class DeclineKind(str, Enum):
    """Why a charge did not succeed."""

    DECLINED = "declined"


@dataclass(frozen=True)
class PaymentOutcome:
    """
    Result of a charge attempt.

    Attributes:
        success: Whether funds were captured
        transaction_id: Processor reference (empty when declined before capture)
        amount: Amount that was charged
        method: Payment method tag
        error_kind: Set when success is False
    """

    success: bool
    transaction_id: str
    amount: Decimal
    method: str
    error_kind: DeclineKind | None = None


class PaymentProcessor(Protocol):
    """Anything that can charge an amount and report an outcome."""

    def charge(self, amount: Decimal, method: str = "card") -> PaymentOutcome: ...


class PaymentSimulator:
    """
    Simulated processor that approves every charge.

    Transaction ids have the shape ``sim_<32 hex chars>``.
    """

    TRANSACTION_PREFIX = "sim_"

    def charge(self, amount: Decimal, method: str = "card") -> PaymentOutcome:
        transaction_id = f"{self.TRANSACTION_PREFIX}{uuid.uuid4().hex}"
        logger.info(
            "Simulated charge approved",
            extra={"transaction_id": transaction_id, "amount": str(amount), "method": method},
        )
        return PaymentOutcome(
            success=True,
            transaction_id=transaction_id,
            amount=amount,
            method=method,
        )
