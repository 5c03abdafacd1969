"""
Plan catalog lookups.

Only active plans are purchasable. A plan deactivated after a
subscription was created stays attached to that subscription; nothing
here re-validates plans of existing subscriptions.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import DEFAULT_DB_ALIAS

from subscriptions.exceptions import PlanNotFoundError
from subscriptions.models import Plan

if TYPE_CHECKING:
    from django.db.models import QuerySet

logger = logging.getLogger(__name__)


class PlanCatalog:
    """
    Read access to purchasable plans.

    Usage:
        catalog = PlanCatalog()
        plan = catalog.get_active_plan(plan_id)
    """

    def __init__(self, using: str = DEFAULT_DB_ALIAS) -> None:
        self.using = using

    def list_active_plans(self) -> QuerySet[Plan]:
        """Active plans, cheapest first."""
        return Plan.objects.using(self.using).filter(is_active=True).order_by("price", "name")

    def get_active_plan(self, plan_id) -> Plan:
        """
        Fetch an active plan by id.

        Raises:
            PlanNotFoundError: If the plan is missing, inactive or the id is malformed
        """
        try:
            plan = self.list_active_plans().filter(pk=plan_id).first()
        except (DjangoValidationError, ValueError, TypeError):
            plan = None

        if plan is None:
            logger.info("Active plan not found", extra={"plan_id": str(plan_id)})
            raise PlanNotFoundError(
                f"Plan {plan_id} not found or inactive",
                details={"plan_id": str(plan_id)},
            )
        return plan
