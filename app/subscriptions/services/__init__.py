"""
Subscription services.

- SubscriptionOrchestrator: subscribe / pause / resume / cancel and reads
- AdminReportService: dashboard counters and admin listings
"""

from subscriptions.services.admin_reports import AdminReportService, DashboardStats
from subscriptions.services.subscription_orchestrator import (
    SubscribeResult,
    SubscriptionOrchestrator,
)

__all__ = [
    "AdminReportService",
    "DashboardStats",
    "SubscribeResult",
    "SubscriptionOrchestrator",
]
