"""
Subscriptions app configuration.

This app provides the subscription lifecycle engine:
- Plan catalog
- Billing period calculation
- Subscription ledger with the one-non-terminal-per-customer invariant
- Simulated payments and initial order emission
"""

from django.apps import AppConfig


class SubscriptionsConfig(AppConfig):
    """Configuration for the subscriptions application."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "subscriptions"
    verbose_name = "Subscriptions"
