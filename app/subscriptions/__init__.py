"""
Subscriptions app.

Owns the subscription lifecycle and billing-state engine:
plans, subscriptions, payments, orders and the orchestrator that
ties a subscribe event into one atomic outcome.
"""
