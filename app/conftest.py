"""
Root pytest configuration for the Django project.

This module configures pytest-django and provides project-wide hooks.
App-specific fixtures are defined in each app's tests/conftest.py.
"""

import os

import django
import pytest

# Ensure Django settings are configured before any tests run
os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings")


def pytest_configure():
    """Configure Django settings before tests run."""
    django.setup()

    from django.conf import settings

    # Disable throttling during tests to prevent rate limit failures
    settings.REST_FRAMEWORK["DEFAULT_THROTTLE_CLASSES"] = []
    settings.REST_FRAMEWORK["DEFAULT_THROTTLE_RATES"] = {}

    # Use fast password hasher for tests
    settings.PASSWORD_HASHERS = [
        "django.contrib.auth.hashers.MD5PasswordHasher",
    ]


def pytest_collection_modifyitems(items):
    """
    Auto-mark tests based on filename patterns.

    Mapping:
    - test_integration.py → e2e
    - test_views.py, test_orchestrator.py, test_ledger.py, etc. → integration
    - test_models.py, test_billing.py, test_locks.py, etc. → unit
    - Unmatched files → integration (safe default for Django)

    Explicit markers on test functions/classes take precedence.
    """
    e2e_patterns = ["test_integration.py"]

    integration_patterns = [
        "test_views.py",
        "test_services.py",
        "test_permissions.py",
        "test_orchestrator.py",
        "test_ledger.py",
        "test_admin_reports.py",
    ]

    unit_patterns = [
        "test_models.py",
        "test_managers.py",
        "test_exceptions.py",
        "test_billing.py",
        "test_catalog.py",
        "test_records.py",
        "test_locks.py",
    ]

    for item in items:
        existing_markers = {m.name for m in item.iter_markers()}
        if existing_markers & {"unit", "integration", "e2e"}:
            continue

        filename = item.path.name

        if filename in e2e_patterns:
            item.add_marker(pytest.mark.e2e)
        elif filename in integration_patterns:
            item.add_marker(pytest.mark.integration)
        elif filename in unit_patterns:
            item.add_marker(pytest.mark.unit)
        else:
            item.add_marker(pytest.mark.integration)
