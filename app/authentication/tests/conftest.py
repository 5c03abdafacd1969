"""
Test configuration and fixtures for authentication tests.

Usage:
    def test_example(user, authenticated_client):
        response = authenticated_client.get('/api/v1/auth/me/')
        assert response.status_code == 200
"""

import pytest
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

from authentication.tests.factories import AdminUserFactory, UserFactory


@pytest.fixture
def user(db):
    """Create a customer user."""
    return UserFactory(first_name="Test", last_name="Customer")


@pytest.fixture
def admin_user(db):
    """Create a user holding the admin role."""
    return AdminUserFactory()


@pytest.fixture
def api_client():
    """Unauthenticated API client for public endpoints."""
    return APIClient()


@pytest.fixture
def authenticated_client(user):
    """API client authenticated with a JWT for the default user fixture."""
    client = APIClient()
    refresh = RefreshToken.for_user(user)
    client.credentials(HTTP_AUTHORIZATION=f"Bearer {refresh.access_token}")
    return client


@pytest.fixture
def valid_registration_data():
    """Valid data for the registration endpoint."""
    return {
        "email": "newcustomer@example.com",
        "password": "SecurePass123!",
        "first_name": "New",
        "last_name": "Customer",
    }
