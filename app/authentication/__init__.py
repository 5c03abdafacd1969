"""
Authentication application.

Email-based users with a customer/admin role tag, registration and
JWT issue/refresh.

Key components:
    - User model: Custom email-based user with a role
    - IsAdminRole: Permission gating admin-only endpoints
    - RegisterView / MeView: Customer self-service endpoints

Usage:
    from authentication.models import User, UserRole
    from authentication.permissions import IsAdminRole
"""
