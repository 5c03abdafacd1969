"""
Factory Boy factories for authentication models.

Usage:
    from authentication.tests.factories import UserFactory, AdminUserFactory

    customer = UserFactory()
    admin = AdminUserFactory()
"""

import factory

from authentication.models import User, UserRole


class UserFactory(factory.django.DjangoModelFactory):
    """
    Factory for User model.

    Creates active customers by default.

    Examples:
        user = UserFactory()
        user = UserFactory(first_name="Ada", last_name="Lovelace")
        user = UserFactory(is_active=False)
    """

    class Meta:
        model = User
        skip_postgeneration_save = True

    email = factory.Sequence(lambda n: f"user{n}@example.com")
    first_name = factory.Faker("first_name")
    last_name = factory.Faker("last_name")
    role = UserRole.CUSTOMER
    is_active = True
    is_staff = False

    @classmethod
    def _create(cls, model_class, *args, **kwargs):
        """Override create to use UserManager.create_user()."""
        password = kwargs.pop("password", "TestPass123!")
        return model_class.objects.create_user(
            email=kwargs.pop("email"), password=password, **kwargs
        )


class AdminUserFactory(UserFactory):
    """Factory for users holding the admin role."""

    email = factory.Sequence(lambda n: f"admin{n}@example.com")
    role = UserRole.ADMIN
    is_staff = True
