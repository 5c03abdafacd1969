"""
Seed the default plan catalog.

Plans are matched by name so re-running against a database that already
has them is a no-op.
"""

from decimal import Decimal

from django.db import migrations

DEFAULT_PLANS = [
    {
        "name": "Basic Box",
        "description": "Monthly surprise box with 3-5 items",
        "price": Decimal("19.99"),
        "billing_interval": "monthly",
    },
    {
        "name": "Premium Box",
        "description": "Monthly premium box with 5-7 high-quality items",
        "price": Decimal("39.99"),
        "billing_interval": "monthly",
    },
    {
        "name": "Annual Box",
        "description": "Annual subscription with 12 boxes and exclusive items",
        "price": Decimal("199.99"),
        "billing_interval": "annually",
    },
]


def seed_plans(apps, schema_editor):
    Plan = apps.get_model("subscriptions", "Plan")
    db_alias = schema_editor.connection.alias
    for plan in DEFAULT_PLANS:
        Plan.objects.using(db_alias).get_or_create(
            name=plan["name"],
            defaults={
                "description": plan["description"],
                "price": plan["price"],
                "billing_interval": plan["billing_interval"],
                "is_active": True,
            },
        )


def remove_plans(apps, schema_editor):
    Plan = apps.get_model("subscriptions", "Plan")
    db_alias = schema_editor.connection.alias
    Plan.objects.using(db_alias).filter(
        name__in=[plan["name"] for plan in DEFAULT_PLANS],
        subscriptions__isnull=True,
    ).delete()


class Migration(migrations.Migration):

    dependencies = [
        ("subscriptions", "0001_initial"),
    ]

    operations = [
        migrations.RunPython(seed_plans, remove_plans),
    ]
