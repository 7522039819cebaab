"""
======================================================
PATH: products/migrations/0001_initial.py
======================================================
MIGRATION: CREATE Product
"""

from __future__ import annotations

import uuid

from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Product",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4,
                        editable=False,
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                ("name", models.CharField(db_index=True, max_length=255)),
                ("cover", models.CharField(blank=True, default="", max_length=255)),
                ("price", models.DecimalField(decimal_places=2, max_digits=10)),
                (
                    "vip_price",
                    models.DecimalField(blank=True, decimal_places=2, max_digits=10, null=True),
                ),
                (
                    "wholesale_price",
                    models.DecimalField(blank=True, decimal_places=2, max_digits=10, null=True),
                ),
                (
                    "wholesale_threshold",
                    models.PositiveIntegerField(
                        blank=True,
                        help_text="Minimum line quantity at which wholesale_price applies.",
                        null=True,
                    ),
                ),
                ("stock", models.PositiveIntegerField(default=0)),
                ("sales", models.PositiveIntegerField(default=0)),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("on_sale", "On Sale"),
                            ("off_sale", "Off Sale"),
                            ("deleted", "Deleted"),
                        ],
                        default="off_sale",
                        max_length=16,
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["status"], name="product_status_idx"),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(stock__gte=0),
                        name="product_stock_non_negative",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(sales__gte=0),
                        name="product_sales_non_negative",
                    ),
                ],
            },
        ),
    ]
