"""
======================================================
PATH: products/migrations/0002_stockmovement.py
======================================================
MIGRATION: CREATE StockMovement (inventory audit ledger)

Depends on orders.0001 because every movement references the order that
caused it.
"""

from __future__ import annotations

import uuid

import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):
    dependencies = [
        ("products", "0001_initial"),
        ("orders", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="StockMovement",
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
                (
                    "movement_type",
                    models.CharField(
                        choices=[("IN", "Stock In"), ("OUT", "Stock Out")],
                        max_length=3,
                    ),
                ),
                (
                    "reason",
                    models.CharField(
                        choices=[
                            ("ORDER", "Order Placed"),
                            ("CANCEL", "Order Cancelled"),
                            ("REFUND", "Order Refunded"),
                        ],
                        max_length=20,
                    ),
                ),
                ("quantity", models.PositiveIntegerField()),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "order",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="stock_movements",
                        to="orders.order",
                    ),
                ),
                (
                    "product",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="stock_movements",
                        to="products.product",
                    ),
                ),
            ],
            options={
                "ordering": ["created_at"],
                "indexes": [
                    models.Index(fields=["product", "created_at"], name="movement_product_idx"),
                    models.Index(fields=["order", "created_at"], name="movement_order_idx"),
                ],
            },
        ),
    ]
