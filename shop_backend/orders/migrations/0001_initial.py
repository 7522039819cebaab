"""
======================================================
PATH: orders/migrations/0001_initial.py
======================================================
MIGRATION: CREATE Order + OrderItem + PaymentAttempt
"""

from __future__ import annotations

import uuid
from decimal import Decimal

import django.core.validators
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        ("products", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Order",
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
                    "order_no",
                    models.CharField(
                        blank=True,
                        editable=False,
                        help_text="System-generated public order number",
                        max_length=64,
                        unique=True,
                    ),
                ),
                (
                    "order_type",
                    models.CharField(
                        choices=[("normal", "Normal"), ("vip", "VIP")],
                        default="normal",
                        max_length=20,
                    ),
                ),
                (
                    "total_amount",
                    models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=12),
                ),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("pending_payment", "Pending Payment"),
                            ("pending_delivery", "Pending Delivery"),
                            ("delivered", "Delivered"),
                            ("completed", "Completed"),
                            ("cancelled", "Cancelled"),
                            ("refund_pending", "Refund Pending"),
                            ("refund_approved", "Refund Approved"),
                            ("refund_rejected", "Refund Rejected"),
                        ],
                        default="pending_payment",
                        max_length=32,
                    ),
                ),
                (
                    "payment_status",
                    models.CharField(
                        choices=[("unpaid", "Unpaid"), ("paid", "Paid"), ("refunded", "Refunded")],
                        default="unpaid",
                        max_length=16,
                    ),
                ),
                ("payment_method", models.CharField(blank=True, default="", max_length=32)),
                (
                    "transaction_id",
                    models.CharField(
                        blank=True,
                        default="",
                        help_text="Gateway transaction reference of the captured payment",
                        max_length=128,
                    ),
                ),
                ("consignee", models.CharField(max_length=64)),
                ("phone", models.CharField(max_length=32)),
                ("address", models.CharField(max_length=512)),
                ("remark", models.TextField(blank=True, default="")),
                ("tracking_no", models.CharField(blank=True, default="", max_length=64)),
                ("tracking_company", models.CharField(blank=True, default="", max_length=64)),
                ("refund_reason", models.TextField(blank=True, default="")),
                ("refund_remark", models.TextField(blank=True, default="")),
                (
                    "refund_no",
                    models.CharField(blank=True, db_index=True, default="", max_length=80),
                ),
                (
                    "refund_transaction_id",
                    models.CharField(blank=True, default="", max_length=128),
                ),
                ("payment_time", models.DateTimeField(blank=True, null=True)),
                ("delivery_time", models.DateTimeField(blank=True, null=True)),
                ("completion_time", models.DateTimeField(blank=True, null=True)),
                ("cancel_time", models.DateTimeField(blank=True, null=True)),
                ("refund_request_time", models.DateTimeField(blank=True, null=True)),
                ("refund_approval_time", models.DateTimeField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "user",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="orders",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["user", "status"], name="order_user_status_idx"),
                    models.Index(fields=["status", "created_at"], name="order_status_created_idx"),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(total_amount__gte=0),
                        name="order_total_non_negative",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="OrderItem",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                ("product_name", models.CharField(max_length=255)),
                ("product_cover", models.CharField(blank=True, default="", max_length=255)),
                (
                    "quantity",
                    models.PositiveIntegerField(
                        validators=[django.core.validators.MinValueValidator(1)]
                    ),
                ),
                (
                    "price",
                    models.DecimalField(
                        decimal_places=2,
                        help_text="Unit price charged (tier already resolved)",
                        max_digits=10,
                        validators=[django.core.validators.MinValueValidator(Decimal("0.01"))],
                    ),
                ),
                (
                    "rating",
                    models.PositiveSmallIntegerField(
                        blank=True,
                        null=True,
                        validators=[
                            django.core.validators.MinValueValidator(1),
                            django.core.validators.MaxValueValidator(5),
                        ],
                    ),
                ),
                ("comment", models.TextField(blank=True, default="")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "order",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="items",
                        to="orders.order",
                    ),
                ),
                (
                    "product",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="order_items",
                        to="products.product",
                    ),
                ),
            ],
            options={
                "ordering": ["created_at"],
                "indexes": [
                    models.Index(fields=["order"], name="order_item_order_idx"),
                    models.Index(fields=["product"], name="order_item_product_idx"),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(quantity__gt=0),
                        name="order_item_quantity_positive",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="PaymentAttempt",
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
                    "reference",
                    models.CharField(
                        help_text="Reference sent to the gateway (order number). Unique for idempotency.",
                        max_length=128,
                        unique=True,
                    ),
                ),
                (
                    "amount",
                    models.DecimalField(
                        decimal_places=2,
                        max_digits=12,
                        validators=[django.core.validators.MinValueValidator(Decimal("0.01"))],
                    ),
                ),
                ("currency", models.CharField(default="CNY", max_length=8)),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("initiated", "Initiated"),
                            ("verified", "Verified"),
                            ("failed", "Failed"),
                        ],
                        default="initiated",
                        max_length=32,
                    ),
                ),
                ("provider_payload", models.JSONField(blank=True, default=dict)),
                ("initiated_at", models.DateTimeField(auto_now_add=True)),
                ("verified_at", models.DateTimeField(blank=True, null=True)),
                (
                    "order",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="payment_attempts",
                        to="orders.order",
                    ),
                ),
            ],
            options={
                "ordering": ["-initiated_at"],
                "indexes": [
                    models.Index(fields=["status"], name="payment_attempt_status_idx"),
                    models.Index(fields=["order", "initiated_at"], name="payment_attempt_order_idx"),
                ],
            },
        ),
    ]
