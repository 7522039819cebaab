# orders/models/payment_attempt.py

import uuid
from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone


class PaymentAttempt(models.Model):
    """
    Gateway payment attempt for an Order.

    Idempotency rule:
    - reference is unique (the order number sent to the gateway)
    - notification handling looks the attempt up by reference and verifies the
      notified amount against it
    """

    STATUS_INITIATED = "initiated"
    STATUS_VERIFIED = "verified"
    STATUS_FAILED = "failed"

    STATUS_CHOICES = [
        (STATUS_INITIATED, "Initiated"),
        (STATUS_VERIFIED, "Verified"),
        (STATUS_FAILED, "Failed"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    order = models.ForeignKey(
        "orders.Order",
        on_delete=models.CASCADE,
        related_name="payment_attempts",
    )

    reference = models.CharField(
        max_length=128,
        unique=True,
        help_text="Reference sent to the gateway (order number). Unique for idempotency.",
    )

    amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.01"))],
    )
    currency = models.CharField(max_length=8, default="CNY")

    status = models.CharField(max_length=32, choices=STATUS_CHOICES, default=STATUS_INITIATED)

    provider_payload = models.JSONField(default=dict, blank=True)

    initiated_at = models.DateTimeField(auto_now_add=True)
    verified_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ["-initiated_at"]
        indexes = [
            models.Index(fields=["status"], name="payment_attempt_status_idx"),
            models.Index(fields=["order", "initiated_at"], name="payment_attempt_order_idx"),
        ]

    def mark_verified(self, payload=None):
        self.status = self.STATUS_VERIFIED
        self.verified_at = self.verified_at or timezone.now()
        if payload is not None:
            self.provider_payload = payload

    def __str__(self):
        return f"{self.reference} | {self.status}"
