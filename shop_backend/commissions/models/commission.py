"""
PATH: commissions/models/commission.py

REFERRAL COMMISSION RECORD

One accrual per (order, beneficiary):
- beneficiary: the inviter who earns the commission
- invitee: the purchaser whose completed order produced it
- amount: order total * rate, frozen at accrual time

The beneficiary's running balance (User.commission) is adjusted ONLY by
commissions.services.commission_ledger, never by saving this model directly.
"""

import uuid
from decimal import Decimal

from django.conf import settings
from django.db import models


class Commission(models.Model):
    STATUS_PENDING = "pending"
    STATUS_SETTLED = "settled"
    STATUS_CANCELLED = "cancelled"

    STATUS_CHOICES = [
        (STATUS_PENDING, "Pending"),
        (STATUS_SETTLED, "Settled"),
        (STATUS_CANCELLED, "Cancelled"),
    ]

    VALID_STATUSES = {STATUS_PENDING, STATUS_SETTLED, STATUS_CANCELLED}

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    beneficiary = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="commissions",
    )
    invitee = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="generated_commissions",
    )
    order = models.ForeignKey(
        "orders.Order",
        on_delete=models.PROTECT,
        related_name="commissions",
    )

    amount = models.DecimalField(max_digits=12, decimal_places=2)
    rate = models.DecimalField(
        max_digits=5,
        decimal_places=4,
        default=Decimal("0.0500"),
        help_text="Rate applied when the commission was accrued.",
    )

    status = models.CharField(max_length=16, choices=STATUS_CHOICES, default=STATUS_PENDING)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["beneficiary", "status"], name="commission_beneficiary_idx"),
            models.Index(fields=["status", "created_at"], name="commission_status_idx"),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=["order", "beneficiary"],
                name="one_commission_per_order_beneficiary",
            ),
            models.CheckConstraint(
                condition=models.Q(amount__gte=0),
                name="commission_amount_non_negative",
            ),
        ]

    def __str__(self):
        return f"{self.beneficiary_id} | {self.amount} | {self.status}"
