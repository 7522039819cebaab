# orders/models/order.py

import uuid
from decimal import Decimal

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models
from django.utils import timezone


def generate_order_no() -> str:
    prefix = timezone.now().strftime("ORD%Y%m%d")
    return f"{prefix}-{uuid.uuid4().hex[:8].upper()}"


class Order(models.Model):
    """
    One purchase transaction.

    Key rules:
    - order_no is generated once on first save and never changes.
    - total_amount equals sum(item.price * item.quantity) at creation and is
      never recomputed.
    - status / payment_status are written ONLY by the order orchestrator
      (orders.services.order_orchestrator) after validate_transition().
    """

    # Order status (lifecycle)
    STATUS_PENDING_PAYMENT = "pending_payment"
    STATUS_PENDING_DELIVERY = "pending_delivery"
    STATUS_DELIVERED = "delivered"
    STATUS_COMPLETED = "completed"
    STATUS_CANCELLED = "cancelled"
    STATUS_REFUND_PENDING = "refund_pending"
    STATUS_REFUND_APPROVED = "refund_approved"
    STATUS_REFUND_REJECTED = "refund_rejected"

    STATUS_CHOICES = [
        (STATUS_PENDING_PAYMENT, "Pending Payment"),
        (STATUS_PENDING_DELIVERY, "Pending Delivery"),
        (STATUS_DELIVERED, "Delivered"),
        (STATUS_COMPLETED, "Completed"),
        (STATUS_CANCELLED, "Cancelled"),
        (STATUS_REFUND_PENDING, "Refund Pending"),
        (STATUS_REFUND_APPROVED, "Refund Approved"),
        (STATUS_REFUND_REJECTED, "Refund Rejected"),
    ]

    # Payment status (money axis)
    PAYMENT_UNPAID = "unpaid"
    PAYMENT_PAID = "paid"
    PAYMENT_REFUNDED = "refunded"

    PAYMENT_STATUS_CHOICES = [
        (PAYMENT_UNPAID, "Unpaid"),
        (PAYMENT_PAID, "Paid"),
        (PAYMENT_REFUNDED, "Refunded"),
    ]

    TYPE_NORMAL = "normal"
    TYPE_VIP = "vip"

    TYPE_CHOICES = [
        (TYPE_NORMAL, "Normal"),
        (TYPE_VIP, "VIP"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    order_no = models.CharField(
        max_length=64,
        unique=True,
        blank=True,
        editable=False,
        help_text="System-generated public order number",
    )

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="orders",
    )

    order_type = models.CharField(max_length=20, choices=TYPE_CHOICES, default=TYPE_NORMAL)

    total_amount = models.DecimalField(
        max_digits=12, decimal_places=2, default=Decimal("0.00")
    )

    status = models.CharField(
        max_length=32, choices=STATUS_CHOICES, default=STATUS_PENDING_PAYMENT
    )
    payment_status = models.CharField(
        max_length=16, choices=PAYMENT_STATUS_CHOICES, default=PAYMENT_UNPAID
    )
    payment_method = models.CharField(max_length=32, blank=True, default="")
    transaction_id = models.CharField(
        max_length=128,
        blank=True,
        default="",
        help_text="Gateway transaction reference of the captured payment",
    )

    # Shipping snapshot (copied from the address book at checkout)
    consignee = models.CharField(max_length=64)
    phone = models.CharField(max_length=32)
    address = models.CharField(max_length=512)

    remark = models.TextField(blank=True, default="")

    tracking_no = models.CharField(max_length=64, blank=True, default="")
    tracking_company = models.CharField(max_length=64, blank=True, default="")

    # Refund metadata
    refund_reason = models.TextField(blank=True, default="")
    refund_remark = models.TextField(blank=True, default="")
    refund_no = models.CharField(max_length=80, blank=True, default="", db_index=True)
    refund_transaction_id = models.CharField(max_length=128, blank=True, default="")

    # Lifecycle timestamps
    payment_time = models.DateTimeField(null=True, blank=True)
    delivery_time = models.DateTimeField(null=True, blank=True)
    completion_time = models.DateTimeField(null=True, blank=True)
    cancel_time = models.DateTimeField(null=True, blank=True)
    refund_request_time = models.DateTimeField(null=True, blank=True)
    refund_approval_time = models.DateTimeField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["user", "status"], name="order_user_status_idx"),
            models.Index(fields=["status", "created_at"], name="order_status_created_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(total_amount__gte=0),
                name="order_total_non_negative",
            ),
        ]

    def save(self, *args, **kwargs):
        if not self.order_no:
            self.order_no = generate_order_no()
        elif not self._state.adding:
            persisted = (
                type(self).objects.filter(pk=self.pk).values_list("order_no", flat=True).first()
            )
            if persisted and persisted != self.order_no:
                raise ValidationError("order_no is immutable once assigned")

        super().save(*args, **kwargs)

    @property
    def is_paid(self) -> bool:
        return self.payment_status == self.PAYMENT_PAID

    def __str__(self):
        return f"{self.order_no} | {self.total_amount} | {self.status}"
