# products/models/product.py

import uuid
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import models


class Product(models.Model):
    """
    Represents a sellable product.

    STOCK MODEL (IMPORTANT):
    - `stock` and `sales` are counters owned by the inventory ledger
      (products.services.inventory). Nothing else writes them.
    - stock >= 0 and sales >= 0 are enforced by DB check constraints.

    PRICING:
    - price: normal unit price
    - vip_price: applies to buyers with an active VIP period
    - wholesale_price: applies when a line quantity reaches wholesale_threshold
    """

    STATUS_ON_SALE = "on_sale"
    STATUS_OFF_SALE = "off_sale"
    STATUS_DELETED = "deleted"

    STATUS_CHOICES = [
        (STATUS_ON_SALE, "On Sale"),
        (STATUS_OFF_SALE, "Off Sale"),
        (STATUS_DELETED, "Deleted"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    name = models.CharField(max_length=255, db_index=True)
    cover = models.CharField(max_length=255, blank=True, default="")

    price = models.DecimalField(max_digits=10, decimal_places=2)
    vip_price = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    wholesale_price = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    wholesale_threshold = models.PositiveIntegerField(
        null=True,
        blank=True,
        help_text="Minimum line quantity at which wholesale_price applies.",
    )

    stock = models.PositiveIntegerField(default=0)
    sales = models.PositiveIntegerField(default=0)

    status = models.CharField(max_length=16, choices=STATUS_CHOICES, default=STATUS_OFF_SALE)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["status"], name="product_status_idx"),
        ]
        constraints = [
            models.CheckConstraint(condition=models.Q(stock__gte=0), name="product_stock_non_negative"),
            models.CheckConstraint(condition=models.Q(sales__gte=0), name="product_sales_non_negative"),
        ]

    def clean(self):
        if self.price is None or Decimal(self.price) <= 0:
            raise ValidationError("Price must be greater than zero")

        for field in ("vip_price", "wholesale_price"):
            value = getattr(self, field)
            if value is not None and Decimal(value) <= 0:
                raise ValidationError(f"{field} must be greater than zero when set")

    @property
    def is_on_sale(self) -> bool:
        return self.status == self.STATUS_ON_SALE

    def __str__(self):
        return f"{self.name} ({self.stock} in stock)"
