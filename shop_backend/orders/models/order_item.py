# orders/models/order_item.py

from decimal import Decimal

from django.core.exceptions import ValidationError
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models

from products.models import Product


class OrderItem(models.Model):
    """
    Line item for Order.

    product_name / product_cover / price are SNAPSHOTS taken at checkout and
    are write-once; later product edits never reach existing orders.
    Only rating / comment may change after creation.
    """

    SNAPSHOT_FIELDS = ("product_id", "product_name", "product_cover", "price", "quantity")

    order = models.ForeignKey(
        "orders.Order",
        on_delete=models.CASCADE,
        related_name="items",
    )

    product = models.ForeignKey(
        Product,
        on_delete=models.PROTECT,
        related_name="order_items",
    )

    product_name = models.CharField(max_length=255)
    product_cover = models.CharField(max_length=255, blank=True, default="")

    quantity = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.01"))],
        help_text="Unit price charged (tier already resolved)",
    )

    rating = models.PositiveSmallIntegerField(
        null=True,
        blank=True,
        validators=[MinValueValidator(1), MaxValueValidator(5)],
    )
    comment = models.TextField(blank=True, default="")

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["created_at"]
        indexes = [
            models.Index(fields=["order"], name="order_item_order_idx"),
            models.Index(fields=["product"], name="order_item_product_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(quantity__gt=0),
                name="order_item_quantity_positive",
            ),
        ]

    @property
    def line_total(self) -> Decimal:
        return (Decimal(self.quantity) * Decimal(self.price)).quantize(Decimal("0.01"))

    def clean(self):
        if self.quantity is None or int(self.quantity) <= 0:
            raise ValidationError("quantity must be >= 1")

        if self.price is None or Decimal(self.price) <= Decimal("0.00"):
            raise ValidationError("price must be > 0")

    def save(self, *args, **kwargs):
        if not self._state.adding:
            persisted = type(self).objects.filter(pk=self.pk).values(*self.SNAPSHOT_FIELDS).first()
            if persisted:
                for field in self.SNAPSHOT_FIELDS:
                    if persisted[field] != getattr(self, field):
                        raise ValidationError(f"OrderItem.{field} is a snapshot and cannot change")

        self.full_clean()
        return super().save(*args, **kwargs)

    def __str__(self):
        return f"{self.product_name} x{self.quantity}"
