# cart/models/cart_item.py

"""
CART ITEM MODEL

Purpose:
- Mini-program shopping cart line for one (user, product).
- `selected` marks the lines the buyer ticked for checkout.

Rules:
- One row per (user, product) (DB constraint).
- Quantity must be > 0.
- No price is stored: the unit price is resolved at checkout.
"""

import uuid

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models

from products.models import Product


class CartItem(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="cart_items",
    )

    product = models.ForeignKey(
        Product,
        on_delete=models.CASCADE,
        related_name="cart_items",
    )

    quantity = models.PositiveIntegerField(default=1)
    selected = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["created_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["user", "product"],
                name="one_cart_row_per_user_product",
            )
        ]

    def clean(self):
        if self.quantity is None or int(self.quantity) <= 0:
            raise ValidationError({"quantity": "quantity must be >= 1"})

    def save(self, *args, **kwargs):
        self.full_clean()
        return super().save(*args, **kwargs)

    def __str__(self):
        return f"{self.user} | {self.product} x{self.quantity}"
