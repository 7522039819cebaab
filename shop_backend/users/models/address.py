# users/models/address.py

import uuid

from django.conf import settings
from django.db import models


class Address(models.Model):
    """
    Shipping address in a user's address book.

    Orders never reference this row: checkout copies consignee/phone/full address
    into the order (snapshot), so later edits here do not rewrite history.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="addresses",
    )

    name = models.CharField(max_length=64, help_text="Consignee name")
    phone = models.CharField(max_length=32)
    province = models.CharField(max_length=64)
    city = models.CharField(max_length=64)
    district = models.CharField(max_length=64)
    detail = models.CharField(max_length=255)
    is_default = models.BooleanField(default=False)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-is_default", "-created_at"]
        indexes = [
            models.Index(fields=["user", "is_default"], name="address_user_default_idx"),
        ]

    @property
    def full_address(self) -> str:
        return f"{self.province}{self.city}{self.district}{self.detail}"

    def __str__(self):
        return f"{self.name} | {self.full_address}"
