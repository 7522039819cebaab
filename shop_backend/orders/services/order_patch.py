"""
ADMIN ORDER PATCH

Explicit partial-update structure: every field is either UNSET (leave alone)
or a provided value. Validated before any row is touched.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, fields

from django.db import transaction

from orders.models import Order
from orders.services.exceptions import InvalidOrderPatch, InvalidTransition, OrderNotFound
from orders.services.order_lifecycle import SHIPPING_EDITABLE_STATES

logger = logging.getLogger(__name__)


class _Unset:
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self):
        return False

    def __repr__(self):
        return "UNSET"


UNSET = _Unset()

SHIPPING_FIELDS = ("consignee", "phone", "address")


@dataclass(frozen=True)
class OrderPatch:
    remark: object = UNSET
    consignee: object = UNSET
    phone: object = UNSET
    address: object = UNSET

    @classmethod
    def from_mapping(cls, data) -> "OrderPatch":
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise InvalidOrderPatch(f"Unsupported fields: {', '.join(sorted(unknown))}")
        return cls(**{k: data[k] for k in known if k in data})

    def provided(self) -> dict:
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if getattr(self, f.name) is not UNSET
        }

    @property
    def touches_shipping(self) -> bool:
        return any(name in self.provided() for name in SHIPPING_FIELDS)

    def validate(self) -> dict:
        values = self.provided()
        cleaned = {}
        for name, value in values.items():
            if not isinstance(value, str):
                raise InvalidOrderPatch(f"{name} must be a string")
            value = value.strip()
            if name in SHIPPING_FIELDS and not value:
                raise InvalidOrderPatch(f"{name} cannot be blank")
            cleaned[name] = value
        return cleaned


@transaction.atomic
def apply_order_patch(*, order_id, patch: OrderPatch) -> Order:
    changes = patch.validate()

    order = Order.objects.select_for_update().filter(pk=order_id).first()
    if order is None:
        raise OrderNotFound(order_id)

    if not changes:
        return order

    if patch.touches_shipping and order.status not in SHIPPING_EDITABLE_STATES:
        raise InvalidTransition(
            order=order,
            operation="edit shipping",
            reason="order has already shipped or closed",
        )

    for name, value in changes.items():
        setattr(order, name, value)
    order.save(update_fields=[*changes.keys(), "updated_at"])

    logger.info(
        "Order patched",
        extra={"order_no": order.order_no, "fields": sorted(changes)},
    )
    return order
