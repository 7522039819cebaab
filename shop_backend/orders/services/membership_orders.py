# orders/services/membership_orders.py

"""
VIP MEMBERSHIP ORDERS

A membership order has no items and no shipping snapshot. Its price comes
from settings.VIP_MEMBERSHIP_PRICE, never from the client. It is paid through
the normal /pay/ flow; mark_paid() completes it and extends the buyer's VIP
period.
"""

from __future__ import annotations

import logging
from decimal import Decimal

from django.conf import settings
from django.db import transaction

from orders.models import Order

logger = logging.getLogger(__name__)

MEMBERSHIP_REMARK = "Annual VIP membership"


def membership_price() -> Decimal:
    price = Decimal(str(getattr(settings, "VIP_MEMBERSHIP_PRICE", "99.00")))
    if price <= 0:
        raise ValueError("VIP_MEMBERSHIP_PRICE must be greater than zero")
    return price.quantize(Decimal("0.01"))


@transaction.atomic
def create_vip_order(*, user) -> Order:
    order = Order.objects.create(
        user=user,
        order_type=Order.TYPE_VIP,
        total_amount=membership_price(),
        status=Order.STATUS_PENDING_PAYMENT,
        payment_status=Order.PAYMENT_UNPAID,
        remark=MEMBERSHIP_REMARK,
    )

    logger.info(
        "VIP membership order created",
        extra={"order_no": order.order_no, "user_id": str(user.pk)},
    )
    return order
