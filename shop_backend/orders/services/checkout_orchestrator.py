# orders/services/checkout_orchestrator.py

"""
CHECKOUT ORCHESTRATOR (APPLICATION SERVICE)

Purpose:
- Turn a list of (product, quantity) lines into a pending_payment Order.
- Two entry points share one creation path:
    create_order()  direct purchase with explicit lines
    checkout()      in-cart checkout of the buyer's selected cart lines

Hard rules:
- Quantities are integer units.
- Unit prices are resolved server-side (VIP > wholesale > normal) and
  snapshotted on the OrderItem together with name and cover.
- total_amount == sum(item.price * item.quantity), computed once here.

Notes:
- Everything happens inside one DB transaction: order rows, inventory debits
  and cart clearing succeed together or roll back together.
- Product rows are locked in primary-key order so two concurrent checkouts
  touching the same products cannot deadlock each other.
"""

from __future__ import annotations

import logging
import uuid
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable

from django.db import transaction
from django.utils import timezone

from cart.services import CheckoutLine, clear_items, list_selected_items
from orders.models import Order, OrderItem
from orders.services.exceptions import (
    EmptyCheckout,
    InsufficientStock,
    ProductNotFound,
    ProductNotOnSale,
)
from orders.services.pricing import resolve_unit_price
from products.models import Product
from products.services.inventory import debit
from users.services.address_book import get_address

logger = logging.getLogger(__name__)

TWOPLACES = Decimal("0.01")


def _money(v) -> Decimal:
    if v is None or v == "":
        return Decimal("0.00")
    return Decimal(str(v)).quantize(TWOPLACES, rounding=ROUND_HALF_UP)


def _to_int_qty(value) -> int:
    if isinstance(value, bool):
        raise ValueError("quantity must be a whole integer unit")

    if isinstance(value, int):
        qty = value
    elif isinstance(value, str) and value.strip().isdigit():
        qty = int(value.strip())
    else:
        raise ValueError("quantity must be a whole integer unit")

    if qty <= 0:
        raise ValueError("quantity must be at least 1")
    return qty


def _merge_lines(lines: Iterable) -> dict:
    """
    Collapse repeated products into one line, preserving first-seen order.
    Accepts CheckoutLine instances or {"product_id", "quantity"} dicts.
    """
    merged: dict = {}
    for line in lines:
        if isinstance(line, dict):
            product_id, quantity = line.get("product_id"), line.get("quantity")
        else:
            product_id, quantity = line.product_id, line.quantity

        try:
            key = str(uuid.UUID(str(product_id)))
        except (TypeError, ValueError, AttributeError):
            raise ProductNotFound(product_id)

        merged[key] = merged.get(key, 0) + _to_int_qty(quantity)
    return merged


def _lock_products(product_ids) -> dict:
    products = (
        Product.objects
        .select_for_update()
        .filter(pk__in=list(product_ids))
        .order_by("pk")
    )
    return {str(p.pk): p for p in products}


def _place_order(
    *,
    user,
    lines,
    address_id,
    remark: str = "",
    clear_cart: bool = False,
) -> Order:
    quantities = _merge_lines(lines)
    if not quantities:
        raise EmptyCheckout("No items to check out")

    shipping = get_address(address_id=address_id, user=user)

    products = _lock_products(quantities.keys())

    now = timezone.now()
    priced = []
    total = Decimal("0.00")

    # Validate every line before writing anything.
    for key, qty in quantities.items():
        product = products.get(key)
        if product is None:
            raise ProductNotFound(key)

        if not product.is_on_sale:
            raise ProductNotOnSale(product.pk, product.name)

        if product.stock < qty:
            raise InsufficientStock(
                product.pk,
                name=product.name,
                requested=qty,
                available=int(product.stock),
            )

        unit_price = resolve_unit_price(product=product, quantity=qty, buyer=user, now=now)
        total += _money(unit_price * qty)
        priced.append((product, qty, unit_price))

    order = Order.objects.create(
        user=user,
        order_type=Order.TYPE_NORMAL,
        total_amount=_money(total),
        status=Order.STATUS_PENDING_PAYMENT,
        payment_status=Order.PAYMENT_UNPAID,
        consignee=shipping.consignee,
        phone=shipping.phone,
        address=shipping.full_address,
        remark=(remark or "").strip(),
    )

    for product, qty, unit_price in priced:
        OrderItem.objects.create(
            order=order,
            product=product,
            product_name=product.name,
            product_cover=product.cover,
            quantity=qty,
            price=unit_price,
        )

        debit(product_id=product.pk, quantity=qty, order=order)

    if clear_cart:
        clear_items(user=user, product_ids=[p.pk for p, _, _ in priced])

    logger.info(
        "Order created",
        extra={
            "order_no": order.order_no,
            "user_id": str(user.pk),
            "total_amount": str(order.total_amount),
            "lines": len(priced),
            "from_cart": clear_cart,
        },
    )
    return order


@transaction.atomic
def create_order(
    *,
    user,
    lines,
    address_id,
    remark: str = "",
) -> Order:
    """
    Direct purchase: explicit lines, cart untouched.
    """
    return _place_order(
        user=user,
        lines=lines,
        address_id=address_id,
        remark=remark,
        clear_cart=False,
    )


@transaction.atomic
def checkout(*, user, address_id, remark: str = "") -> Order:
    """
    In-cart checkout: buys every selected cart line, then removes those lines.
    """
    lines: list[CheckoutLine] = list_selected_items(user=user)
    if not lines:
        raise EmptyCheckout("No selected items in cart")

    return _place_order(
        user=user,
        lines=lines,
        address_id=address_id,
        remark=remark,
        clear_cart=True,
    )
