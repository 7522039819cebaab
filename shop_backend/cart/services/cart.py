"""
======================================================
PATH: cart/services/cart.py
======================================================
CART COLLABORATOR (consumed by checkout)

- list_selected_items(): the lines a buyer ticked, as plain CheckoutLine values
- clear_items(): drop purchased lines; runs inside the checkout transaction
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, List

from cart.models import CartItem

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CheckoutLine:
    product_id: object
    quantity: int


def list_selected_items(*, user) -> List[CheckoutLine]:
    rows = (
        CartItem.objects
        .filter(user=user, selected=True)
        .order_by("created_at")
        .values_list("product_id", "quantity")
    )
    return [CheckoutLine(product_id=pid, quantity=int(qty)) for pid, qty in rows]


def clear_items(*, user, product_ids: Iterable) -> int:
    """
    Delete the user's cart rows for `product_ids`. Returns the number removed.
    """
    ids = list(product_ids)
    if not ids:
        return 0

    deleted, _ = CartItem.objects.filter(user=user, product_id__in=ids).delete()
    logger.info("Cart lines cleared", extra={"user_id": str(user.pk), "removed": deleted})
    return deleted
