"""
======================================================
PATH: products/services/inventory.py
======================================================
INVENTORY LEDGER

Purpose:
- debit(): reserve stock for an order line (stock -= qty, sales += qty)
- credit(): reverse a prior debit on cancel / refund (stock += qty, sales -= qty)

Rules:
- Quantities are positive integer units.
- Both operations MUST run inside the caller's transaction; they never commit
  on their own. The orchestrator owns the transaction boundary.
- The product row is locked with SELECT ... FOR UPDATE, so concurrent debits of
  the same product serialize and cannot both pass the stock check.
- Every counter change writes an immutable StockMovement row.
"""

from __future__ import annotations

import logging

from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import F

from products.models import Product, StockMovement
from products.services.exceptions import (
    InsufficientStock,
    InventoryError,
    InventoryIntegrityError,
    ProductNotFound,
)

logger = logging.getLogger(__name__)


def _require_transaction() -> None:
    if not transaction.get_connection().in_atomic_block:
        raise InventoryError(
            "Inventory operations must run inside the caller's transaction."
        )


def _to_positive_qty(value) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError("quantity must be a whole integer unit")
    if value <= 0:
        raise ValueError("quantity must be at least 1")
    return value


def _lock_product(product_id) -> Product:
    try:
        return Product.objects.select_for_update().get(pk=product_id)
    except (Product.DoesNotExist, ValueError, ValidationError):
        raise ProductNotFound(product_id)


def debit(*, product_id, quantity, order=None) -> Product:
    """
    Decrement stock and increment sales by `quantity`.

    Raises InsufficientStock (no mutation) when stock < quantity.
    """
    _require_transaction()
    qty = _to_positive_qty(quantity)

    product = _lock_product(product_id)

    if product.stock < qty:
        raise InsufficientStock(
            product.pk,
            name=product.name,
            requested=qty,
            available=int(product.stock),
        )

    Product.objects.filter(pk=product.pk).update(
        stock=F("stock") - qty,
        sales=F("sales") + qty,
    )

    StockMovement.objects.create(
        product=product,
        movement_type=StockMovement.MovementType.OUT,
        reason=StockMovement.Reason.ORDER,
        quantity=qty,
        order=order,
    )

    product.refresh_from_db(fields=["stock", "sales"])
    return product


def credit(*, product_id, quantity, order=None, reason=StockMovement.Reason.CANCEL) -> Product:
    """
    Increment stock and decrement sales by `quantity` (reverses a debit).
    """
    _require_transaction()
    qty = _to_positive_qty(quantity)

    if StockMovement.REASON_TO_MOVEMENT.get(reason) != StockMovement.MovementType.IN:
        raise ValueError(f"{reason} is not a stock-in reason")

    product = _lock_product(product_id)

    if product.sales < qty:
        logger.error(
            "Inventory reversal exceeds recorded sales",
            extra={"product_id": str(product.pk), "sales": product.sales, "quantity": qty},
        )
        raise InventoryIntegrityError(
            f"Cannot reverse {qty} units of {product.name}: only {product.sales} recorded as sold."
        )

    Product.objects.filter(pk=product.pk).update(
        stock=F("stock") + qty,
        sales=F("sales") - qty,
    )

    StockMovement.objects.create(
        product=product,
        movement_type=StockMovement.MovementType.IN,
        reason=reason,
        quantity=qty,
        order=order,
    )

    product.refresh_from_db(fields=["stock", "sales"])
    return product
