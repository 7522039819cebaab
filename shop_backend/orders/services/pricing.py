"""
UNIT PRICE RESOLUTION

Precedence (highest first):
1. VIP price      buyer has an open VIP period and the product has vip_price
2. Wholesale      product has wholesale_price + threshold and qty >= threshold
3. Normal price
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

from django.utils import timezone

TWOPLACES = Decimal("0.01")


def _money(v) -> Decimal:
    return Decimal(str(v or "0.00")).quantize(TWOPLACES, rounding=ROUND_HALF_UP)


def resolve_unit_price(*, product, quantity: int, buyer, now=None) -> Decimal:
    now = now or timezone.now()

    if product.vip_price is not None and buyer is not None and buyer.is_active_vip(now):
        return _money(product.vip_price)

    threshold = product.wholesale_threshold
    if product.wholesale_price is not None and threshold and int(quantity) >= int(threshold):
        return _money(product.wholesale_price)

    return _money(product.price)
