# orders/tests/helpers.py

"""
Seed helpers shared by the order test modules.
"""

from __future__ import annotations

from decimal import Decimal

from django.contrib.auth import get_user_model

from products.models import Product
from users.models import Address

User = get_user_model()

GATEWAY_SETTINGS = {
    "GATEWAY": {
        "BASE_URL": "https://gateway.test",
        "APP_ID": "wx-app",
        "MERCHANT_ID": "mch-1",
        "API_KEY": "test-api-key",
        "NOTIFY_URL": "https://shop.test/api/payments/notify/",
        "REFUND_NOTIFY_URL": "https://shop.test/api/payments/refund-notify/",
        "TIMEOUT": 5,
        "CURRENCY": "CNY",
    }
}


def create_user(username: str, **extra):
    return User.objects.create_user(username=username, password="pass", **extra)


def create_admin(username: str = "admin"):
    return User.objects.create_user(
        username=username,
        password="pass",
        role=User.ROLE_ADMIN,
        is_staff=True,
    )


def create_address(user):
    return Address.objects.create(
        user=user,
        name="Zhang San",
        phone="13800000000",
        province="Zhejiang",
        city="Hangzhou",
        district="Xihu",
        detail="88 Wensan Road",
        is_default=True,
    )


def create_product(name: str = "Longjing Tea", *, price="50.00", stock: int = 10, **extra):
    extra.setdefault("status", Product.STATUS_ON_SALE)
    return Product.objects.create(
        name=name,
        price=Decimal(price),
        stock=stock,
        **extra,
    )
