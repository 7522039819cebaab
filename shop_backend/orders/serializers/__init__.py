from .order_command import (
    CheckoutCommandSerializer,
    CreateOrderCommandSerializer,
    OrderPatchCommandSerializer,
    RefundRequestCommandSerializer,
    ResolveRefundCommandSerializer,
    ShipCommandSerializer,
)
from .order_read import OrderItemSerializer, OrderSerializer

__all__ = [
    "OrderSerializer",
    "OrderItemSerializer",
    "CreateOrderCommandSerializer",
    "CheckoutCommandSerializer",
    "ShipCommandSerializer",
    "RefundRequestCommandSerializer",
    "ResolveRefundCommandSerializer",
    "OrderPatchCommandSerializer",
]
