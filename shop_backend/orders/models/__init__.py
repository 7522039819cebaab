from .order import Order, generate_order_no
from .order_item import OrderItem
from .payment_attempt import PaymentAttempt

__all__ = [
    "Order",
    "OrderItem",
    "PaymentAttempt",
    "generate_order_no",
]
