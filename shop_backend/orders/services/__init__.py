from .checkout_orchestrator import checkout, create_order
from .membership_orders import create_vip_order
from .order_orchestrator import (
    REFUND_APPROVED,
    REFUND_REJECTED,
    cancel,
    complete,
    initiate_payment,
    mark_paid,
    order_stats,
    request_refund,
    resolve_refund,
    ship,
)
from .order_patch import UNSET, OrderPatch, apply_order_patch
from .payment_callbacks import (
    GatewayNotification,
    handle_payment_notification,
    handle_refund_notification,
)

__all__ = [
    "checkout",
    "create_order",
    "create_vip_order",
    "initiate_payment",
    "mark_paid",
    "ship",
    "complete",
    "cancel",
    "request_refund",
    "resolve_refund",
    "REFUND_APPROVED",
    "REFUND_REJECTED",
    "order_stats",
    "OrderPatch",
    "UNSET",
    "apply_order_patch",
    "GatewayNotification",
    "handle_payment_notification",
    "handle_refund_notification",
]
