"""
ORDER LIFECYCLE DOMAIN RULES

This module defines the ONLY allowed lifecycle transitions
for Order entities.

DESIGN PRINCIPLES:
- No database writes
- No stock mutation
- No side effects
- Single source of truth
"""

from orders.models import Order
from orders.services.exceptions import InvalidTransition

# ============================================================
# STATE DEFINITIONS
# ============================================================

TERMINAL_STATES = {
    Order.STATUS_COMPLETED,
    Order.STATUS_CANCELLED,
    Order.STATUS_REFUND_APPROVED,
    Order.STATUS_REFUND_REJECTED,
}

ALLOWED_TRANSITIONS = {
    Order.STATUS_PENDING_PAYMENT: {
        Order.STATUS_PENDING_DELIVERY,
        Order.STATUS_CANCELLED,
    },
    Order.STATUS_PENDING_DELIVERY: {
        Order.STATUS_DELIVERED,
        Order.STATUS_CANCELLED,
        Order.STATUS_REFUND_PENDING,
    },
    Order.STATUS_DELIVERED: {
        Order.STATUS_COMPLETED,
        Order.STATUS_REFUND_PENDING,
    },
    Order.STATUS_REFUND_PENDING: {
        Order.STATUS_REFUND_APPROVED,
        Order.STATUS_REFUND_REJECTED,
    },
}

# Membership orders carry no goods: payment completes them directly.
VIP_ALLOWED_TRANSITIONS = {
    Order.STATUS_PENDING_PAYMENT: {
        Order.STATUS_COMPLETED,
        Order.STATUS_CANCELLED,
    },
}

# Statuses that still hold reserved stock and may therefore be cancelled.
CANCELLABLE_STATES = {
    Order.STATUS_PENDING_PAYMENT,
    Order.STATUS_PENDING_DELIVERY,
}

# Shipping snapshot may only be corrected before the parcel leaves.
SHIPPING_EDITABLE_STATES = {
    Order.STATUS_PENDING_PAYMENT,
    Order.STATUS_PENDING_DELIVERY,
}


# ============================================================
# DOMAIN RULES
# ============================================================


def transitions_for(order_type: str) -> dict:
    if order_type == Order.TYPE_VIP:
        return VIP_ALLOWED_TRANSITIONS
    return ALLOWED_TRANSITIONS


def can_transition(*, from_status: str, to_status: str, order_type: str = Order.TYPE_NORMAL) -> bool:
    if from_status in TERMINAL_STATES:
        return False

    return to_status in transitions_for(order_type).get(from_status, set())


def validate_transition(*, order: Order, target_status: str, operation: str):
    if not can_transition(
        from_status=order.status,
        to_status=target_status,
        order_type=order.order_type,
    ):
        raise InvalidTransition(order=order, operation=operation)
