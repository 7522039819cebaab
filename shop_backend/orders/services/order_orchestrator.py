# orders/services/order_orchestrator.py

"""
ORDER ORCHESTRATOR (APPLICATION SERVICE)

Every operation below:
- locks the order row (SELECT ... FOR UPDATE)
- checks the lifecycle rule BEFORE mutating anything
- commits order status, inventory reversal and commission accrual together

Gateway calls never run inside the transaction:
- initiate_payment() commits the PaymentAttempt first, then calls out
- refunds are dispatched with transaction.on_commit()

Transitions:
    mark_paid        pending_payment  -> pending_delivery  (paid; repeat is a no-op)
    ship             pending_delivery -> delivered
    complete         delivered        -> completed         (+ commission accrual)
    cancel           pending_payment | pending_delivery -> cancelled (+ stock back)
    request_refund   pending_delivery | delivered -> refund_pending (paid only)
    resolve_refund   refund_pending   -> refund_approved (+ stock back, gateway refund)
                                      -> refund_rejected
"""

from __future__ import annotations

import logging
from functools import partial

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import Count
from django.utils import timezone

from commissions.services.commission_ledger import accrue_on_completion
from orders.models import Order, PaymentAttempt
from orders.services.exceptions import InvalidTransition, OrderNotFound
from orders.services.order_lifecycle import CANCELLABLE_STATES, validate_transition
from payments.services import PaymentGatewayError, initiate_refund, to_minor_units
from payments.services import initiate_payment as gateway_initiate_payment
from products.models import StockMovement
from products.services.inventory import credit
from users.services.membership import extend_vip_membership

logger = logging.getLogger(__name__)

REFUND_APPROVED = "approved"
REFUND_REJECTED = "rejected"

DEFAULT_PAYMENT_METHOD = "wechat"


# ============================================================
# HELPERS
# ============================================================


def _lock_order(order_id) -> Order:
    try:
        return Order.objects.select_for_update().get(pk=order_id)
    except (Order.DoesNotExist, ValueError, ValidationError):
        raise OrderNotFound(order_id)


def _restore_stock(*, order: Order, reason: str) -> None:
    for item in order.items.all().order_by("product_id"):
        credit(product_id=item.product_id, quantity=item.quantity, order=order, reason=reason)


def refund_no_for(order: Order) -> str:
    return f"RF-{order.order_no}"


# ============================================================
# PAYMENT
# ============================================================


def initiate_payment(*, order_id, user) -> dict:
    """
    Record a PaymentAttempt, then ask the gateway for client payment params.
    """
    with transaction.atomic():
        order = _lock_order(order_id)

        if order.is_paid or order.status != Order.STATUS_PENDING_PAYMENT:
            raise InvalidTransition(order=order, operation="pay")

        currency = (settings.PAYMENTS.get("GATEWAY") or {}).get("CURRENCY") or "CNY"
        PaymentAttempt.objects.update_or_create(
            reference=order.order_no,
            defaults={
                "order": order,
                "amount": order.total_amount,
                "currency": currency,
                "status": PaymentAttempt.STATUS_INITIATED,
            },
        )

    return gateway_initiate_payment(
        order_no=order.order_no,
        amount_minor_units=to_minor_units(order.total_amount),
        payer_ref=getattr(user, "openid", None) or str(user.pk),
    )


@transaction.atomic
def mark_paid(
    *,
    order_id,
    payment_method: str = DEFAULT_PAYMENT_METHOD,
    transaction_id: str = "",
    paid_at=None,
) -> Order:
    """
    Goods orders move to pending_delivery. Membership orders complete on
    payment and extend the buyer's VIP period in the same transaction.
    """
    order = _lock_order(order_id)

    if order.is_paid:
        logger.info("Duplicate payment ignored", extra={"order_no": order.order_no})
        return order

    if order.payment_status != Order.PAYMENT_UNPAID:
        raise InvalidTransition(order=order, operation="mark paid", reason="payment already refunded")

    is_membership = order.order_type == Order.TYPE_VIP
    target = Order.STATUS_COMPLETED if is_membership else Order.STATUS_PENDING_DELIVERY
    validate_transition(order=order, target_status=target, operation="mark paid")

    paid_at = paid_at or timezone.now()

    order.status = target
    order.payment_status = Order.PAYMENT_PAID
    order.payment_method = (payment_method or DEFAULT_PAYMENT_METHOD).strip()
    order.transaction_id = (transaction_id or "").strip()
    order.payment_time = paid_at
    update_fields = [
        "status",
        "payment_status",
        "payment_method",
        "transaction_id",
        "payment_time",
        "updated_at",
    ]

    if is_membership:
        order.completion_time = paid_at
        update_fields.append("completion_time")

    order.save(update_fields=update_fields)

    if is_membership:
        extend_vip_membership(user_id=order.user_id, now=paid_at)

    logger.info("Order paid", extra={"order_no": order.order_no, "order_type": order.order_type})
    return order


# ============================================================
# FULFILMENT
# ============================================================


@transaction.atomic
def ship(*, order_id, tracking_no: str = "", tracking_company: str = "") -> Order:
    order = _lock_order(order_id)
    validate_transition(order=order, target_status=Order.STATUS_DELIVERED, operation="ship")

    order.status = Order.STATUS_DELIVERED
    order.delivery_time = timezone.now()
    order.tracking_no = (tracking_no or "").strip()
    order.tracking_company = (tracking_company or "").strip()
    order.save(
        update_fields=["status", "delivery_time", "tracking_no", "tracking_company", "updated_at"]
    )

    logger.info("Order shipped", extra={"order_no": order.order_no})
    return order


@transaction.atomic
def complete(*, order_id) -> Order:
    order = _lock_order(order_id)

    if not order.is_paid:
        raise InvalidTransition(order=order, operation="complete", reason="order is not paid")
    validate_transition(order=order, target_status=Order.STATUS_COMPLETED, operation="complete")

    order.status = Order.STATUS_COMPLETED
    order.completion_time = timezone.now()
    order.save(update_fields=["status", "completion_time", "updated_at"])

    accrue_on_completion(order=order)

    logger.info("Order completed", extra={"order_no": order.order_no})
    return order


# ============================================================
# CANCELLATION
# ============================================================


@transaction.atomic
def cancel(*, order_id) -> Order:
    order = _lock_order(order_id)

    if order.status not in CANCELLABLE_STATES:
        raise InvalidTransition(order=order, operation="cancel")
    validate_transition(order=order, target_status=Order.STATUS_CANCELLED, operation="cancel")

    was_paid = order.is_paid

    order.status = Order.STATUS_CANCELLED
    order.cancel_time = timezone.now()
    update_fields = ["status", "cancel_time", "updated_at"]

    if was_paid:
        order.payment_status = Order.PAYMENT_REFUNDED
        order.refund_no = refund_no_for(order)
        update_fields += ["payment_status", "refund_no"]

    order.save(update_fields=update_fields)

    _restore_stock(order=order, reason=StockMovement.Reason.CANCEL)

    if was_paid:
        transaction.on_commit(partial(dispatch_refund, order_id=order.pk))

    logger.info("Order cancelled", extra={"order_no": order.order_no, "was_paid": was_paid})
    return order


# ============================================================
# REFUNDS
# ============================================================


@transaction.atomic
def request_refund(*, order_id, reason: str = "") -> Order:
    order = _lock_order(order_id)

    if not order.is_paid:
        raise InvalidTransition(order=order, operation="request refund", reason="order is not paid")
    validate_transition(order=order, target_status=Order.STATUS_REFUND_PENDING, operation="request refund")

    order.status = Order.STATUS_REFUND_PENDING
    order.refund_reason = (reason or "").strip()
    order.refund_request_time = timezone.now()
    order.save(update_fields=["status", "refund_reason", "refund_request_time", "updated_at"])

    logger.info("Refund requested", extra={"order_no": order.order_no})
    return order


@transaction.atomic
def resolve_refund(*, order_id, decision: str, remark: str = "") -> Order:
    if decision not in (REFUND_APPROVED, REFUND_REJECTED):
        raise ValueError("decision must be 'approved' or 'rejected'")

    order = _lock_order(order_id)

    target = (
        Order.STATUS_REFUND_APPROVED if decision == REFUND_APPROVED else Order.STATUS_REFUND_REJECTED
    )
    validate_transition(order=order, target_status=target, operation=f"resolve refund ({decision})")

    order.status = target
    order.refund_approval_time = timezone.now()
    order.refund_remark = (remark or "").strip()
    update_fields = ["status", "refund_approval_time", "refund_remark", "updated_at"]

    if decision == REFUND_APPROVED:
        order.payment_status = Order.PAYMENT_REFUNDED
        order.refund_no = refund_no_for(order)
        update_fields += ["payment_status", "refund_no"]

    order.save(update_fields=update_fields)

    if decision == REFUND_APPROVED:
        _restore_stock(order=order, reason=StockMovement.Reason.REFUND)
        transaction.on_commit(partial(dispatch_refund, order_id=order.pk))

    logger.info("Refund resolved", extra={"order_no": order.order_no, "decision": decision})
    return order


def dispatch_refund(*, order_id):
    """
    Ask the gateway to return the money for a refunded order.
    Runs after commit; a gateway failure is logged and leaves the order
    refunded locally with refund_transaction_id still empty.
    """
    order = Order.objects.filter(pk=order_id).first()
    if order is None or not order.refund_no or order.refund_transaction_id:
        return None

    if not order.transaction_id:
        logger.warning(
            "Refund not dispatched: no captured transaction",
            extra={"order_no": order.order_no},
        )
        return None

    amount = to_minor_units(order.total_amount)
    try:
        return initiate_refund(
            transaction_ref=order.transaction_id,
            refund_order_ref=order.refund_no,
            amount_minor_units=amount,
            total_minor_units=amount,
            reason=order.refund_reason,
        )
    except PaymentGatewayError:
        logger.exception(
            "Gateway refund failed",
            extra={"order_no": order.order_no, "refund_no": order.refund_no},
        )
        return None


# ============================================================
# READ SIDE
# ============================================================

STAT_STATUSES = (
    Order.STATUS_PENDING_PAYMENT,
    Order.STATUS_PENDING_DELIVERY,
    Order.STATUS_DELIVERED,
    Order.STATUS_COMPLETED,
)


def order_stats(*, user) -> dict:
    rows = (
        Order.objects.filter(user=user, status__in=STAT_STATUSES)
        .values("status")
        .annotate(n=Count("id"))
        .order_by()
    )
    counts = {row["status"]: row["n"] for row in rows}
    return {status: int(counts.get(status, 0)) for status in STAT_STATUSES}
