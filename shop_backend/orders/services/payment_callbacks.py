# orders/services/payment_callbacks.py

"""
GATEWAY NOTIFICATION HANDLERS

Asynchronous payment / refund outcomes re-enter the order lifecycle here.

Idempotency:
- A payment notification for an order that is already paid, or was paid
  and has since been refunded, is a no-op.
- A refund notification whose refund transaction is already recorded is a
  no-op.
Networks redeliver notifications, so neither case is an error.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from django.db import transaction

from orders.models import Order, PaymentAttempt
from orders.services.exceptions import OrderNotFound
from orders.services.order_orchestrator import DEFAULT_PAYMENT_METHOD, mark_paid
from payments.services import to_minor_units

logger = logging.getLogger(__name__)

OUTCOME_SUCCESS = "SUCCESS"
OUTCOME_FAILURE = "FAILURE"


@dataclass(frozen=True)
class GatewayNotification:
    """
    reference: order number (payment) or refund order ref (refund)
    """

    reference: str
    outcome: str
    transaction_ref: str = ""
    amount_minor_units: int | None = None
    payload: dict = field(default_factory=dict)

    @property
    def succeeded(self) -> bool:
        return (self.outcome or "").upper() == OUTCOME_SUCCESS


def _mark_attempt_failed(attempt: PaymentAttempt | None, payload, *, reason: str):
    if attempt is None or attempt.status == PaymentAttempt.STATUS_VERIFIED:
        return
    logger.warning(
        "Marking payment attempt as failed",
        extra={"reference": attempt.reference, "reason": reason},
    )
    attempt.status = PaymentAttempt.STATUS_FAILED
    attempt.provider_payload = {"error": reason, "payload": payload}
    attempt.save(update_fields=["status", "provider_payload"])


def _already_settled(order: Order, notification: GatewayNotification) -> bool:
    """
    Paid, or paid and since refunded, or the very transaction already recorded.
    """
    if order.payment_status in (Order.PAYMENT_PAID, Order.PAYMENT_REFUNDED):
        return True
    ref = (notification.transaction_ref or "").strip()
    return bool(ref) and ref == order.transaction_id


@transaction.atomic
def handle_payment_notification(notification: GatewayNotification) -> Order:
    reference = (notification.reference or "").strip()

    order = Order.objects.select_for_update().filter(order_no=reference).first()
    if order is None:
        raise OrderNotFound(reference)

    attempt = PaymentAttempt.objects.select_for_update().filter(reference=reference).first()

    if _already_settled(order, notification):
        logger.info(
            "Duplicate payment notification ignored",
            extra={"order_no": reference, "payment_status": order.payment_status},
        )
        return order

    if not notification.succeeded:
        _mark_attempt_failed(attempt, notification.payload, reason="Gateway reported failure")
        return order

    expected = to_minor_units(order.total_amount)
    if notification.amount_minor_units is not None and int(notification.amount_minor_units) != expected:
        logger.error(
            "Payment amount mismatch",
            extra={
                "order_no": reference,
                "paid": notification.amount_minor_units,
                "expected": expected,
            },
        )
        _mark_attempt_failed(attempt, notification.payload, reason="Amount mismatch")
        return order

    order = mark_paid(
        order_id=order.pk,
        payment_method=DEFAULT_PAYMENT_METHOD,
        transaction_id=notification.transaction_ref,
    )

    if attempt is not None:
        attempt.mark_verified(notification.payload)
        attempt.save(update_fields=["status", "verified_at", "provider_payload"])

    logger.info("Payment notification processed", extra={"order_no": reference})
    return order


@transaction.atomic
def handle_refund_notification(notification: GatewayNotification) -> Order:
    reference = (notification.reference or "").strip()

    order = (
        Order.objects.select_for_update().filter(refund_no=reference).first()
        if reference
        else None
    )
    if order is None:
        raise OrderNotFound(reference)

    if order.refund_transaction_id:
        logger.info("Duplicate refund notification ignored", extra={"refund_no": reference})
        return order

    if not notification.succeeded:
        logger.warning(
            "Gateway reported refund failure",
            extra={"refund_no": reference, "order_no": order.order_no},
        )
        return order

    order.refund_transaction_id = (notification.transaction_ref or "").strip() or reference
    order.save(update_fields=["refund_transaction_id", "updated_at"])

    logger.info("Refund notification processed", extra={"refund_no": reference})
    return order
