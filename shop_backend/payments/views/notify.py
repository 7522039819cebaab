# payments/views/notify.py

from __future__ import annotations

import logging

from rest_framework import status
from rest_framework.parsers import JSONParser
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.throttling import AnonRateThrottle
from rest_framework.views import APIView

from orders.services import (
    GatewayNotification,
    handle_payment_notification,
    handle_refund_notification,
)
from orders.services.exceptions import InvalidTransition, OrderNotFound
from payments.services import verify_signature
from payments.services.gateway import SIGNATURE_HEADER

logger = logging.getLogger(__name__)


class WebhookThrottle(AnonRateThrottle):
    scope = "webhook"


def _ack(detail: str):
    return Response({"code": "SUCCESS", "message": detail}, status=status.HTTP_200_OK)


def _reject(detail: str):
    return Response({"code": "FAIL", "message": detail}, status=status.HTTP_400_BAD_REQUEST)


def _parse_minor_units(value):
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        raise ValueError("amount must be an integer")
    return int(value)


class _GatewayNotifyView(APIView):
    """
    Shared webhook plumbing: signature check, payload normalization, ack.

    Payload:
        {"<reference_field>": "...", "outcome": "SUCCESS" | "FAILURE",
         "transaction_ref": "...", "amount": <minor units, optional>}
    """

    authentication_classes = []
    permission_classes = [AllowAny]
    parser_classes = [JSONParser]
    throttle_classes = [WebhookThrottle]

    reference_field = ""
    kind = ""

    def handle_notification(self, notification: GatewayNotification):
        raise NotImplementedError

    def post(self, request, *args, **kwargs):
        raw_body = getattr(request, "body", b"") or b""
        signature = request.headers.get(SIGNATURE_HEADER)

        logger.info("Gateway notification received", extra={"kind": self.kind})

        if not verify_signature(raw_body=raw_body, signature=signature):
            logger.warning("Invalid gateway signature", extra={"kind": self.kind})
            return _reject("Invalid signature")

        payload = request.data if isinstance(request.data, dict) else {}

        reference = str(payload.get(self.reference_field) or "").strip()
        outcome = str(payload.get("outcome") or "").strip().upper()
        if not reference or not outcome:
            logger.warning("Notification missing reference or outcome", extra={"kind": self.kind})
            return _reject("Missing reference or outcome")

        try:
            amount = _parse_minor_units(payload.get("amount"))
        except (TypeError, ValueError):
            logger.warning("Notification has invalid amount", extra={"reference": reference})
            return _reject("Invalid amount")

        notification = GatewayNotification(
            reference=reference,
            outcome=outcome,
            transaction_ref=str(payload.get("transaction_ref") or "").strip(),
            amount_minor_units=amount,
            payload=dict(payload),
        )

        try:
            self.handle_notification(notification)
        except OrderNotFound:
            logger.warning("Unknown notification reference", extra={"reference": reference})
            return _ack("Unknown reference")
        except InvalidTransition as exc:
            # Money arrived for an order that can no longer be paid; needs manual follow-up.
            logger.error(
                "Notification for non-payable order",
                extra={"reference": reference, "detail": str(exc)},
            )
            return _ack("Order not payable")

        logger.info("Gateway notification processed", extra={"kind": self.kind, "reference": reference})
        return _ack("OK")


class PaymentNotifyView(_GatewayNotifyView):
    reference_field = "order_no"
    kind = "payment"

    def handle_notification(self, notification):
        return handle_payment_notification(notification)


class RefundNotifyView(_GatewayNotifyView):
    reference_field = "refund_order_ref"
    kind = "refund"

    def handle_notification(self, notification):
        return handle_refund_notification(notification)
