# payments/services/gateway.py
"""
PAYMENT GATEWAY ADAPTER

Thin JSON-over-HTTPS client for the merchant payment gateway.

- initiate_payment(): create a prepay order, returns client payment params
- initiate_refund(): request a refund of a captured transaction
- verify_signature(): HMAC-SHA256 check of asynchronous notifications

Config: settings.PAYMENTS["GATEWAY"]

Callers MUST NOT invoke these functions while holding a DB transaction open;
the order orchestrator calls them before opening, or after committing, its
own transaction.
"""

from __future__ import annotations

import hashlib
import hmac
import json
import logging
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any
from urllib.error import HTTPError, URLError
from urllib.request import Request, urlopen

from django.conf import settings

from payments.services.exceptions import GatewayNotConfigured, PaymentGatewayError

logger = logging.getLogger(__name__)

SIGNATURE_HEADER = "X-Gateway-Signature"


def _gateway_cfg() -> dict:
    payments = getattr(settings, "PAYMENTS", {}) or {}
    cfg = payments.get("GATEWAY") if isinstance(payments, dict) else None
    return cfg if isinstance(cfg, dict) else {}


def _require(cfg: dict, key: str) -> str:
    value = (cfg.get(key) or "").strip()
    if not value:
        raise GatewayNotConfigured(
            f"Payment gateway {key} is not configured. "
            f"Expected settings.PAYMENTS['GATEWAY']['{key}']."
        )
    return value


def to_minor_units(amount) -> int:
    """
    2dp currency amount -> integer minor units (fen / cents).
    """
    try:
        major = Decimal(str(amount))
    except (InvalidOperation, ValueError, TypeError) as exc:
        raise ValueError("amount must be a valid Decimal") from exc
    minor = (major * Decimal("100")).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    return int(minor)


def _safe_preview(text: str, limit: int = 800) -> str:
    text = (text or "").strip()
    if len(text) <= limit:
        return text
    return text[:limit] + " ...(truncated)"


def _parse_json(raw: str) -> dict[str, Any] | None:
    try:
        parsed = json.loads(raw or "")
    except ValueError:
        return None
    return parsed if isinstance(parsed, dict) else None


def _request_json(method: str, path: str, *, body: dict | None = None) -> dict[str, Any]:
    cfg = _gateway_cfg()
    base_url = _require(cfg, "BASE_URL").rstrip("/")
    api_key = _require(cfg, "API_KEY")
    timeout = int(cfg.get("TIMEOUT") or 20)

    data = None
    if body is not None:
        data = json.dumps(body, ensure_ascii=False, sort_keys=True).encode("utf-8")

    req = Request(
        f"{base_url}{path}",
        data=data,
        headers={
            "Authorization": f"Bearer {api_key}",
            "Content-Type": "application/json",
            "Accept": "application/json",
            SIGNATURE_HEADER: sign_payload(data or b""),
        },
        method=method,
    )

    try:
        with urlopen(req, timeout=timeout) as resp:
            raw = resp.read().decode("utf-8", errors="replace")
    except HTTPError as e:
        raw = e.read().decode("utf-8", errors="replace") if e.fp else ""
        parsed = _parse_json(raw) or {}
        msg = parsed.get("message") or parsed.get("code") or _safe_preview(raw) or "rejected"
        raise PaymentGatewayError(f"Gateway HTTPError: {e.code} {msg}") from e
    except URLError as e:
        raise PaymentGatewayError(f"Gateway URLError: {e}") from e

    parsed = _parse_json(raw)
    if parsed is None:
        raise PaymentGatewayError(f"Gateway returned non-JSON: {_safe_preview(raw)}")

    return parsed


def initiate_payment(*, order_no: str, amount_minor_units: int, payer_ref: str, description: str = "") -> dict:
    """
    Returns the parameters the client needs to launch the payment sheet.
    """
    cfg = _gateway_cfg()

    payload = {
        "appid": _require(cfg, "APP_ID"),
        "mchid": _require(cfg, "MERCHANT_ID"),
        "out_trade_no": str(order_no).strip(),
        "description": description or f"Order {order_no}",
        "notify_url": (cfg.get("NOTIFY_URL") or "").strip(),
        "amount": {"total": int(amount_minor_units), "currency": cfg.get("CURRENCY") or "CNY"},
        "payer": {"openid": str(payer_ref or "").strip()},
    }

    parsed = _request_json("POST", "/v3/pay/transactions/jsapi", body=payload)

    prepay_id = parsed.get("prepay_id")
    if not prepay_id:
        raise PaymentGatewayError(parsed.get("message") or "Gateway did not return prepay_id")

    logger.info("Payment initiated", extra={"order_no": order_no, "amount": amount_minor_units})

    return {
        "order_no": order_no,
        "prepay_id": prepay_id,
        "package": f"prepay_id={prepay_id}",
        "amount_minor_units": int(amount_minor_units),
        "raw": parsed,
    }


def initiate_refund(
    *,
    transaction_ref: str,
    refund_order_ref: str,
    amount_minor_units: int,
    total_minor_units: int | None = None,
    reason: str = "",
) -> dict:
    cfg = _gateway_cfg()

    payload = {
        "transaction_id": str(transaction_ref or "").strip(),
        "out_refund_no": str(refund_order_ref).strip(),
        "reason": reason or "",
        "notify_url": (cfg.get("REFUND_NOTIFY_URL") or "").strip(),
        "amount": {
            "refund": int(amount_minor_units),
            "total": int(total_minor_units if total_minor_units is not None else amount_minor_units),
            "currency": cfg.get("CURRENCY") or "CNY",
        },
    }

    parsed = _request_json("POST", "/v3/refund/domestic/refunds", body=payload)

    logger.info(
        "Refund initiated",
        extra={"refund_order_ref": refund_order_ref, "amount": amount_minor_units},
    )

    return {
        "refund_order_ref": refund_order_ref,
        "refund_id": parsed.get("refund_id") or "",
        "status": parsed.get("status") or "",
        "raw": parsed,
    }


def sign_payload(raw_body: bytes) -> str:
    key = _require(_gateway_cfg(), "API_KEY").encode("utf-8")
    return hmac.new(key, raw_body or b"", hashlib.sha256).hexdigest()


def verify_signature(*, raw_body: bytes, signature: str | None) -> bool:
    if not signature:
        return False
    computed = sign_payload(raw_body)
    return hmac.compare_digest(computed, str(signature).strip())
