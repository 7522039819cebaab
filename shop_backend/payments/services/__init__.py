from .exceptions import GatewayNotConfigured, PaymentGatewayError
from .gateway import (
    initiate_payment,
    initiate_refund,
    sign_payload,
    to_minor_units,
    verify_signature,
)

__all__ = [
    "initiate_payment",
    "initiate_refund",
    "sign_payload",
    "verify_signature",
    "to_minor_units",
    "PaymentGatewayError",
    "GatewayNotConfigured",
]
