from .notify import PaymentNotifyView, RefundNotifyView, WebhookThrottle

__all__ = ["PaymentNotifyView", "RefundNotifyView", "WebhookThrottle"]
