# payments/services/exceptions.py


class PaymentGatewayError(Exception):
    """Gateway rejected the request or could not be reached."""


class GatewayNotConfigured(PaymentGatewayError):
    pass
