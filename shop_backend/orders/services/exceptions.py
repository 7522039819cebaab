# orders/services/exceptions.py

"""
ORDER SERVICE ERRORS

Everything the order orchestrator can surface to a caller.
Checkout precondition failures owned by collaborators (inventory, address
book) are re-exported here so views catch one module.
"""

from products.services.exceptions import (  # noqa: F401
    InsufficientStock,
    ProductNotFound,
    ProductNotOnSale,
)
from users.services.exceptions import AddressNotFound  # noqa: F401


class OrderServiceError(Exception):
    """Base exception for order orchestration failures."""


class InvalidTransition(OrderServiceError):
    """
    Operation not legal for the order's current status.
    Raised before any mutation.
    """

    def __init__(self, *, order, operation: str, reason: str = ""):
        self.order_id = getattr(order, "pk", None)
        self.order_no = getattr(order, "order_no", "")
        self.status = getattr(order, "status", "")
        self.operation = operation
        message = f"Order {self.order_no or self.order_id} cannot {operation} from '{self.status}'"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class EmptyCheckout(OrderServiceError):
    """No lines were supplied (or none are selected in the cart)."""


class OrderNotFound(OrderServiceError):
    def __init__(self, reference):
        self.reference = reference
        super().__init__(f"Order {reference} does not exist")


class InvalidOrderPatch(OrderServiceError):
    """Admin patch failed up-front validation."""
