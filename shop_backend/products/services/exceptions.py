# products/services/exceptions.py

"""
INVENTORY SERVICE ERRORS
"""


class InventoryError(Exception):
    """Base exception for inventory ledger failures."""


class ProductNotFound(InventoryError):
    def __init__(self, product_id):
        self.product_id = product_id
        super().__init__(f"Product {product_id} does not exist")


class ProductNotOnSale(InventoryError):
    def __init__(self, product_id, name: str = ""):
        self.product_id = product_id
        self.name = name
        super().__init__(f"Product '{name or product_id}' is not on sale")


class InsufficientStock(InventoryError):
    """
    Requested quantity exceeds available stock.
    Carries `available` so callers can tell the buyer how many are left.
    """

    def __init__(self, product_id, *, name: str = "", requested: int, available: int):
        self.product_id = product_id
        self.name = name
        self.requested = requested
        self.available = available
        super().__init__(
            f"Insufficient stock for {name or product_id}. "
            f"Requested: {requested}, Available: {available}"
        )


class InventoryIntegrityError(InventoryError):
    """
    A reversal would drive counters negative.
    This signals corrupted history, not a recoverable runtime condition.
    """
