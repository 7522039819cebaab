from .cart import CheckoutLine, clear_items, list_selected_items

__all__ = [
    "CheckoutLine",
    "list_selected_items",
    "clear_items",
]
