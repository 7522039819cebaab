from .inventory import credit, debit

__all__ = [
    "debit",
    "credit",
]
