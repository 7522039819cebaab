from .order import OrderViewSet, error_response

__all__ = ["OrderViewSet", "error_response"]
