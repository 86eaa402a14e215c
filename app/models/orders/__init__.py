from .order import Order, OrderItem

__all__ = [
    "Order",
    "OrderItem",
]
