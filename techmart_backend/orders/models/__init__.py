"""
PATH: orders/models/__init__.py

Orders models export surface.
"""

from .idempotency import OrderIdempotencyKey
from .order import Order, OrderStatus, PaymentStatus
from .order_item import OrderItem

__all__ = [
    "Order",
    "OrderIdempotencyKey",
    "OrderItem",
    "OrderStatus",
    "PaymentStatus",
]
