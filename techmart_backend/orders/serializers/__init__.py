# orders/serializers/__init__.py

from .order import OrderItemSerializer, OrderListSerializer, OrderSerializer, OrderStatusUpdateSerializer
from .submission import OrderSubmissionResponseSerializer, OrderSubmissionSerializer

__all__ = [
    "OrderItemSerializer",
    "OrderListSerializer",
    "OrderSerializer",
    "OrderStatusUpdateSerializer",
    "OrderSubmissionResponseSerializer",
    "OrderSubmissionSerializer",
]
