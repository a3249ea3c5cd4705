from .orders import OrderDetailView, OrderListCreateView, OrderStatusUpdateView
from .submission import submit_order

__all__ = [
    "OrderDetailView",
    "OrderListCreateView",
    "OrderStatusUpdateView",
    "submit_order",
]
