# orders/services/exceptions.py

"""
ORDER SERVICE EXCEPTIONS

Each error carries a stable machine code (code) and the detail fields the
API returns alongside the message.
"""

from __future__ import annotations


class OrderServiceError(Exception):
    """Base exception for the order engine."""

    code = "ORDER_ERROR"

    def __init__(self, message: str = "", **details):
        super().__init__(message)
        self.message = message
        self.details = details


class InvalidRequestError(OrderServiceError):
    code = "INVALID_REQUEST"


class PriceMismatchError(InvalidRequestError):
    code = "PRICE_MISMATCH"

    def __init__(self, *, product_id, name, submitted, current):
        super().__init__(
            f"Price for {name} has changed. Current price: {current}",
            productId=product_id,
            submittedPrice=str(submitted),
            currentPrice=str(current),
        )
        self.product_id = product_id


class TotalMismatchError(InvalidRequestError):
    code = "TOTAL_MISMATCH"

    def __init__(self, *, submitted, computed):
        super().__init__(
            f"Order total does not match. Expected: {computed}, Received: {submitted}",
            submittedTotal=str(submitted),
            computedTotal=str(computed),
        )


class ProductNotFoundError(OrderServiceError):
    code = "PRODUCT_NOT_FOUND"

    def __init__(self, *, product_id, name=""):
        super().__init__(f"Product {name or product_id} not found", productId=product_id)
        self.product_id = product_id


class InsufficientStockError(OrderServiceError):
    code = "INSUFFICIENT_STOCK"

    def __init__(self, *, product_id, name, available: int, requested: int):
        super().__init__(
            f"Insufficient stock for {name}. Available: {available}, Requested: {requested}",
            productId=product_id,
            available=available,
            requested=requested,
        )
        self.product_id = product_id
        self.available = available
        self.requested = requested


class IdempotencyConflictError(OrderServiceError):
    code = "IDEMPOTENCY_CONFLICT"

    def __init__(self, *, key):
        super().__init__("Idempotency key was already used with a different request", idempotencyKey=key)


class PersistenceError(OrderServiceError):
    code = "PERSISTENCE_ERROR"

    def __init__(self, message: str = "Failed to create order"):
        super().__init__(message)
