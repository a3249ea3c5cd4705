# orders/views/submission.py
"""
ORDER SUBMISSION (STOREFRONT CHECKOUT)

POST /api/orders/

Rules:
- AllowAny: guests may check out; an authenticated user is attached to the order
- Throttled (public_write) because it's a write endpoint (abuse target)
- Idempotency-Key header (or body idempotencyKey) makes retries safe

Status mapping:
- 201 created, 200 idempotent replay
- 400 invalid request / product not found / insufficient stock / price or total mismatch
- 409 idempotency key reused with a different request
- 500 persistence failure (already rolled back)
"""

from __future__ import annotations

from rest_framework import serializers, status
from rest_framework.response import Response
from rest_framework.throttling import AnonRateThrottle

from orders.serializers import OrderSubmissionSerializer
from orders.services.exceptions import (
    IdempotencyConflictError,
    InvalidRequestError,
    OrderServiceError,
    PersistenceError,
)
from orders.services.order_service import MISSING_FIELDS_MESSAGE, create_order
from techmart.responses import error_response

_MISSING_CODES = {"required", "null", "blank", "empty"}


class PublicWriteThrottle(AnonRateThrottle):
    scope = "public_write"


def _flatten_codes(codes) -> set[str]:
    if isinstance(codes, dict):
        out = set()
        for value in codes.values():
            out |= _flatten_codes(value)
        return out
    if isinstance(codes, (list, tuple)):
        out = set()
        for value in codes:
            out |= _flatten_codes(value)
        return out
    return {str(codes)}


def order_error_response(exc: OrderServiceError):
    if isinstance(exc, IdempotencyConflictError):
        http_status = status.HTTP_409_CONFLICT
    elif isinstance(exc, PersistenceError):
        http_status = status.HTTP_500_INTERNAL_SERVER_ERROR
    else:
        http_status = status.HTTP_400_BAD_REQUEST

    return error_response(
        code=exc.code,
        message=exc.message,
        http_status=http_status,
        **exc.details,
    )


def submit_order(request, data):
    """
    Validate the wire payload, run the order engine, render the result.
    Shared by POST /api/orders/ and the storefront cart checkout.
    """
    ser = OrderSubmissionSerializer(data=data)
    try:
        ser.is_valid(raise_exception=True)
    except serializers.ValidationError as exc:
        codes = _flatten_codes(exc.get_codes())
        message = MISSING_FIELDS_MESSAGE if codes & _MISSING_CODES else "Invalid request"
        return error_response(
            code=InvalidRequestError.code,
            message=message,
            http_status=status.HTTP_400_BAD_REQUEST,
            fields=exc.detail,
        )

    header_key = (request.headers.get("Idempotency-Key") or "").strip()
    order_request = ser.to_order_request(idempotency_key=header_key)

    user = request.user if getattr(request.user, "is_authenticated", False) else None

    try:
        result = create_order(order_request, user=user)
    except OrderServiceError as exc:
        return order_error_response(exc)

    body = {
        "success": True,
        "orderId": result.order.pk,
        "message": "Order created successfully",
    }
    if result.replayed:
        body["replayed"] = True
        return Response(body, status=status.HTTP_200_OK)

    return Response(body, status=status.HTTP_201_CREATED)
