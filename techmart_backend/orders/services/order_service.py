# orders/services/order_service.py

"""
ORDER TRANSACTION ENGINE (APPLICATION SERVICE)

Purpose:
- Turn a submitted cart into exactly one consistent Order, or reject the
  whole submission. There are no partial orders.

Flow:
1) validate_order_request(): pure reads, no writes
   - required fields, positive integer quantities
   - duplicate product ids merged
   - products exist and are active
   - stock pre-check (fast feedback only)
   - submitted unit prices match live prices
   - server-side totals; claimed total must match within tolerance
2) commit_order(): one transaction
   - insert Order
   - per line, in ascending product-id order: guarded stock decrement
     (UPDATE ... WHERE stock >= qty) then OrderItem with the price snapshot
   - a guard that affects zero rows raises InsufficientStockError and the
     whole transaction rolls back
3) create_order(): idempotency replay, database error mapping, logging

Hard rules:
- Quantities are integer units.
- Money values are computed server-side (orders.services.pricing).
- Product.stock is only decremented through products.services.inventory.
- No automatic retry. The caller resubmits.
"""

from __future__ import annotations

import hashlib
import json
import logging
from dataclasses import dataclass, field
from decimal import Decimal

from django.conf import settings
from django.db import DatabaseError, IntegrityError, connection, transaction

from orders.models import Order, OrderIdempotencyKey, OrderItem, OrderStatus, PaymentStatus
from orders.services import pricing
from orders.services.exceptions import (
    IdempotencyConflictError,
    InsufficientStockError,
    InvalidRequestError,
    PersistenceError,
    PriceMismatchError,
    ProductNotFoundError,
    TotalMismatchError,
)
from products.models import Product
from products.services.inventory import reserve_stock

logger = logging.getLogger(__name__)

MISSING_FIELDS_MESSAGE = "Missing required fields"


def _clean(value) -> str:
    return str(value or "").strip()


# =====================================================
# REQUEST TYPES
# =====================================================

@dataclass(frozen=True)
class OrderLineRequest:
    product_id: int
    name: str
    unit_price: Decimal
    quantity: int
    stock: int | None = None


@dataclass(frozen=True)
class CustomerInfo:
    email: str
    first_name: str
    last_name: str
    address: str
    city: str
    postal_code: str
    phone: str = ""

    def missing_fields(self) -> list[str]:
        required = {
            "email": self.email,
            "firstName": self.first_name,
            "lastName": self.last_name,
            "address": self.address,
            "city": self.city,
            "postalCode": self.postal_code,
        }
        return [name for name, value in required.items() if not _clean(value)]

    def shipping_address(self) -> str:
        block = (
            f"{_clean(self.first_name)} {_clean(self.last_name)}\n"
            f"{_clean(self.address)}\n"
            f"{_clean(self.city)}, {_clean(self.postal_code)}"
        )
        phone = _clean(self.phone)
        if phone:
            block += f"\nPhone: {phone}"
        return block


@dataclass(frozen=True)
class OrderRequest:
    items: tuple[OrderLineRequest, ...]
    customer: CustomerInfo | None
    total_amount: Decimal | None
    notes: str = ""
    idempotency_key: str = ""

    def fingerprint(self, *, user=None) -> str:
        """
        SHA-256 over the canonical request (key excluded, user included).
        """
        customer = self.customer
        canonical = {
            "user": str(getattr(user, "pk", "") or ""),
            "items": [
                [line.product_id, str(pricing.money(line.unit_price)), line.quantity]
                for line in self.items
            ],
            "customer": [
                _clean(customer.email).lower(),
                _clean(customer.first_name),
                _clean(customer.last_name),
                _clean(customer.address),
                _clean(customer.city),
                _clean(customer.postal_code),
                _clean(customer.phone),
            ]
            if customer
            else None,
            "total": str(pricing.money(self.total_amount)) if self.total_amount is not None else None,
            "notes": _clean(self.notes),
        }
        raw = json.dumps(canonical, sort_keys=True, separators=(",", ":"))
        return hashlib.sha256(raw.encode("utf-8")).hexdigest()


# =====================================================
# VALIDATED / RESULT TYPES
# =====================================================

@dataclass(frozen=True)
class ValidatedLine:
    product_id: int
    name: str
    unit_price: Decimal
    quantity: int

    @property
    def line_total(self) -> Decimal:
        return pricing.line_total(self.unit_price, self.quantity)


@dataclass(frozen=True)
class ValidatedOrder:
    request: OrderRequest
    lines: tuple[ValidatedLine, ...]
    quote: pricing.PriceQuote
    shipping_address: str
    email: str
    notes: str = ""


@dataclass(frozen=True)
class OrderCreationResult:
    order: Order
    replayed: bool = False
    lines: tuple = field(default_factory=tuple)


# =====================================================
# VALIDATION (NO WRITES)
# =====================================================

def _merge_lines(items) -> list[OrderLineRequest]:
    """
    One line per product id; quantities of duplicates are summed.
    Submission order of first occurrence is kept.
    """
    merged: dict[int, OrderLineRequest] = {}
    for line in items:
        prev = merged.get(line.product_id)
        if prev is None:
            merged[line.product_id] = line
            continue
        merged[line.product_id] = OrderLineRequest(
            product_id=prev.product_id,
            name=prev.name,
            unit_price=prev.unit_price,
            quantity=prev.quantity + line.quantity,
            stock=prev.stock,
        )
    return list(merged.values())


def _check_shape(request: OrderRequest) -> None:
    if not request.items or request.customer is None or request.total_amount is None:
        raise InvalidRequestError(MISSING_FIELDS_MESSAGE)

    missing = request.customer.missing_fields()
    if missing:
        raise InvalidRequestError(MISSING_FIELDS_MESSAGE, fields=missing)

    for line in request.items:
        label = line.name or line.product_id
        # bool is an int subclass; floats and Decimals are not whole units
        if not isinstance(line.quantity, int) or isinstance(line.quantity, bool) or line.quantity <= 0:
            raise InvalidRequestError(
                f"Invalid quantity for {label}. Quantity must be at least 1.",
                productId=line.product_id,
            )
        if line.unit_price is None or line.unit_price < 0:
            raise InvalidRequestError(f"Invalid price for {label}", productId=line.product_id)

    if request.total_amount < 0:
        raise InvalidRequestError("Total amount must be non-negative")


def validate_order_request(request: OrderRequest) -> ValidatedOrder:
    _check_shape(request)

    lines = _merge_lines(request.items)
    products = Product.objects.in_bulk([line.product_id for line in lines])

    validated: list[ValidatedLine] = []
    for line in lines:
        product = products.get(line.product_id)
        if product is None or not product.is_active:
            raise ProductNotFoundError(product_id=line.product_id, name=line.name)

        name = line.name or product.name_en

        if product.stock < line.quantity:
            raise InsufficientStockError(
                product_id=product.pk,
                name=name,
                available=product.stock,
                requested=line.quantity,
            )

        submitted = pricing.money(line.unit_price)
        current = pricing.money(product.price)
        if submitted != current:
            raise PriceMismatchError(
                product_id=product.pk,
                name=name,
                submitted=submitted,
                current=current,
            )

        validated.append(
            ValidatedLine(
                product_id=product.pk,
                name=name,
                unit_price=submitted,
                quantity=line.quantity,
            )
        )

    subtotal = sum((line.line_total for line in validated), Decimal("0.00"))
    quote = pricing.quote(subtotal)

    if not quote.matches(request.total_amount):
        raise TotalMismatchError(submitted=pricing.money(request.total_amount), computed=quote.total)

    return ValidatedOrder(
        request=request,
        lines=tuple(sorted(validated, key=lambda line: line.product_id)),
        quote=quote,
        shipping_address=request.customer.shipping_address(),
        email=_clean(request.customer.email),
        notes=_clean(request.notes),
    )


# =====================================================
# COMMIT (ONE TRANSACTION)
# =====================================================

def _apply_statement_timeout() -> None:
    timeout_ms = int(getattr(settings, "ORDER_TRANSACTION_TIMEOUT_MS", 0) or 0)
    if timeout_ms <= 0 or connection.vendor != "postgresql":
        return
    with connection.cursor() as cursor:
        # SET does not accept bind parameters; timeout_ms is an int.
        cursor.execute(f"SET LOCAL statement_timeout = {timeout_ms}")


def _current_stock(product_id) -> int:
    row = Product.objects.filter(pk=product_id).values_list("stock", flat=True).first()
    return int(row or 0)


def commit_order(
    validated: ValidatedOrder,
    *,
    user=None,
    idempotency_key: str = "",
    fingerprint: str = "",
) -> Order:
    with transaction.atomic():
        _apply_statement_timeout()

        order = Order.objects.create(
            user=user if getattr(user, "is_authenticated", False) else None,
            email=validated.email,
            subtotal_amount=validated.quote.subtotal,
            tax_amount=validated.quote.tax,
            shipping_amount=validated.quote.shipping,
            total_amount=validated.quote.total,
            status=OrderStatus.PENDING,
            payment_status=PaymentStatus.PENDING,
            shipping_address=validated.shipping_address,
            notes=validated.notes,
        )

        items = []
        for line in validated.lines:
            if not reserve_stock(product_id=line.product_id, quantity=line.quantity):
                raise InsufficientStockError(
                    product_id=line.product_id,
                    name=line.name,
                    available=_current_stock(line.product_id),
                    requested=line.quantity,
                )
            items.append(
                OrderItem(
                    order=order,
                    product_id=line.product_id,
                    quantity=line.quantity,
                    unit_price=line.unit_price,
                )
            )

        OrderItem.objects.bulk_create(items)

        if idempotency_key:
            OrderIdempotencyKey.objects.create(
                key=idempotency_key,
                request_hash=fingerprint,
                order=order,
            )

    return order


# =====================================================
# IDEMPOTENCY
# =====================================================

def _find_replay(*, key: str, fingerprint: str) -> OrderCreationResult | None:
    record = OrderIdempotencyKey.objects.select_related("order").filter(key=key).first()
    if record is None:
        return None

    if record.is_expired():
        # expired keys may be reused
        record.delete()
        return None

    if record.request_hash != fingerprint:
        raise IdempotencyConflictError(key=key)

    logger.info(
        "Order submission replayed",
        extra={"order_id": record.order_id, "idempotency_key": key},
    )
    return OrderCreationResult(order=record.order, replayed=True)


# =====================================================
# ENTRYPOINT
# =====================================================

def create_order(request: OrderRequest, *, user=None) -> OrderCreationResult:
    """
    Validate and commit one order.

    Raises:
    - InvalidRequestError (incl. PriceMismatchError / TotalMismatchError)
    - ProductNotFoundError
    - InsufficientStockError (pre-check or guarded decrement)
    - IdempotencyConflictError
    - PersistenceError (any database failure; already rolled back)
    """
    key = _clean(request.idempotency_key)
    fingerprint = request.fingerprint(user=user) if key else ""

    try:
        if key:
            replay = _find_replay(key=key, fingerprint=fingerprint)
            if replay is not None:
                return replay

        validated = validate_order_request(request)
    except DatabaseError as exc:
        logger.exception("Order validation failed (database)", extra={"idempotency_key": key})
        raise PersistenceError() from exc

    try:
        order = commit_order(validated, user=user, idempotency_key=key, fingerprint=fingerprint)
    except IntegrityError as exc:
        if key:
            # a concurrent submission with the same key won the insert
            try:
                replay = _find_replay(key=key, fingerprint=fingerprint)
            except DatabaseError:
                logger.exception("Idempotency replay lookup failed", extra={"idempotency_key": key})
                raise PersistenceError() from exc
            if replay is not None:
                return replay
        logger.exception("Order commit failed (integrity)", extra={"email": validated.email})
        raise PersistenceError() from exc
    except DatabaseError as exc:
        logger.exception("Order commit failed", extra={"email": validated.email})
        raise PersistenceError() from exc
    except InsufficientStockError as exc:
        logger.warning(
            "Order rejected at stock guard",
            extra={
                "product_id": exc.product_id,
                "available": exc.available,
                "requested": exc.requested,
            },
        )
        raise

    logger.info(
        "Order created",
        extra={
            "order_id": order.pk,
            "user_id": str(getattr(order, "user_id", "") or ""),
            "lines": len(validated.lines),
            "total_amount": str(order.total_amount),
        },
    )
    return OrderCreationResult(order=order, replayed=False, lines=validated.lines)
