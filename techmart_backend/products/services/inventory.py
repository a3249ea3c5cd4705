# products/services/inventory.py

"""
======================================================
PATH: products/services/inventory.py
======================================================
INVENTORY CORE SERVICES

Purpose:
- The only module that writes Product.stock.
- Guarded decrement used by checkout (reserve_stock).
- Admin absolute stock edits under a row lock (set_product_stock).
- Product deletion guard: referenced products are deactivated, never deleted.

Rules:
- Quantities are integer units.
- stock >= 0 always: decrements are conditional (WHERE stock >= qty) and
  the table carries a CHECK constraint.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from django.db import transaction
from django.db.models import F
from django.utils import timezone

from products.models import Product

logger = logging.getLogger(__name__)


class InventoryError(Exception):
    """Domain error for stock mutation failures."""


@dataclass(frozen=True)
class DeletionResult:
    product_id: int
    deleted: bool
    deactivated: bool

    @property
    def message(self) -> str:
        if self.deactivated:
            return "Product deactivated successfully (has existing orders)"
        return "Product deleted successfully"


def _to_int_qty(value, *, field_name="quantity") -> int:
    if value is None or value == "":
        raise InventoryError(f"{field_name} is required")
    if isinstance(value, bool):
        # bool is an int subclass
        raise InventoryError(f"{field_name} must be an integer")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise InventoryError(f"{field_name} must be an integer")


# =====================================================
# CHECKOUT DECREMENT
# =====================================================

def reserve_stock(*, product_id, quantity) -> bool:
    """
    Atomically decrement stock by `quantity` iff enough remains.

    Returns True when exactly one row was updated, False when the guard
    rejected the decrement (stock < quantity at the moment of the write,
    or the product row is gone).

    Must run inside the caller's transaction; the UPDATE holds the row lock
    until that transaction ends.
    """
    qty = _to_int_qty(quantity)
    if qty <= 0:
        raise InventoryError("quantity must be greater than zero")

    updated = Product.objects.filter(pk=product_id, stock__gte=qty).update(
        stock=F("stock") - qty,
        updated_at=timezone.now(),
    )
    return updated == 1


# =====================================================
# ADMIN ABSOLUTE STOCK EDIT
# =====================================================

@transaction.atomic
def set_product_stock(*, product: Product, stock, user=None) -> Product:
    new_stock = _to_int_qty(stock, field_name="stock")
    if new_stock < 0:
        raise InventoryError("stock cannot be negative")

    locked = Product.objects.select_for_update().get(pk=product.pk)
    previous = locked.stock

    if previous == new_stock:
        return locked

    locked.stock = new_stock
    locked.save(update_fields=["stock", "updated_at"])

    logger.info(
        "Product stock set",
        extra={
            "product_id": locked.pk,
            "from_stock": previous,
            "to_stock": new_stock,
            "user_id": str(getattr(user, "pk", "") or ""),
        },
    )
    return locked


# =====================================================
# DELETION GUARD
# =====================================================

@transaction.atomic
def delete_product(*, product_id, user=None) -> DeletionResult:
    """
    Delete a product, or deactivate it when any order line references it.

    Raises Product.DoesNotExist for unknown ids.
    """
    product = Product.objects.select_for_update().get(pk=product_id)

    if product.order_items.exists():
        product.is_active = False
        product.save(update_fields=["is_active", "updated_at"])
        logger.info(
            "Product deactivated (referenced by orders)",
            extra={"product_id": product.pk, "user_id": str(getattr(user, "pk", "") or "")},
        )
        return DeletionResult(product_id=product.pk, deleted=False, deactivated=True)

    pk = product.pk
    product.delete()
    logger.info(
        "Product deleted",
        extra={"product_id": pk, "user_id": str(getattr(user, "pk", "") or "")},
    )
    return DeletionResult(product_id=pk, deleted=True, deactivated=False)
