# storefront/cart.py

"""
CART ASSEMBLER

Purpose:
- Own the shopper's working selection as an explicit Cart object with a
  mutation API; every mutation is written through to a durable store.
- Produce the order submission items for the order engine.

Rules:
- quantity never exceeds the last-known stock snapshot
- adding to an existing entry past the snapshot aborts the add
  ("Only N available") and leaves the cart unchanged
- set_quantity(n <= 0) removes the entry; otherwise clamps to [1, stock]
  (an entry whose snapshot is 0 rejects any positive quantity)
- a stored entry with quantity above its stock snapshot is corrupt
- a corrupt or non-list stored payload loads as an empty cart and the
  store is reset
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation

from django.conf import settings

from orders.services.pricing import money as _money

logger = logging.getLogger(__name__)


def _to_int_qty(value) -> int:
    if value is None or value == "":
        raise CartError("quantity is required")

    if isinstance(value, bool):
        raise CartError("quantity must be a whole integer unit")

    if isinstance(value, int):
        return value

    if isinstance(value, str):
        s = value.strip()
        if s.lstrip("-").isdigit():
            return int(s)

    raise CartError("quantity must be a whole integer unit")


# =====================================================
# ERRORS
# =====================================================

class CartError(Exception):
    """Base cart exception"""


class CartStockLimitError(CartError):
    def __init__(self, *, available: int):
        super().__init__(f"Only {available} available")
        self.available = available


# =====================================================
# ENTRY
# =====================================================

@dataclass
class CartEntry:
    product_id: int
    name: str
    unit_price: Decimal
    quantity: int
    stock: int

    @property
    def line_total(self) -> Decimal:
        return _money(self.unit_price * self.quantity)

    def to_dict(self) -> dict:
        return {
            "id": self.product_id,
            "name": self.name,
            "price": str(_money(self.unit_price)),
            "quantity": self.quantity,
            "stock": self.stock,
        }

    @classmethod
    def from_dict(cls, raw) -> "CartEntry":
        if not isinstance(raw, dict):
            raise ValueError("cart entry must be an object")
        try:
            entry = cls(
                product_id=int(raw["id"]),
                name=str(raw.get("name") or ""),
                unit_price=_money(raw["price"]),
                quantity=int(raw["quantity"]),
                stock=int(raw["stock"]),
            )
        except (KeyError, TypeError, InvalidOperation) as exc:
            raise ValueError("malformed cart entry") from exc
        if entry.quantity <= 0 or entry.stock < 0 or entry.quantity > entry.stock:
            raise ValueError("cart entry out of range")
        return entry


# =====================================================
# STORAGE
# =====================================================

class SessionCartStorage:
    """
    Durable store backed by the shopper's Django session.
    """

    def __init__(self, session, key: str | None = None):
        self.session = session
        self.key = key or getattr(settings, "STOREFRONT_CART_SESSION_KEY", "cart")

    def load(self):
        return self.session.get(self.key)

    def save(self, entries: list[dict]) -> None:
        self.session[self.key] = entries
        self.session.modified = True

    def reset(self) -> None:
        self.save([])


# =====================================================
# CART
# =====================================================

class Cart:
    def __init__(self, storage: SessionCartStorage):
        self.storage = storage
        self._entries: dict[int, CartEntry] = {}
        self._load()

    # -----------------------------
    # persistence
    # -----------------------------
    def _load(self) -> None:
        raw = self.storage.load()
        if raw is None:
            return

        if not isinstance(raw, list):
            logger.warning("Corrupt cart payload reset", extra={"payload_type": type(raw).__name__})
            self.storage.reset()
            return

        entries: dict[int, CartEntry] = {}
        try:
            for item in raw:
                entry = CartEntry.from_dict(item)
                entries[entry.product_id] = entry
        except ValueError:
            logger.warning("Corrupt cart entry, cart reset", extra={"entries": len(raw)})
            self.storage.reset()
            return

        self._entries = entries

    def _persist(self) -> None:
        self.storage.save([entry.to_dict() for entry in self._entries.values()])

    # -----------------------------
    # reads
    # -----------------------------
    def entries(self) -> list[CartEntry]:
        return list(self._entries.values())

    def get(self, product_id) -> CartEntry | None:
        return self._entries.get(int(product_id))

    def is_empty(self) -> bool:
        return not self._entries

    def totals(self) -> Decimal:
        return sum((entry.line_total for entry in self._entries.values()), Decimal("0.00"))

    def item_count(self) -> int:
        return sum(entry.quantity for entry in self._entries.values())

    def to_order_items(self) -> list[dict]:
        return [entry.to_dict() for entry in self._entries.values()]

    # -----------------------------
    # mutations
    # -----------------------------
    def add(self, product, quantity=1, *, name: str | None = None) -> CartEntry:
        requested = _to_int_qty(quantity)
        if requested <= 0:
            raise CartError("quantity must be at least 1")

        if not getattr(product, "is_active", True):
            raise CartError("Product is not available")

        stock = max(int(product.stock or 0), 0)
        display_name = name or product.name_en
        existing = self._entries.get(product.pk)

        if existing is not None:
            new_quantity = existing.quantity + requested
            if new_quantity > stock:
                raise CartStockLimitError(available=stock)
            existing.quantity = new_quantity
            existing.stock = stock
            existing.unit_price = _money(product.price)
            existing.name = display_name
            self._persist()
            return existing

        if stock <= 0:
            raise CartStockLimitError(available=0)

        entry = CartEntry(
            product_id=product.pk,
            name=display_name,
            unit_price=_money(product.price),
            quantity=min(requested, stock),
            stock=stock,
        )
        self._entries[product.pk] = entry
        self._persist()
        return entry

    def set_quantity(self, product_id, quantity) -> CartEntry | None:
        entry = self.get(product_id)
        if entry is None:
            raise CartError("Item is not in the cart")

        n = _to_int_qty(quantity)
        if n <= 0:
            self.remove(product_id)
            return None

        if entry.stock <= 0:
            raise CartStockLimitError(available=0)

        entry.quantity = max(1, min(n, entry.stock))
        self._persist()
        return entry

    def remove(self, product_id) -> None:
        self._entries.pop(int(product_id), None)
        self._persist()

    def clear(self) -> None:
        self._entries = {}
        self._persist()
