# orders/services/pricing.py

"""
ORDER PRICING

Server-side pricing rules (ORDER_PRICING setting):
- tax      = subtotal * TAX_RATE
- shipping = 0 when subtotal > FREE_SHIPPING_THRESHOLD, else SHIPPING_FEE
- total    = subtotal + tax + shipping

All amounts are Decimal, 2dp, ROUND_HALF_UP.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from django.conf import settings

TWOPLACES = Decimal("0.01")

_DEFAULTS = {
    "TAX_RATE": "0.10",
    "FREE_SHIPPING_THRESHOLD": "100.00",
    "SHIPPING_FEE": "10.00",
    "TOTAL_TOLERANCE": "0.01",
}


def money(v) -> Decimal:
    if v is None or v == "":
        return Decimal("0.00")
    return Decimal(str(v)).quantize(TWOPLACES, rounding=ROUND_HALF_UP)


def to_decimal(value, *, field_name="value") -> Decimal:
    if value is None or value == "" or isinstance(value, bool):
        raise ValueError(f"{field_name} must be a number")
    try:
        d = Decimal(str(value))
    except (InvalidOperation, ValueError, TypeError):
        raise ValueError(f"{field_name} must be a number")
    if not d.is_finite():
        raise ValueError(f"{field_name} must be a number")
    return d


def _setting(name: str) -> Decimal:
    conf = getattr(settings, "ORDER_PRICING", {}) or {}
    return Decimal(str(conf.get(name, _DEFAULTS[name])))


@dataclass(frozen=True)
class PriceQuote:
    subtotal: Decimal
    tax: Decimal
    shipping: Decimal
    total: Decimal

    def matches(self, claimed_total, *, tolerance: Decimal | None = None) -> bool:
        tol = total_tolerance() if tolerance is None else tolerance
        return abs(to_decimal(claimed_total) - self.total) <= tol


def total_tolerance() -> Decimal:
    return _setting("TOTAL_TOLERANCE")


def quote(subtotal) -> PriceQuote:
    sub = money(subtotal)
    tax = money(sub * _setting("TAX_RATE"))
    shipping = Decimal("0.00") if sub > _setting("FREE_SHIPPING_THRESHOLD") else money(_setting("SHIPPING_FEE"))
    return PriceQuote(subtotal=sub, tax=tax, shipping=shipping, total=money(sub + tax + shipping))


def line_total(unit_price, quantity: int) -> Decimal:
    return money(money(unit_price) * int(quantity))
