"""
ORDER LIFECYCLE DOMAIN RULES

Normal flow:
    pending -> processing -> shipped -> completed
    any non-terminal state -> cancelled

Admins may move an order between ANY two statuses (manual override).
Moves outside the normal flow are allowed but logged as overrides.

Side effects:
- completed forces payment_status = paid
- no other status touches payment or stock
"""

from __future__ import annotations

import logging

from django.db import transaction

from orders.models import Order, OrderStatus, PaymentStatus

logger = logging.getLogger(__name__)

# ============================================================
# DOMAIN ERRORS
# ============================================================


class OrderLifecycleError(Exception):
    pass


class InvalidOrderStatusError(OrderLifecycleError):
    pass


# ============================================================
# STATE DEFINITIONS
# ============================================================

TERMINAL_STATES = {
    OrderStatus.COMPLETED,
    OrderStatus.CANCELLED,
}

NORMAL_TRANSITIONS = {
    OrderStatus.PENDING: {OrderStatus.PROCESSING, OrderStatus.CANCELLED},
    OrderStatus.PROCESSING: {OrderStatus.SHIPPED, OrderStatus.CANCELLED},
    OrderStatus.SHIPPED: {OrderStatus.COMPLETED, OrderStatus.CANCELLED},
}


# ============================================================
# DOMAIN RULES
# ============================================================


def is_normal_transition(*, from_status: str, to_status: str) -> bool:
    if from_status in TERMINAL_STATES:
        return False

    return to_status in NORMAL_TRANSITIONS.get(from_status, set())


def validate_status(target_status) -> str:
    value = str(target_status or "").strip().lower()
    if value not in OrderStatus.values:
        raise InvalidOrderStatusError(f"Invalid status '{target_status}'")
    return value


@transaction.atomic
def change_order_status(*, order_id, target_status, actor=None) -> Order:
    """
    Set an order's status. Authorization (admin) is enforced at the view.

    Raises:
    - InvalidOrderStatusError for values outside OrderStatus
    - Order.DoesNotExist for unknown ids
    """
    status = validate_status(target_status)

    order = Order.objects.select_for_update().get(pk=order_id)
    previous = order.status

    if previous == status and not (
        status == OrderStatus.COMPLETED and order.payment_status != PaymentStatus.PAID
    ):
        return order

    if not is_normal_transition(from_status=previous, to_status=status):
        logger.warning(
            "Order status manual override",
            extra={
                "order_id": order.pk,
                "from_status": previous,
                "to_status": status,
                "actor_id": str(getattr(actor, "pk", "") or ""),
            },
        )

    order.status = status
    update_fields = ["status", "updated_at"]

    if status == OrderStatus.COMPLETED:
        order.payment_status = PaymentStatus.PAID
        update_fields.append("payment_status")

    order.save(update_fields=update_fields)

    logger.info(
        "Order status changed",
        extra={
            "order_id": order.pk,
            "from_status": previous,
            "to_status": status,
            "payment_status": order.payment_status,
        },
    )
    return order
