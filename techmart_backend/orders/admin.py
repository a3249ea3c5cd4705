# orders/admin.py
"""
Orders admin.

- Orders are created only through the order engine: no "add" in admin.
- Order items are read-only historical lines.
- Status changes go through change_order_status() (completed => paid).
"""

from __future__ import annotations

from django.contrib import admin

from orders.models import Order, OrderIdempotencyKey, OrderItem
from orders.services.order_lifecycle import change_order_status


class OrderItemInline(admin.TabularInline):
    model = OrderItem
    extra = 0
    can_delete = False
    fields = ("product", "quantity", "unit_price", "created_at")
    readonly_fields = fields

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    list_display = ("id", "email", "user", "total_amount", "status", "payment_status", "created_at")
    list_filter = ("status", "payment_status", "created_at")
    search_fields = ("email", "id")
    ordering = ("-created_at",)
    inlines = [OrderItemInline]

    readonly_fields = (
        "user",
        "email",
        "subtotal_amount",
        "tax_amount",
        "shipping_amount",
        "total_amount",
        "payment_status",
        "shipping_address",
        "notes",
        "created_at",
        "updated_at",
    )

    def has_add_permission(self, request):
        return False

    def save_model(self, request, obj, form, change):
        if change and "status" in form.changed_data:
            change_order_status(order_id=obj.pk, target_status=obj.status, actor=request.user)
            return
        super().save_model(request, obj, form, change)


@admin.register(OrderIdempotencyKey)
class OrderIdempotencyKeyAdmin(admin.ModelAdmin):
    list_display = ("key", "order", "created_at")
    search_fields = ("key",)
    readonly_fields = ("key", "request_hash", "order", "created_at")

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False
