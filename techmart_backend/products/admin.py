# products/admin.py
"""
=====================================================
PATH: products/admin.py
=====================================================

Admin rules:
- stock edits on the Product form go through set_product_stock() (row lock).
- deleting a Product goes through delete_product(): products referenced by
  order lines are deactivated instead of removed.
"""

from __future__ import annotations

from django.contrib import admin, messages

from products.models import Category, Product
from products.services.inventory import delete_product, set_product_stock


# =====================================================
# CATEGORY
# =====================================================

@admin.register(Category)
class CategoryAdmin(admin.ModelAdmin):
    list_display = ("name_en", "name_id", "slug", "created_at")
    search_fields = ("name_en", "name_id", "slug")
    readonly_fields = ("name", "slug", "created_at", "updated_at")
    ordering = ("name_en",)


# =====================================================
# PRODUCT
# =====================================================

@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = (
        "name_en",
        "name_id",
        "category",
        "price",
        "stock",
        "is_active",
        "is_featured",
        "created_at",
    )
    list_filter = ("is_active", "is_featured", "category", "created_at")
    search_fields = ("name_en", "name_id")
    ordering = ("-created_at",)
    readonly_fields = ("name", "created_at", "updated_at")

    def save_model(self, request, obj, form, change):
        if not change:
            super().save_model(request, obj, form, change)
            return

        if "stock" in form.changed_data:
            new_stock = obj.stock
            obj.stock = Product.objects.only("stock").get(pk=obj.pk).stock
            super().save_model(request, obj, form, change)
            set_product_stock(product=obj, stock=new_stock, user=request.user)
            return

        super().save_model(request, obj, form, change)

    def delete_model(self, request, obj):
        result = delete_product(product_id=obj.pk, user=request.user)
        if result.deactivated:
            messages.warning(request, result.message)

    def delete_queryset(self, request, queryset):
        for pk in list(queryset.values_list("pk", flat=True)):
            delete_product(product_id=pk, user=request.user)
