# products/models/product.py

from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import models

from .category import Category


class Product(models.Model):
    """
    Represents a sellable product.

    STOCK MODEL (IMPORTANT):
    - stock is a plain non-negative integer on the product row
    - it is never written directly by views; every change goes through
      products.services.inventory (guarded decrement or locked absolute set)
    - a CHECK constraint keeps stock >= 0 even if a caller bypasses the service

    Prices:
    - price is the current selling price
    - OrderItem.unit_price snapshots it at purchase time
    """

    category = models.ForeignKey(
        Category,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="products",
    )

    name = models.CharField(max_length=255)
    name_en = models.CharField(max_length=255, db_index=True)
    name_id = models.CharField(max_length=255, db_index=True)
    description_en = models.TextField(blank=True, default="")
    description_id = models.TextField(blank=True, default="")

    price = models.DecimalField(max_digits=10, decimal_places=2)
    compare_price = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)

    stock = models.IntegerField(default=0)

    is_active = models.BooleanField(default=True, db_index=True)
    is_featured = models.BooleanField(default=False)

    image_url = models.URLField(max_length=500, blank=True, default="")
    images = models.JSONField(default=list, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(stock__gte=0),
                name="product_stock_non_negative",
            ),
        ]

    def __str__(self):
        return self.name_en or self.name

    def clean(self):
        if self.price is None or Decimal(self.price) < 0:
            raise ValidationError("Price must be non-negative")

        if self.stock is None or int(self.stock) < 0:
            raise ValidationError("Stock cannot be negative")

        if not isinstance(self.images, list):
            raise ValidationError("images must be a list of URLs")

    def save(self, *args, **kwargs):
        if not self.name:
            self.name = self.name_en
        super().save(*args, **kwargs)

    # -----------------------------
    # Localization
    # -----------------------------
    def localized_name(self, locale: str) -> str:
        return self.name_id if locale == "id" else self.name_en

    def localized_description(self, locale: str) -> str:
        return self.description_id if locale == "id" else self.description_en

    @property
    def in_stock(self) -> bool:
        return self.stock > 0
