# orders/models/order_item.py

from django.core.exceptions import ValidationError
from django.db import models


class OrderItem(models.Model):
    """
    One purchased line.

    - unit_price is the price snapshot at purchase time; it is never
      rewritten when the product price changes later.
    - product is PROTECTed: a product with order history can only be
      deactivated (see products.services.inventory.delete_product).
    """

    order = models.ForeignKey(
        "orders.Order",
        on_delete=models.CASCADE,
        related_name="items",
    )
    product = models.ForeignKey(
        "products.Product",
        on_delete=models.PROTECT,
        related_name="order_items",
    )

    quantity = models.PositiveIntegerField()
    unit_price = models.DecimalField(max_digits=10, decimal_places=2)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["id"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(quantity__gt=0),
                name="order_item_quantity_positive",
            ),
        ]

    def __str__(self):
        return f"{self.quantity} x product {self.product_id} @ {self.unit_price}"

    def clean(self):
        if self.quantity is None or self.quantity <= 0:
            raise ValidationError("Quantity must be greater than zero")

    def save(self, *args, **kwargs):
        if self.pk and not self._state.adding:
            raise ValidationError("Order items are immutable once created")
        super().save(*args, **kwargs)

    @property
    def line_total(self):
        return self.unit_price * self.quantity
