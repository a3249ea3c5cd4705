# storefront/serializers.py

from rest_framework import serializers

from orders.serializers.submission import CustomerInfoSerializer


class CartItemAddSerializer(serializers.Serializer):
    productId = serializers.IntegerField(min_value=1)
    quantity = serializers.IntegerField(min_value=1, default=1)


class CartQuantitySerializer(serializers.Serializer):
    # 0 or negative removes the entry
    quantity = serializers.IntegerField()


class CartEntrySerializer(serializers.Serializer):
    id = serializers.IntegerField(source="product_id")
    name = serializers.CharField()
    price = serializers.DecimalField(source="unit_price", max_digits=12, decimal_places=2)
    quantity = serializers.IntegerField()
    stock = serializers.IntegerField()
    lineTotal = serializers.DecimalField(source="line_total", max_digits=12, decimal_places=2)


class CheckoutSerializer(serializers.Serializer):
    """
    Documentation-only shape for POST /api/storefront/checkout/.
    The cart supplies the items; validation happens in the order submission contract.
    """

    customerInfo = CustomerInfoSerializer()
    totalAmount = serializers.DecimalField(max_digits=12, decimal_places=2, required=False)
    notes = serializers.CharField(required=False, allow_blank=True)
    idempotencyKey = serializers.CharField(required=False, allow_blank=True)
