# orders/serializers/order.py

from rest_framework import serializers

from orders.models import Order, OrderItem, OrderStatus
from products.localization import default_locale


class OrderItemSerializer(serializers.ModelSerializer):
    """
    Historical line: unit_price is the purchase-time snapshot.
    product_name resolves for deactivated products too.
    """

    product_id = serializers.IntegerField(read_only=True)
    product_name = serializers.SerializerMethodField()
    line_total = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)

    class Meta:
        model = OrderItem
        fields = ["id", "product_id", "product_name", "quantity", "unit_price", "line_total", "created_at"]
        read_only_fields = fields

    def get_product_name(self, obj) -> str:
        locale = self.context.get("locale") or default_locale()
        return obj.product.localized_name(locale)


class OrderSerializer(serializers.ModelSerializer):
    user_id = serializers.UUIDField(read_only=True, allow_null=True)
    items = OrderItemSerializer(many=True, read_only=True)

    class Meta:
        model = Order
        fields = [
            "id",
            "user_id",
            "email",
            "subtotal_amount",
            "tax_amount",
            "shipping_amount",
            "total_amount",
            "status",
            "payment_status",
            "shipping_address",
            "notes",
            "items",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class OrderListSerializer(serializers.ModelSerializer):
    user_id = serializers.UUIDField(read_only=True, allow_null=True)
    item_count = serializers.IntegerField(read_only=True)

    class Meta:
        model = Order
        fields = [
            "id",
            "user_id",
            "email",
            "total_amount",
            "status",
            "payment_status",
            "item_count",
            "created_at",
        ]
        read_only_fields = fields


class OrderStatusUpdateSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=OrderStatus.choices)
