# orders/serializers/submission.py

"""
ORDER SUBMISSION CONTRACT (camelCase wire format)

items: [{ id, name, price, quantity, stock }]
customerInfo: { email, firstName, lastName, address, city, postalCode, phone? }
totalAmount: number
notes?: string
idempotencyKey?: string   (header Idempotency-Key takes precedence)
"""

from __future__ import annotations

from rest_framework import serializers

from orders.services.order_service import CustomerInfo, OrderLineRequest, OrderRequest
from orders.services.pricing import to_decimal


class MoneyField(serializers.Field):
    """
    Accepts JSON numbers or numeric strings; yields Decimal.
    Precision is normalized by the engine (2dp, ROUND_HALF_UP).
    """

    default_error_messages = {"invalid": "A valid number is required."}

    def to_internal_value(self, data):
        try:
            return to_decimal(data)
        except ValueError:
            self.fail("invalid")

    def to_representation(self, value):
        return str(value)


class OrderItemInputSerializer(serializers.Serializer):
    id = serializers.IntegerField(min_value=1)
    name = serializers.CharField(required=False, allow_blank=True, default="")
    price = MoneyField()
    quantity = serializers.IntegerField(min_value=1)
    stock = serializers.IntegerField(required=False, allow_null=True, default=None)


class CustomerInfoSerializer(serializers.Serializer):
    email = serializers.EmailField()
    firstName = serializers.CharField(max_length=120)
    lastName = serializers.CharField(max_length=120)
    address = serializers.CharField(max_length=500)
    city = serializers.CharField(max_length=120)
    postalCode = serializers.CharField(max_length=20)
    phone = serializers.CharField(max_length=40, required=False, allow_blank=True, default="")


class OrderSubmissionSerializer(serializers.Serializer):
    items = OrderItemInputSerializer(many=True, allow_empty=False)
    customerInfo = CustomerInfoSerializer()
    totalAmount = MoneyField()
    notes = serializers.CharField(required=False, allow_blank=True, default="", max_length=2000)
    idempotencyKey = serializers.CharField(required=False, allow_blank=True, default="", max_length=255)

    def to_order_request(self, *, idempotency_key: str = "") -> OrderRequest:
        data = self.validated_data
        info = data["customerInfo"]

        return OrderRequest(
            items=tuple(
                OrderLineRequest(
                    product_id=item["id"],
                    name=item.get("name") or "",
                    unit_price=item["price"],
                    quantity=item["quantity"],
                    stock=item.get("stock"),
                )
                for item in data["items"]
            ),
            customer=CustomerInfo(
                email=info["email"],
                first_name=info["firstName"],
                last_name=info["lastName"],
                address=info["address"],
                city=info["city"],
                postal_code=info["postalCode"],
                phone=info.get("phone") or "",
            ),
            total_amount=data["totalAmount"],
            notes=data.get("notes") or "",
            idempotency_key=(idempotency_key or data.get("idempotencyKey") or "").strip(),
        )


class OrderSubmissionResponseSerializer(serializers.Serializer):
    success = serializers.BooleanField()
    orderId = serializers.IntegerField()
    message = serializers.CharField()
    replayed = serializers.BooleanField(required=False)
