# products/serializers/product.py

"""
PRODUCT SERIALIZERS

Purpose:
- PublicProductSerializer: storefront read shape, localized to context["locale"].
- ProductAdminSerializer: full bilingual admin shape (CRUD).

Stock:
- stock is readable everywhere.
- Admin writes to stock are routed through set_product_stock (row lock),
  never assigned on the model directly.
"""

from rest_framework import serializers

from products.localization import default_locale
from products.models import Category, Product
from products.services.inventory import InventoryError, set_product_stock


def _ctx_locale(serializer) -> str:
    return serializer.context.get("locale") or default_locale()


class PublicProductSerializer(serializers.ModelSerializer):
    name = serializers.SerializerMethodField()
    description = serializers.SerializerMethodField()
    category_id = serializers.IntegerField(read_only=True, allow_null=True)
    category_name = serializers.SerializerMethodField()
    in_stock = serializers.BooleanField(read_only=True)

    class Meta:
        model = Product
        fields = [
            "id",
            "name",
            "description",
            "price",
            "compare_price",
            "stock",
            "in_stock",
            "image_url",
            "images",
            "category_id",
            "category_name",
            "is_featured",
        ]
        read_only_fields = fields

    def get_name(self, obj) -> str:
        return obj.localized_name(_ctx_locale(self))

    def get_description(self, obj) -> str:
        return obj.localized_description(_ctx_locale(self))

    def get_category_name(self, obj):
        if obj.category is None:
            return None
        return obj.category.localized_name(_ctx_locale(self))


class ProductAdminSerializer(serializers.ModelSerializer):
    """
    GUARANTEES:
    - price >= 0, compare_price >= 0 when present
    - stock >= 0 and written through the inventory service
    - images is a list of URLs
    """

    category = serializers.PrimaryKeyRelatedField(
        queryset=Category.objects.all(), required=False, allow_null=True
    )
    category_name = serializers.CharField(source="category.name_en", read_only=True, default=None)
    stock = serializers.IntegerField(required=False, min_value=0)
    images = serializers.ListField(child=serializers.URLField(max_length=500), required=False)

    class Meta:
        model = Product
        fields = [
            "id",
            "name",
            "name_en",
            "name_id",
            "description_en",
            "description_id",
            "price",
            "compare_price",
            "stock",
            "category",
            "category_name",
            "is_active",
            "is_featured",
            "image_url",
            "images",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["id", "name", "category_name", "created_at", "updated_at"]

    def validate_name_en(self, value):
        v = (value or "").strip()
        if not v:
            raise serializers.ValidationError("name_en is required")
        return v

    def validate_name_id(self, value):
        v = (value or "").strip()
        if not v:
            raise serializers.ValidationError("name_id is required")
        return v

    def validate_price(self, value):
        if value is None or value < 0:
            raise serializers.ValidationError("Price must be non-negative")
        return value

    def validate_compare_price(self, value):
        if value is not None and value < 0:
            raise serializers.ValidationError("Compare price must be non-negative")
        return value

    # -----------------------------
    # CREATE / UPDATE
    # -----------------------------
    def _apply_stock(self, product, stock):
        if stock is None:
            return product
        user = getattr(self.context.get("request"), "user", None)
        try:
            return set_product_stock(product=product, stock=stock, user=user)
        except InventoryError as exc:
            raise serializers.ValidationError({"stock": str(exc)})

    def create(self, validated_data):
        stock = validated_data.pop("stock", None)
        validated_data["name"] = validated_data.get("name_en", "")
        product = Product.objects.create(**validated_data)
        return self._apply_stock(product, stock)

    def update(self, instance, validated_data):
        stock = validated_data.pop("stock", None)
        if "name_en" in validated_data:
            validated_data["name"] = validated_data["name_en"]
        instance = super().update(instance, validated_data)
        return self._apply_stock(instance, stock)
