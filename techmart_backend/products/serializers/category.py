# products/serializers/category.py

from rest_framework import serializers

from products.localization import default_locale
from products.models import Category, slugify_category_name


class CategorySerializer(serializers.ModelSerializer):
    """
    Category serializer.

    Rules:
    - name_en + name_id are required (both locales)
    - name is read-only and localized to context["locale"]
    - slug is derived from name_en and must stay unique
    """

    name = serializers.SerializerMethodField()
    name_en = serializers.CharField(required=True, allow_blank=False, max_length=255)
    name_id = serializers.CharField(required=True, allow_blank=False, max_length=255)
    image = serializers.URLField(required=False, allow_blank=True, max_length=500)

    class Meta:
        model = Category
        fields = ["id", "name", "name_en", "name_id", "slug", "image", "created_at", "updated_at"]
        read_only_fields = ["id", "name", "slug", "created_at", "updated_at"]

    def get_name(self, obj) -> str:
        return obj.localized_name(self.context.get("locale") or default_locale())

    def validate_name_en(self, value: str):
        v = (value or "").strip()
        if not v:
            raise serializers.ValidationError("name_en cannot be blank")
        if not slugify_category_name(v):
            raise serializers.ValidationError("name_en must contain letters or digits")
        return v

    def validate_name_id(self, value: str):
        v = (value or "").strip()
        if not v:
            raise serializers.ValidationError("name_id cannot be blank")
        return v

    def validate(self, attrs):
        name_en = attrs.get("name_en")
        if name_en:
            slug = slugify_category_name(name_en)
            clash = Category.objects.filter(slug=slug)
            if self.instance is not None:
                clash = clash.exclude(pk=self.instance.pk)
            if clash.exists():
                raise serializers.ValidationError({"name_en": "A category with this name already exists"})
        return attrs
