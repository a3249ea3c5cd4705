# products/views/category.py

from django.db.models import Q
from rest_framework import viewsets
from rest_framework.permissions import AllowAny, IsAuthenticated

from permissions.roles import CAP_CATALOG_EDIT, HasCapability
from products.localization import resolve_locale
from products.models import Category
from products.serializers.category import CategorySerializer
from products.views.product import PublicCatalogThrottle


class CategoryViewSet(viewsets.ModelViewSet):
    """
    Category API

    Policy:
    - Anyone can READ categories (storefront navigation)
    - Only admins (catalog.edit) can CREATE/UPDATE/DELETE
    - Deleting a category leaves its products uncategorized
    """

    serializer_class = CategorySerializer
    required_capability = CAP_CATALOG_EDIT

    def get_permissions(self):
        if self.action in {"list", "retrieve"}:
            return [AllowAny()]
        return [IsAuthenticated(), HasCapability()]

    def get_throttles(self):
        if self.action in {"list", "retrieve"}:
            return [PublicCatalogThrottle()]
        return super().get_throttles()

    def get_serializer_context(self):
        ctx = super().get_serializer_context()
        ctx["locale"] = resolve_locale(self.request)
        return ctx

    def get_queryset(self):
        qs = Category.objects.all().order_by("name_en")
        search = (self.request.query_params.get("search") or "").strip()
        if search:
            qs = qs.filter(Q(name_en__icontains=search) | Q(name_id__icontains=search))
        return qs
