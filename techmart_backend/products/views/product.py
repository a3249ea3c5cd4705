# products/views/product.py

"""
PRODUCT VIEWSET

Purpose:
- Public storefront browsing (AllowAny, active products only, localized)
- Admin product management (CRUD; delete goes through the deletion guard)

Query params (list):
- locale=en|id
- search=<text>      matches the localized name
- category=<id>      (categoryId accepted as alias)
- featured=true
- include_inactive=true   (admins only)
"""

from django.db import transaction
from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework import status, viewsets
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.throttling import AnonRateThrottle

from permissions.roles import CAP_CATALOG_EDIT, HasCapability, is_admin
from products.localization import resolve_locale
from products.models import Product
from products.serializers import ProductAdminSerializer, PublicProductSerializer
from products.services.inventory import delete_product
from techmart.responses import error_response

_TRUTHY = {"1", "true", "yes"}


class PublicCatalogThrottle(AnonRateThrottle):
    scope = "public_catalog"


class ProductViewSet(viewsets.ModelViewSet):
    queryset = Product.objects.select_related("category")
    required_capability = CAP_CATALOG_EDIT

    def get_permissions(self):
        if self.action in {"list", "retrieve"}:
            return [AllowAny()]
        return [IsAuthenticated(), HasCapability()]

    def get_throttles(self):
        if self.action in {"list", "retrieve"}:
            return [PublicCatalogThrottle()]
        return super().get_throttles()

    def get_serializer_class(self):
        if is_admin(self.request.user):
            return ProductAdminSerializer
        return PublicProductSerializer

    def get_serializer_context(self):
        ctx = super().get_serializer_context()
        ctx["locale"] = resolve_locale(self.request)
        return ctx

    def _flag(self, name) -> bool:
        return (self.request.query_params.get(name) or "").strip().lower() in _TRUTHY

    def get_queryset(self):
        qs = Product.objects.select_related("category").order_by("-created_at")
        params = self.request.query_params

        if not (is_admin(self.request.user) and (self._flag("include_inactive") or self.action != "list")):
            qs = qs.filter(is_active=True)

        if self.action != "list":
            return qs

        search = (params.get("search") or "").strip()
        if search:
            if resolve_locale(self.request) == "id":
                qs = qs.filter(name_id__icontains=search)
            else:
                qs = qs.filter(name_en__icontains=search)

        category = (params.get("category") or params.get("categoryId") or "").strip()
        if category:
            if not category.isdigit():
                return qs.none()
            qs = qs.filter(category_id=int(category))

        if self._flag("featured"):
            qs = qs.filter(is_featured=True)

        return qs

    @extend_schema(
        parameters=[
            OpenApiParameter(name="locale", type=str, required=False, description="en | id"),
            OpenApiParameter(name="search", type=str, required=False),
            OpenApiParameter(name="category", type=int, required=False),
            OpenApiParameter(name="featured", type=bool, required=False),
            OpenApiParameter(name="include_inactive", type=bool, required=False, description="Admins only"),
        ],
        responses={200: PublicProductSerializer(many=True)},
        description="Browse active products (localized).",
    )
    def list(self, request, *args, **kwargs):
        return super().list(request, *args, **kwargs)

    def perform_create(self, serializer):
        with transaction.atomic():
            serializer.save()

    def perform_update(self, serializer):
        with transaction.atomic():
            serializer.save()

    @extend_schema(
        responses={
            200: OpenApiResponse(description="Deleted, or deactivated when referenced by orders"),
            404: OpenApiResponse(description="Product not found"),
        },
    )
    def destroy(self, request, *args, **kwargs):
        try:
            result = delete_product(product_id=kwargs.get("pk"), user=request.user)
        except (Product.DoesNotExist, ValueError):
            return error_response(
                code="NOT_FOUND",
                message="Product not found",
                http_status=status.HTTP_404_NOT_FOUND,
            )

        return Response(
            {
                "success": True,
                "message": result.message,
                "deleted": result.deleted,
                "deactivated": result.deactivated,
            },
            status=status.HTTP_200_OK,
        )
