# products/urls.py

"""
CATALOG URLS

Registered under /api/catalog/:
    /api/catalog/products/
    /api/catalog/categories/
"""

from django.urls import include, path
from rest_framework.routers import DefaultRouter

from products.views import CategoryViewSet, ProductViewSet

app_name = "catalog"

router = DefaultRouter()

router.register(r"categories", CategoryViewSet, basename="categories")
router.register(r"products", ProductViewSet, basename="products")

urlpatterns = [
    path("", include(router.urls)),
]
