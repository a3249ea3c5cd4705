# products/serializers/__init__.py

from .category import CategorySerializer
from .product import ProductAdminSerializer, PublicProductSerializer

__all__ = [
    "CategorySerializer",
    "ProductAdminSerializer",
    "PublicProductSerializer",
]
