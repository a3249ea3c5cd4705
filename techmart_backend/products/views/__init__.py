# products/views/__init__.py

"""
Products views package exports.
"""

from .category import CategoryViewSet
from .product import ProductViewSet

__all__ = [
    "CategoryViewSet",
    "ProductViewSet",
]
