"""
PATH: products/models/__init__.py

Products models export surface.
"""

from .category import Category, slugify_category_name
from .product import Product

__all__ = [
    "Category",
    "Product",
    "slugify_category_name",
]
