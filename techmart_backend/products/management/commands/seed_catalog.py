# products/management/commands/seed_catalog.py

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal

from django.core.management.base import BaseCommand
from django.db import transaction

from products.models import Category, Product, slugify_category_name
from products.services.inventory import set_product_stock


@dataclass(frozen=True)
class SeedCategory:
    name_en: str
    name_id: str


@dataclass(frozen=True)
class SeedProduct:
    category: str
    name_en: str
    name_id: str
    price: str
    stock: int
    description_en: str = ""
    description_id: str = ""
    is_featured: bool = False
    images: list = field(default_factory=list)


CATEGORIES = [
    SeedCategory("Laptops", "Laptop"),
    SeedCategory("Smartphones", "Ponsel Pintar"),
    SeedCategory("Accessories", "Aksesori"),
]

PRODUCTS = [
    SeedProduct(
        "Laptops", "Ultrabook 14", "Ultrabook 14", "899.00", 12,
        "Thin and light 14-inch laptop.", "Laptop 14 inci yang tipis dan ringan.", True,
    ),
    SeedProduct(
        "Laptops", "Gaming Laptop 16", "Laptop Gaming 16", "1499.00", 5,
        "16-inch laptop with discrete graphics.", "Laptop 16 inci dengan grafis diskrit.",
    ),
    SeedProduct(
        "Smartphones", "Phone X", "Ponsel X", "699.00", 25,
        "Flagship smartphone.", "Ponsel pintar andalan.", True,
    ),
    SeedProduct(
        "Accessories", "USB-C Cable", "Kabel USB-C", "9.99", 200,
        "1 m braided USB-C cable.", "Kabel USB-C anyaman 1 m.",
    ),
    SeedProduct(
        "Accessories", "Wireless Mouse", "Mouse Nirkabel", "24.50", 60,
        "Compact 2.4 GHz wireless mouse.", "Mouse nirkabel 2,4 GHz yang ringkas.",
    ),
]


class Command(BaseCommand):
    help = "Seed demo categories and products (idempotent)."

    def add_arguments(self, parser):
        parser.add_argument(
            "--reset-stock",
            action="store_true",
            help="Reset stock of existing seeded products to the seed values.",
        )

    @transaction.atomic
    def handle(self, *args, **options):
        reset_stock = bool(options.get("reset_stock"))

        categories = {}
        for seed in CATEGORIES:
            category, created = Category.objects.get_or_create(
                slug=slugify_category_name(seed.name_en),
                defaults={"name_en": seed.name_en, "name_id": seed.name_id},
            )
            categories[seed.name_en] = category
            self.stdout.write(f"{'created' if created else 'exists '}: category {seed.name_en}")

        created_count = 0
        for seed in PRODUCTS:
            product, created = Product.objects.get_or_create(
                name_en=seed.name_en,
                defaults={
                    "name_id": seed.name_id,
                    "description_en": seed.description_en,
                    "description_id": seed.description_id,
                    "price": Decimal(seed.price),
                    "stock": seed.stock,
                    "category": categories[seed.category],
                    "is_featured": seed.is_featured,
                    "images": list(seed.images),
                },
            )
            if created:
                created_count += 1
            elif reset_stock and product.stock != seed.stock:
                set_product_stock(product=product, stock=seed.stock)

            self.stdout.write(f"{'created' if created else 'exists '}: product {seed.name_en}")

        self.stdout.write(self.style.SUCCESS(f"Seeded catalog ({created_count} new products)."))
