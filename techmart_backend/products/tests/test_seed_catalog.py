from io import StringIO

from django.core.management import call_command
from django.test import TestCase

from products.models import Category, Product


class SeedCatalogCommandTests(TestCase):
    def test_seed_is_idempotent(self):
        call_command("seed_catalog", stdout=StringIO())
        categories = Category.objects.count()
        products = Product.objects.count()

        call_command("seed_catalog", stdout=StringIO())

        self.assertGreater(products, 0)
        self.assertEqual(Category.objects.count(), categories)
        self.assertEqual(Product.objects.count(), products)

    def test_reset_stock(self):
        call_command("seed_catalog", stdout=StringIO())
        product = Product.objects.order_by("pk").first()
        seeded = product.stock
        Product.objects.filter(pk=product.pk).update(stock=0)

        call_command("seed_catalog", "--reset-stock", stdout=StringIO())

        product.refresh_from_db()
        self.assertEqual(product.stock, seeded)
