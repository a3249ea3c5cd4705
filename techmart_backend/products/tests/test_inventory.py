# products/tests/test_inventory.py

from django.db import IntegrityError, transaction
from django.test import TestCase

from orders.services.order_service import create_order
from orders.tests.helpers import make_product, order_request
from products.models import Category, Product
from products.services.inventory import (
    InventoryError,
    delete_product,
    reserve_stock,
    set_product_stock,
)


class StockGuardTests(TestCase):
    """
    GUARANTEES:
    - reserve_stock never drives stock below zero
    - absolute stock edits reject negatives
    - the database refuses negative stock even without the service
    """

    def test_reserve_within_stock(self):
        product = make_product(stock=3)

        self.assertTrue(reserve_stock(product_id=product.pk, quantity=3))

        product.refresh_from_db()
        self.assertEqual(product.stock, 0)

    def test_reserve_beyond_stock_updates_nothing(self):
        product = make_product(stock=2)

        self.assertFalse(reserve_stock(product_id=product.pk, quantity=3))

        product.refresh_from_db()
        self.assertEqual(product.stock, 2)

    def test_reserve_requires_positive_integer(self):
        product = make_product(stock=2)

        with self.assertRaises(InventoryError):
            reserve_stock(product_id=product.pk, quantity=0)
        with self.assertRaises(InventoryError):
            reserve_stock(product_id=product.pk, quantity=True)

    def test_set_product_stock(self):
        product = make_product(stock=2)

        updated = set_product_stock(product=product, stock=7)

        self.assertEqual(updated.stock, 7)

    def test_set_product_stock_rejects_negative(self):
        product = make_product(stock=2)

        with self.assertRaises(InventoryError):
            set_product_stock(product=product, stock=-1)

        product.refresh_from_db()
        self.assertEqual(product.stock, 2)

    def test_check_constraint_blocks_negative_stock(self):
        product = make_product(stock=1)

        with self.assertRaises(IntegrityError):
            with transaction.atomic():
                Product.objects.filter(pk=product.pk).update(stock=-1)


class ProductDeletionGuardTests(TestCase):
    """
    GUARANTEES:
    - unreferenced products are physically deleted
    - products referenced by any order line are only deactivated
    """

    def test_unreferenced_product_is_deleted(self):
        product = make_product()

        result = delete_product(product_id=product.pk)

        self.assertTrue(result.deleted)
        self.assertFalse(result.deactivated)
        self.assertEqual(result.message, "Product deleted successfully")
        self.assertFalse(Product.objects.filter(pk=product.pk).exists())

    def test_referenced_product_is_deactivated(self):
        product = make_product(stock=5)
        create_order(order_request([(product, 1)]))

        result = delete_product(product_id=product.pk)

        self.assertFalse(result.deleted)
        self.assertTrue(result.deactivated)
        self.assertEqual(result.message, "Product deactivated successfully (has existing orders)")
        product.refresh_from_db()
        self.assertFalse(product.is_active)

    def test_unknown_product(self):
        with self.assertRaises(Product.DoesNotExist):
            delete_product(product_id=999999)


class CategoryModelTests(TestCase):
    def test_slug_and_name_follow_english_name(self):
        category = Category.objects.create(name_en="  Phones & Tablets ", name_id="Ponsel & Tablet")

        self.assertEqual(category.name, "Phones & Tablets")
        self.assertEqual(category.slug, "phones-tablets")
        self.assertEqual(category.localized_name("id"), "Ponsel & Tablet")

    def test_slug_regenerated_on_rename(self):
        category = Category.objects.create(name_en="Audio", name_id="Audio")
        category.name_en = "Audio Gear"
        category.save()

        self.assertEqual(category.slug, "audio-gear")
