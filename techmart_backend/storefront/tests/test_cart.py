from decimal import Decimal

from django.test import TestCase

from orders.tests.helpers import make_product
from storefront.cart import Cart, CartError, CartStockLimitError, SessionCartStorage


class FakeSession(dict):
    modified = False


class CartAssemblerTests(TestCase):
    """
    GUARANTEES:
    - Quantities stay within the last-known stock snapshot
    - Every mutation is written through to the session
    - Corrupt stored payloads load as an empty cart
    """

    def setUp(self):
        self.session = FakeSession()
        self.cart = Cart(SessionCartStorage(self.session))
        self.product = make_product(name="Keyboard", price="25.00", stock=3)

    def test_new_entry_is_clamped_to_stock(self):
        entry = self.cart.add(self.product, 10)

        self.assertEqual(entry.quantity, 3)
        self.assertEqual(entry.stock, 3)
        self.assertEqual(self.session["cart"][0]["quantity"], 3)
        self.assertTrue(self.session.modified)

    def test_out_of_stock_product_cannot_be_added(self):
        product = make_product(name="Monitor", stock=0)

        with self.assertRaises(CartStockLimitError) as ctx:
            self.cart.add(product, 1)

        self.assertEqual(ctx.exception.available, 0)
        self.assertTrue(self.cart.is_empty())

    def test_adding_past_stock_aborts_and_keeps_cart(self):
        self.cart.add(self.product, 2)

        with self.assertRaises(CartStockLimitError) as ctx:
            self.cart.add(self.product, 2)

        self.assertEqual(str(ctx.exception), "Only 3 available")
        self.assertEqual(self.cart.get(self.product.pk).quantity, 2)

    def test_adding_refreshes_stock_snapshot(self):
        self.cart.add(self.product, 1)
        self.product.stock = 8
        self.product.save()

        entry = self.cart.add(self.product, 4)

        self.assertEqual(entry.quantity, 5)
        self.assertEqual(entry.stock, 8)

    def test_set_quantity_clamps_and_removes(self):
        self.cart.add(self.product, 1)

        self.assertEqual(self.cart.set_quantity(self.product.pk, 99).quantity, 3)
        self.assertIsNone(self.cart.set_quantity(self.product.pk, 0))
        self.assertTrue(self.cart.is_empty())

    def test_set_quantity_for_missing_entry(self):
        with self.assertRaises(CartError):
            self.cart.set_quantity(12345, 1)

    def test_totals_and_item_count(self):
        other = make_product(name="Mouse", price="9.99", stock=10)
        self.cart.add(self.product, 2)
        self.cart.add(other, 3)

        self.assertEqual(self.cart.totals(), Decimal("79.97"))
        self.assertEqual(self.cart.item_count(), 5)

    def test_remove_and_clear(self):
        other = make_product(name="Mouse", stock=10)
        self.cart.add(self.product, 1)
        self.cart.add(other, 1)

        self.cart.remove(self.product.pk)
        self.assertEqual([e.product_id for e in self.cart.entries()], [other.pk])

        self.cart.clear()
        self.assertEqual(self.session["cart"], [])

    def test_order_items_wire_shape(self):
        self.cart.add(self.product, 2, name="Papan Ketik")

        self.assertEqual(
            self.cart.to_order_items(),
            [{"id": self.product.pk, "name": "Papan Ketik", "price": "25.00", "quantity": 2, "stock": 3}],
        )

    def test_cart_survives_reload(self):
        self.cart.add(self.product, 2)

        reloaded = Cart(SessionCartStorage(self.session))

        self.assertEqual(reloaded.get(self.product.pk).quantity, 2)
        self.assertEqual(reloaded.get(self.product.pk).unit_price, Decimal("25.00"))

    def test_non_list_payload_resets(self):
        session = FakeSession(cart={"oops": True})

        with self.assertLogs("storefront.cart", level="WARNING"):
            cart = Cart(SessionCartStorage(session))

        self.assertTrue(cart.is_empty())
        self.assertEqual(session["cart"], [])

    def test_malformed_entry_resets(self):
        session = FakeSession(cart=[{"id": 1, "price": "abc", "quantity": 1, "stock": 1}])

        with self.assertLogs("storefront.cart", level="WARNING"):
            cart = Cart(SessionCartStorage(session))

        self.assertTrue(cart.is_empty())
        self.assertEqual(session["cart"], [])

    def test_entry_above_its_stock_snapshot_resets(self):
        session = FakeSession(cart=[{"id": 1, "name": "X", "price": "5.00", "quantity": 2, "stock": 0}])

        with self.assertLogs("storefront.cart", level="WARNING"):
            cart = Cart(SessionCartStorage(session))

        self.assertTrue(cart.is_empty())
        with self.assertRaises(CartError):
            cart.set_quantity(1, 5)

    def test_set_quantity_with_zero_snapshot_is_rejected(self):
        entry = self.cart.add(self.product, 1)
        entry.stock = 0

        with self.assertRaises(CartStockLimitError) as ctx:
            self.cart.set_quantity(self.product.pk, 5)

        self.assertEqual(ctx.exception.available, 0)

    def test_non_integer_quantity_rejected(self):
        with self.assertRaises(CartError):
            self.cart.add(self.product, "1.5")
