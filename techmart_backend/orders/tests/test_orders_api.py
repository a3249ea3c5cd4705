from decimal import Decimal
from unittest import mock

from django.db import DatabaseError, OperationalError
from django.test import TestCase
from django.urls import reverse
from rest_framework.test import APIClient

from orders.models import Order, OrderItem, OrderStatus, PaymentStatus
from orders.tests.helpers import CUSTOMER, make_product, order_payload
from products.models import Product
from products.services.inventory import delete_product
from users.models import Role, User


class OrderSubmissionApiTests(TestCase):
    """
    GUARANTEES:
    - Guests and signed-in users can submit orders
    - Error bodies carry success=false, a message and a machine code
    - Status codes: 201 / 200 replay / 400 / 409 (500 in OrderPersistenceFailureApiTests)
    """

    def setUp(self):
        self.client = APIClient()
        self.url = reverse("orders:order-list")
        self.product = make_product(price="10.00", stock=5)

    def test_guest_checkout_created(self):
        res = self.client.post(self.url, order_payload([(self.product, 2)]), format="json")

        self.assertEqual(res.status_code, 201)
        self.assertTrue(res.data["success"])
        order = Order.objects.get(pk=res.data["orderId"])
        self.assertIsNone(order.user_id)
        self.assertEqual(order.email, CUSTOMER["email"])
        self.product.refresh_from_db()
        self.assertEqual(self.product.stock, 3)

    def test_authenticated_checkout_attaches_user(self):
        user = User.objects.create_user(email="member@techmart.test")
        self.client.force_authenticate(user=user)

        res = self.client.post(self.url, order_payload([(self.product, 1)]), format="json")

        self.assertEqual(res.status_code, 201)
        self.assertEqual(Order.objects.get(pk=res.data["orderId"]).user_id, user.pk)

    def test_notes_are_stored(self):
        res = self.client.post(
            self.url,
            order_payload([(self.product, 1)], notes="Leave at the door"),
            format="json",
        )

        self.assertEqual(res.status_code, 201)
        self.assertEqual(Order.objects.get(pk=res.data["orderId"]).notes, "Leave at the door")

    def test_missing_fields(self):
        res = self.client.post(self.url, {"items": []}, format="json")

        self.assertEqual(res.status_code, 400)
        self.assertFalse(res.data["success"])
        self.assertEqual(res.data["error"], "Missing required fields")
        self.assertEqual(res.data["code"], "INVALID_REQUEST")
        self.assertEqual(Order.objects.count(), 0)

    def test_zero_quantity_is_invalid(self):
        payload = order_payload([(self.product, 1)])
        payload["items"][0]["quantity"] = 0

        res = self.client.post(self.url, payload, format="json")

        self.assertEqual(res.status_code, 400)
        self.assertEqual(res.data["code"], "INVALID_REQUEST")

    def test_insufficient_stock(self):
        res = self.client.post(self.url, order_payload([(self.product, 10)]), format="json")

        self.assertEqual(res.status_code, 400)
        self.assertEqual(res.data["code"], "INSUFFICIENT_STOCK")
        self.assertEqual(res.data["available"], 5)
        self.assertEqual(res.data["requested"], 10)
        self.assertEqual(res.data["productId"], self.product.pk)
        self.product.refresh_from_db()
        self.assertEqual(self.product.stock, 5)

    def test_unknown_product(self):
        payload = order_payload([(self.product, 1)])
        payload["items"][0]["id"] = 999999
        payload["items"][0]["name"] = "Ghost"

        res = self.client.post(self.url, payload, format="json")

        self.assertEqual(res.status_code, 400)
        self.assertEqual(res.data["code"], "PRODUCT_NOT_FOUND")
        self.assertEqual(res.data["error"], "Product Ghost not found")

    def test_total_mismatch(self):
        res = self.client.post(
            self.url, order_payload([(self.product, 1)], total="5.00"), format="json"
        )

        self.assertEqual(res.status_code, 400)
        self.assertEqual(res.data["code"], "TOTAL_MISMATCH")

    def test_idempotency_header_replay_and_conflict(self):
        payload = order_payload([(self.product, 1)])

        first = self.client.post(self.url, payload, format="json", HTTP_IDEMPOTENCY_KEY="abc-123")
        replay = self.client.post(self.url, payload, format="json", HTTP_IDEMPOTENCY_KEY="abc-123")
        conflict = self.client.post(
            self.url,
            order_payload([(self.product, 2)]),
            format="json",
            HTTP_IDEMPOTENCY_KEY="abc-123",
        )

        self.assertEqual(first.status_code, 201)
        self.assertEqual(replay.status_code, 200)
        self.assertTrue(replay.data["replayed"])
        self.assertEqual(replay.data["orderId"], first.data["orderId"])
        self.assertEqual(conflict.status_code, 409)
        self.assertEqual(conflict.data["code"], "IDEMPOTENCY_CONFLICT")
        self.assertEqual(Order.objects.count(), 1)

    def test_idempotency_key_in_body(self):
        payload = order_payload([(self.product, 1)], idempotencyKey="body-key")

        first = self.client.post(self.url, payload, format="json")
        replay = self.client.post(self.url, payload, format="json")

        self.assertEqual(first.status_code, 201)
        self.assertEqual(replay.status_code, 200)
        self.assertEqual(Order.objects.count(), 1)


class OrderPersistenceFailureApiTests(TestCase):
    """
    GUARANTEES:
    - Database failures surface as 500 with code PERSISTENCE_ERROR
    - Nothing is written and stock is untouched
    """

    def setUp(self):
        self.client = APIClient()
        self.url = reverse("orders:order-list")
        self.product = make_product(price="10.00", stock=5)

    def _assert_persistence_failure(self, res):
        self.assertEqual(res.status_code, 500)
        self.assertFalse(res.data["success"])
        self.assertEqual(res.data["code"], "PERSISTENCE_ERROR")
        self.assertEqual(res.data["error"], "Failed to create order")
        self.assertEqual(Order.objects.count(), 0)
        self.product.refresh_from_db()
        self.assertEqual(self.product.stock, 5)

    def test_commit_failure(self):
        with mock.patch.object(OrderItem.objects, "bulk_create", side_effect=DatabaseError("disk full")):
            res = self.client.post(self.url, order_payload([(self.product, 2)]), format="json")

        self._assert_persistence_failure(res)

    def test_connection_lost_while_reading_products(self):
        with mock.patch.object(Product.objects, "in_bulk", side_effect=OperationalError("connection lost")):
            res = self.client.post(self.url, order_payload([(self.product, 2)]), format="json")

        self._assert_persistence_failure(res)


class OrderReadApiTests(TestCase):
    """
    GUARANTEES:
    - Admins see all orders; users only their own
    - Anonymous callers are rejected with 401
    - Detail view resolves product names for deactivated products
    """

    def setUp(self):
        self.client = APIClient()
        self.admin = User.objects.create_user(email="admin@techmart.test", role=Role.ADMIN)
        self.alice = User.objects.create_user(email="alice@techmart.test")
        self.bob = User.objects.create_user(email="bob@techmart.test")
        self.product = make_product(name="Wireless Mouse", price="10.00", stock=50)

        self.alice_order = self._submit_as(self.alice)
        self.bob_order = self._submit_as(self.bob)

    def _submit_as(self, user):
        self.client.force_authenticate(user=user)
        res = self.client.post(
            reverse("orders:order-list"), order_payload([(self.product, 1)]), format="json"
        )
        self.client.force_authenticate(user=None)
        return Order.objects.get(pk=res.data["orderId"])

    def test_anonymous_list_is_401(self):
        res = self.client.get(reverse("orders:order-list"))
        self.assertEqual(res.status_code, 401)

    def test_user_sees_only_own_orders(self):
        self.client.force_authenticate(user=self.alice)
        res = self.client.get(reverse("orders:order-list"))

        self.assertEqual(res.status_code, 200)
        ids = [o["id"] for o in res.data["results"]]
        self.assertEqual(ids, [self.alice_order.pk])

    def test_admin_sees_all_orders_with_status_filter(self):
        Order.objects.filter(pk=self.bob_order.pk).update(status=OrderStatus.SHIPPED)
        self.client.force_authenticate(user=self.admin)

        res = self.client.get(reverse("orders:order-list"))
        self.assertEqual(res.data["count"], 2)

        res = self.client.get(reverse("orders:order-list"), {"status": "shipped"})
        self.assertEqual([o["id"] for o in res.data["results"]], [self.bob_order.pk])

    def test_user_cannot_read_someone_elses_order(self):
        self.client.force_authenticate(user=self.alice)
        res = self.client.get(reverse("orders:order-detail", kwargs={"pk": self.bob_order.pk}))
        self.assertEqual(res.status_code, 404)

    def test_detail_after_product_deactivated(self):
        result = delete_product(product_id=self.product.pk)
        self.assertTrue(result.deactivated)

        self.client.force_authenticate(user=self.alice)
        res = self.client.get(
            reverse("orders:order-detail", kwargs={"pk": self.alice_order.pk}), {"locale": "id"}
        )

        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.data["items"][0]["product_name"], "Wireless Mouse (ID)")
        self.assertEqual(Decimal(res.data["items"][0]["unit_price"]), Decimal("10.00"))


class OrderStatusApiTests(TestCase):
    """
    GUARANTEES:
    - Only admins change status (401 anonymous, 403 non-admin)
    - Status must be one of the closed enumeration
    - completed forces payment_status=paid
    - Any pair of statuses is allowed (admin override)
    """

    def setUp(self):
        self.client = APIClient()
        self.admin = User.objects.create_user(email="admin@techmart.test", role=Role.ADMIN)
        self.user = User.objects.create_user(email="user@techmart.test")
        product = make_product(stock=10)
        res = self.client.post(
            reverse("orders:order-list"), order_payload([(product, 1)]), format="json"
        )
        self.order = Order.objects.get(pk=res.data["orderId"])
        self.url = reverse("orders:order-status", kwargs={"pk": self.order.pk})

    def test_admin_moves_order_to_processing(self):
        self.client.force_authenticate(user=self.admin)
        res = self.client.patch(self.url, {"status": "processing"}, format="json")

        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.data["status"], "processing")
        self.order.refresh_from_db()
        self.assertEqual(self.order.payment_status, PaymentStatus.PENDING)

    def test_completed_forces_paid(self):
        self.client.force_authenticate(user=self.admin)
        res = self.client.patch(self.url, {"status": "completed"}, format="json")

        self.assertEqual(res.status_code, 200)
        self.order.refresh_from_db()
        self.assertEqual(self.order.status, OrderStatus.COMPLETED)
        self.assertEqual(self.order.payment_status, PaymentStatus.PAID)

    def test_override_out_of_terminal_state(self):
        self.client.force_authenticate(user=self.admin)
        self.client.patch(self.url, {"status": "cancelled"}, format="json")
        res = self.client.patch(self.url, {"status": "pending"}, format="json")

        self.assertEqual(res.status_code, 200)
        self.order.refresh_from_db()
        self.assertEqual(self.order.status, OrderStatus.PENDING)

    def test_invalid_status(self):
        self.client.force_authenticate(user=self.admin)
        res = self.client.patch(self.url, {"status": "lost"}, format="json")

        self.assertEqual(res.status_code, 400)
        self.assertEqual(res.data["code"], "INVALID_STATUS")

    def test_unknown_order(self):
        self.client.force_authenticate(user=self.admin)
        res = self.client.patch(
            reverse("orders:order-status", kwargs={"pk": 999999}), {"status": "shipped"}, format="json"
        )
        self.assertEqual(res.status_code, 404)

    def test_non_admin_forbidden(self):
        self.client.force_authenticate(user=self.user)
        res = self.client.patch(self.url, {"status": "shipped"}, format="json")

        self.assertEqual(res.status_code, 403)
        self.order.refresh_from_db()
        self.assertEqual(self.order.status, OrderStatus.PENDING)

    def test_anonymous_unauthorized(self):
        res = self.client.patch(self.url, {"status": "shipped"}, format="json")
        self.assertEqual(res.status_code, 401)
