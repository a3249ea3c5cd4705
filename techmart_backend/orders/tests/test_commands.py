from datetime import timedelta
from io import StringIO

from django.core.management import call_command
from django.test import TestCase
from django.utils import timezone

from orders.models import OrderIdempotencyKey
from orders.services.order_service import create_order
from orders.tests.helpers import make_product, order_request


class PurgeIdempotencyKeysCommandTests(TestCase):
    def setUp(self):
        product = make_product(stock=10)
        create_order(order_request([(product, 1)], idempotency_key="fresh"))
        create_order(order_request([(product, 1)], idempotency_key="stale"))
        OrderIdempotencyKey.objects.filter(key="stale").update(
            created_at=timezone.now() - timedelta(hours=48)
        )

    def test_dry_run_only_reports(self):
        out = StringIO()
        call_command("purge_idempotency_keys", "--dry-run", stdout=out)

        self.assertIn("Expired idempotency keys: 1", out.getvalue())
        self.assertEqual(OrderIdempotencyKey.objects.count(), 2)

    def test_purges_expired_keys_only(self):
        call_command("purge_idempotency_keys", stdout=StringIO())

        self.assertEqual(list(OrderIdempotencyKey.objects.values_list("key", flat=True)), ["fresh"])
