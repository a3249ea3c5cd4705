# orders/management/commands/purge_idempotency_keys.py

from __future__ import annotations

from django.core.management.base import BaseCommand

from orders.models import OrderIdempotencyKey


class Command(BaseCommand):
    help = "Delete order idempotency keys older than ORDER_IDEMPOTENCY_TTL_HOURS."

    def add_arguments(self, parser):
        parser.add_argument(
            "--dry-run",
            action="store_true",
            help="Only report how many keys would be deleted.",
        )

    def handle(self, *args, **options):
        expired = OrderIdempotencyKey.objects.filter(created_at__lt=OrderIdempotencyKey.expiry_cutoff())

        if options.get("dry_run"):
            self.stdout.write(f"Expired idempotency keys: {expired.count()}")
            return

        deleted, _ = expired.delete()
        self.stdout.write(self.style.SUCCESS(f"Deleted {deleted} expired idempotency keys."))
