# orders/models/idempotency.py

from datetime import timedelta

from django.conf import settings
from django.db import models
from django.utils import timezone


class OrderIdempotencyKey(models.Model):
    """
    Client-supplied key that makes order submission safe to retry.

    - request_hash is a SHA-256 fingerprint of the canonical request
    - a key is only honoured for ORDER_IDEMPOTENCY_TTL_HOURS
    - rows are written in the same transaction as their order, so a key
      never points at a rolled-back order
    """

    key = models.CharField(max_length=255, unique=True)
    request_hash = models.CharField(max_length=64)
    order = models.ForeignKey(
        "orders.Order",
        on_delete=models.CASCADE,
        related_name="idempotency_keys",
    )
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)

    class Meta:
        ordering = ["-created_at"]

    def __str__(self):
        return f"{self.key} -> order {self.order_id}"

    @staticmethod
    def ttl() -> timedelta:
        return timedelta(hours=int(getattr(settings, "ORDER_IDEMPOTENCY_TTL_HOURS", 24)))

    @classmethod
    def expiry_cutoff(cls, now=None):
        return (now or timezone.now()) - cls.ttl()

    def is_expired(self, now=None) -> bool:
        return self.created_at < self.expiry_cutoff(now)
