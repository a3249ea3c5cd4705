# orders/views/orders.py
"""
ORDERS API

- POST  /api/orders/              submit (AllowAny, see submission.py)
- GET   /api/orders/              admins: all orders; users: their own
- GET   /api/orders/<id>/         owner or admin
- PATCH /api/orders/<id>/status/  admin only
"""

from __future__ import annotations

from django.db.models import Count
from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework import generics, status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from orders.models import Order
from orders.serializers import (
    OrderListSerializer,
    OrderSerializer,
    OrderStatusUpdateSerializer,
    OrderSubmissionResponseSerializer,
    OrderSubmissionSerializer,
)
from orders.services.order_lifecycle import InvalidOrderStatusError, change_order_status
from orders.views.submission import PublicWriteThrottle, submit_order
from permissions.roles import CAP_ORDERS_MANAGE, CAP_ORDERS_VIEW_ALL, HasCapability, effective_capabilities_for
from products.localization import resolve_locale
from techmart.responses import error_response


def _scoped_orders(user):
    qs = Order.objects.all()
    if CAP_ORDERS_VIEW_ALL in effective_capabilities_for(user):
        return qs
    return qs.filter(user=user)


class OrderListCreateView(generics.ListAPIView):
    serializer_class = OrderListSerializer
    filterset_fields = ["status", "payment_status"]

    def get_permissions(self):
        if self.request.method == "POST":
            return [AllowAny()]
        return [IsAuthenticated()]

    def get_throttles(self):
        if self.request.method == "POST":
            return [PublicWriteThrottle()]
        return super().get_throttles()

    def get_queryset(self):
        return (
            _scoped_orders(self.request.user)
            .annotate(item_count=Count("items"))
            .order_by("-created_at", "-id")
        )

    @extend_schema(
        parameters=[
            OpenApiParameter(name="status", type=str, required=False),
            OpenApiParameter(name="payment_status", type=str, required=False),
        ],
        responses={200: OrderListSerializer(many=True)},
        description="Admins see every order; users see their own.",
    )
    def get(self, request, *args, **kwargs):
        return super().get(request, *args, **kwargs)

    @extend_schema(
        request=OrderSubmissionSerializer,
        parameters=[
            OpenApiParameter(
                name="Idempotency-Key",
                type=str,
                location=OpenApiParameter.HEADER,
                required=False,
                description="Retry-safe submission key",
            ),
        ],
        responses={
            201: OrderSubmissionResponseSerializer,
            200: OpenApiResponse(response=OrderSubmissionResponseSerializer, description="Idempotent replay"),
            400: OpenApiResponse(description="Invalid request / product not found / insufficient stock"),
            409: OpenApiResponse(description="Idempotency key reused with a different request"),
            500: OpenApiResponse(description="Persistence failure"),
        },
        description="Submit the cart as an order (guest or authenticated).",
    )
    def post(self, request, *args, **kwargs):
        return submit_order(request, request.data)


class OrderDetailView(generics.RetrieveAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = OrderSerializer

    def get_queryset(self):
        return _scoped_orders(self.request.user).prefetch_related("items__product")

    def get_serializer_context(self):
        ctx = super().get_serializer_context()
        ctx["locale"] = resolve_locale(self.request)
        return ctx


class OrderStatusUpdateView(APIView):
    permission_classes = [IsAuthenticated, HasCapability]
    required_capability = CAP_ORDERS_MANAGE

    @extend_schema(
        request=OrderStatusUpdateSerializer,
        responses={
            200: OrderSerializer,
            400: OpenApiResponse(description="Invalid status"),
            404: OpenApiResponse(description="Order not found"),
        },
    )
    def patch(self, request, pk):
        raw_status = request.data.get("status") if hasattr(request.data, "get") else None

        try:
            order = change_order_status(order_id=pk, target_status=raw_status, actor=request.user)
        except InvalidOrderStatusError as exc:
            return error_response(
                code="INVALID_STATUS",
                message=str(exc),
                http_status=status.HTTP_400_BAD_REQUEST,
            )
        except Order.DoesNotExist:
            return error_response(
                code="NOT_FOUND",
                message="Order not found",
                http_status=status.HTTP_404_NOT_FOUND,
            )

        order = Order.objects.prefetch_related("items__product").get(pk=order.pk)
        ctx = {"request": request, "locale": resolve_locale(request)}
        return Response(OrderSerializer(order, context=ctx).data, status=status.HTTP_200_OK)
