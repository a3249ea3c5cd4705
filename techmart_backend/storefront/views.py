# storefront/views.py
"""
STOREFRONT SESSION CART API

- GET    /api/storefront/cart/                    current cart + quote
- DELETE /api/storefront/cart/                    clear
- POST   /api/storefront/cart/items/              add {productId, quantity}
- PATCH  /api/storefront/cart/items/<product_id>/ set quantity (<= 0 removes)
- DELETE /api/storefront/cart/items/<product_id>/ remove
- POST   /api/storefront/checkout/                submit the cart as an order

Rules:
- AllowAny; the cart lives in the shopper's session
- checkout with an empty cart answers 303 See Other -> cart view
- a successful checkout (created or replayed) clears the cart
"""

from __future__ import annotations

import logging

from django.urls import reverse
from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from orders.services import pricing
from orders.views.submission import PublicWriteThrottle, submit_order
from products.localization import resolve_locale
from products.models import Product
from storefront.cart import Cart, CartError, CartStockLimitError, SessionCartStorage
from storefront.serializers import (
    CartEntrySerializer,
    CartItemAddSerializer,
    CartQuantitySerializer,
    CheckoutSerializer,
)
from techmart.responses import error_response

logger = logging.getLogger(__name__)


def _cart_for(request) -> Cart:
    return Cart(SessionCartStorage(request.session))


def _cart_body(cart: Cart) -> dict:
    quote = pricing.quote(cart.totals())
    return {
        "items": CartEntrySerializer(cart.entries(), many=True).data,
        "itemCount": cart.item_count(),
        "subtotal": str(quote.subtotal),
        "tax": str(quote.tax),
        "shipping": str(quote.shipping),
        "total": str(quote.total),
    }


def _cart_error(exc: CartError):
    if isinstance(exc, CartStockLimitError):
        return error_response(
            code="CART_STOCK_LIMIT",
            message=str(exc),
            http_status=status.HTTP_400_BAD_REQUEST,
            available=exc.available,
        )
    return error_response(
        code="CART_ERROR",
        message=str(exc),
        http_status=status.HTTP_400_BAD_REQUEST,
    )


class StorefrontView(APIView):
    permission_classes = [AllowAny]


class CartView(StorefrontView):
    @extend_schema(responses={200: OpenApiResponse(description="Current cart")})
    def get(self, request):
        return Response(_cart_body(_cart_for(request)))

    @extend_schema(responses={200: OpenApiResponse(description="Emptied cart")})
    def delete(self, request):
        cart = _cart_for(request)
        cart.clear()
        return Response(_cart_body(cart))


class CartItemsView(StorefrontView):
    @extend_schema(request=CartItemAddSerializer, responses={200: OpenApiResponse(description="Updated cart")})
    def post(self, request):
        ser = CartItemAddSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        product = Product.objects.filter(pk=ser.validated_data["productId"], is_active=True).first()
        if product is None:
            return error_response(
                code="NOT_FOUND",
                message="Product not found",
                http_status=status.HTTP_404_NOT_FOUND,
            )

        cart = _cart_for(request)
        try:
            cart.add(
                product,
                ser.validated_data["quantity"],
                name=product.localized_name(resolve_locale(request)),
            )
        except CartError as exc:
            return _cart_error(exc)

        return Response(_cart_body(cart))


class CartItemDetailView(StorefrontView):
    @extend_schema(request=CartQuantitySerializer, responses={200: OpenApiResponse(description="Updated cart")})
    def patch(self, request, product_id):
        ser = CartQuantitySerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        cart = _cart_for(request)
        if cart.get(product_id) is None:
            return error_response(
                code="NOT_FOUND",
                message="Item is not in the cart",
                http_status=status.HTTP_404_NOT_FOUND,
            )

        try:
            cart.set_quantity(product_id, ser.validated_data["quantity"])
        except CartError as exc:
            return _cart_error(exc)

        return Response(_cart_body(cart))

    @extend_schema(responses={200: OpenApiResponse(description="Updated cart")})
    def delete(self, request, product_id):
        cart = _cart_for(request)
        cart.remove(product_id)
        return Response(_cart_body(cart))


class CheckoutView(StorefrontView):
    throttle_classes = [PublicWriteThrottle]

    @extend_schema(
        request=CheckoutSerializer,
        responses={
            201: OpenApiResponse(description="Order created"),
            200: OpenApiResponse(description="Idempotent replay"),
            303: OpenApiResponse(description="Cart is empty; see the cart view"),
            400: OpenApiResponse(description="Order rejected"),
            409: OpenApiResponse(description="Idempotency conflict"),
        },
    )
    def post(self, request):
        cart = _cart_for(request)
        if cart.is_empty():
            return Response(
                {"detail": "Cart is empty"},
                status=status.HTTP_303_SEE_OTHER,
                headers={"Location": reverse("storefront:cart")},
            )

        data = request.data if hasattr(request.data, "get") else {}
        total = data.get("totalAmount")
        if total in (None, ""):
            total = str(pricing.quote(cart.totals()).total)

        payload = {
            "items": cart.to_order_items(),
            "customerInfo": data.get("customerInfo"),
            "totalAmount": total,
            "notes": data.get("notes") or "",
            "idempotencyKey": data.get("idempotencyKey") or "",
        }

        response = submit_order(request, payload)

        if response.status_code in (status.HTTP_200_OK, status.HTTP_201_CREATED):
            cart.clear()
            logger.info("Cart checked out", extra={"order_id": response.data.get("orderId")})

        return response
