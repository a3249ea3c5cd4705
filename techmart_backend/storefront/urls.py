# storefront/urls.py

from django.urls import path

from storefront.views import CartItemDetailView, CartItemsView, CartView, CheckoutView

app_name = "storefront"

urlpatterns = [
    path("cart/", CartView.as_view(), name="cart"),
    path("cart/items/", CartItemsView.as_view(), name="cart-items"),
    path("cart/items/<int:product_id>/", CartItemDetailView.as_view(), name="cart-item"),
    path("checkout/", CheckoutView.as_view(), name="checkout"),
]
