# orders/urls.py

from django.urls import path

from orders.views import OrderDetailView, OrderListCreateView, OrderStatusUpdateView

app_name = "orders"

urlpatterns = [
    path("", OrderListCreateView.as_view(), name="order-list"),
    path("<int:pk>/", OrderDetailView.as_view(), name="order-detail"),
    path("<int:pk>/status/", OrderStatusUpdateView.as_view(), name="order-status"),
]
