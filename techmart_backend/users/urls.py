# users/urls.py

from django.urls import path

from .views import MeView, UserListView, UserRoleUpdateView

app_name = "users"

urlpatterns = [
    # ---------------- AUTHENTICATED ----------------
    path("me/", MeView.as_view(), name="me"),
    # ---------------- ADMIN ----------------
    path("users/", UserListView.as_view(), name="user-list"),
    path("users/<uuid:pk>/role/", UserRoleUpdateView.as_view(), name="user-role"),
]
