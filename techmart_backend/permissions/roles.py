# permissions/roles.py

from __future__ import annotations

from rest_framework.permissions import BasePermission

from users.models import Role


# =========================================================
# ROLE CONSTANTS
# =========================================================
# Closed set: every authenticated session carries exactly one of these.
ROLE_USER = Role.USER
ROLE_ADMIN = Role.ADMIN


# =========================================================
# CAPABILITIES (THE REAL PERMISSION LANGUAGE)
# =========================================================
# Views should protect capabilities, not raw roles.
CAP_CATALOG_EDIT = "catalog.edit"
CAP_ORDERS_VIEW_ALL = "orders.view_all"
CAP_ORDERS_MANAGE = "orders.manage"
CAP_USERS_MANAGE = "users.manage"

ALL_CAPABILITIES = {
    CAP_CATALOG_EDIT,
    CAP_ORDERS_VIEW_ALL,
    CAP_ORDERS_MANAGE,
    CAP_USERS_MANAGE,
}


# =========================================================
# ROLE → CAPABILITY MAP
# =========================================================
ROLE_CAPABILITIES: dict[str, set[str]] = {
    ROLE_ADMIN: {
        *ALL_CAPABILITIES,
    },
    # shoppers only ever act on their own orders and cart
    ROLE_USER: set(),
}


# =========================================================
# Helpers
# =========================================================
def get_user_role(user) -> str | None:
    if not user or not getattr(user, "is_authenticated", False):
        return None
    return getattr(user, "role", None)


def is_admin(user) -> bool:
    return get_user_role(user) == ROLE_ADMIN


def effective_capabilities_for(user) -> set[str]:
    return set(ROLE_CAPABILITIES.get(get_user_role(user), set()))


# =========================================================
# Capability Permissions
# =========================================================
class HasCapability(BasePermission):
    """
    Require a specific capability.

    Usage:
        permission_classes = [IsAuthenticated, HasCapability]
        view.required_capability = CAP_ORDERS_MANAGE
    """

    message = "You do not have permission to perform this action."

    def has_permission(self, request, view):
        user = request.user
        if not user or not user.is_authenticated:
            return False

        required = getattr(view, "required_capability", None)
        if not required:
            # deny-by-default: a view that forgot to declare is not open
            return False

        return required in effective_capabilities_for(user)
