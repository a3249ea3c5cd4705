from .me import MeView
from .users import UserListView, UserRoleUpdateView

__all__ = [
    "MeView",
    "UserListView",
    "UserRoleUpdateView",
]
