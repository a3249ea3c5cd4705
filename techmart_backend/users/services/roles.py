"""
PATH: users/services/roles.py

USER ROLE MANAGEMENT

Rules:
- Only admins may change roles (enforced at the view boundary).
- Role must be one of the closed enumeration (user | admin).
- An admin may never change their own role, so the last admin cannot
  lock everyone out by demoting themselves.
"""

from __future__ import annotations

import logging

from django.db import transaction

from users.models import Role, User

logger = logging.getLogger(__name__)


class RoleChangeError(Exception):
    """Base error for role management."""


class SelfRoleChangeError(RoleChangeError):
    pass


class InvalidRoleError(RoleChangeError):
    pass


@transaction.atomic
def change_user_role(*, actor: User, target_id, role: str) -> User:
    if role not in Role.values:
        raise InvalidRoleError("Invalid role")

    target = User.objects.select_for_update().get(pk=target_id)

    if target.pk == actor.pk:
        raise SelfRoleChangeError("Cannot change your own role")

    previous = target.role
    target.role = role
    target.save(update_fields=["role", "updated_at"])

    logger.info(
        "User role changed",
        extra={
            "actor_id": str(actor.pk),
            "target_id": str(target.pk),
            "from_role": previous,
            "to_role": role,
        },
    )
    return target
