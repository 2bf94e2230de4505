"""Ownership and role rules for acting on user records."""

import logging
from collections.abc import Mapping
from typing import Any, Literal

from accounts.core.errors import Forbidden
from accounts.schemas.auth import CurrentUser

logger = logging.getLogger(__name__)

ADMIN_ROLE = "admin"

_DENIED_MESSAGES = {
    "update": "You can only update your own profile",
    "delete": "You can only delete your own account",
}


def is_admin(actor: CurrentUser) -> bool:
    return actor.role == ADMIN_ROLE


def ensure_can_modify(
    actor: CurrentUser,
    target_id: int,
    action: Literal["update", "delete"],
) -> None:
    """Allow acting on one's own record, or on any record as admin."""
    if actor.id != target_id and not is_admin(actor):
        logger.warning("Unauthorized %s attempt by %s for user %s", action, actor.id, target_id)
        raise Forbidden(_DENIED_MESSAGES[action])


def ensure_can_change_role(actor: CurrentUser, updates: Mapping[str, Any]) -> None:
    """A role change requires an admin actor, whoever the target is."""
    if updates.get("role") and not is_admin(actor):
        logger.warning("Non-admin %s attempted to change role", actor.id)
        raise Forbidden("Only admins can change user role")
