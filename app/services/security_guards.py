"""Centralized privilege checks for lifecycle and admin operations."""

from __future__ import annotations

from app.models.account import ADMIN_ROLES
from app.services.lifecycle_errors import Unauthorized
from app.services.lifecycle_types import AccountSnapshot, ActorContext


def ensure_role(actor: ActorContext, allowed_roles: set[str] | frozenset[str]) -> None:
    """Ensure actor role is one of allowed roles."""
    if actor.role not in allowed_roles:
        raise Unauthorized(f"Role {actor.role} may not perform this action", role=actor.role)


def ensure_admin(actor: ActorContext) -> None:
    ensure_role(actor, ADMIN_ROLES)


def ensure_super_admin(actor: ActorContext) -> None:
    ensure_role(actor, {"SUPER_ADMIN"})


def ensure_can_manage_account(actor: ActorContext, account: AccountSnapshot) -> None:
    """Admins manage traders, agents and buyers; only super admins manage admins."""
    if account.id == actor.admin_id:
        raise Unauthorized("Administrators cannot change the status of their own account", target_id=account.id)
    if account.role in ADMIN_ROLES and actor.role != "SUPER_ADMIN":
        raise Unauthorized("Only a super admin can change an admin account", target_id=account.id)
