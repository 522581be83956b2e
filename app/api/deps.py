"""Shared FastAPI dependencies for lifecycle endpoints."""

from fastapi import Depends
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.security import get_actor_context
from app.db.session import get_db
from app.schemas.transition import TransitionResponse
from app.services.lifecycle_service import LifecycleManager
from app.services.lifecycle_store import SqlAlchemyLifecycleStore
from app.services.lifecycle_types import ActorContext, TransitionResult
from app.services.security_guards import ensure_admin


def get_lifecycle_manager(db: Session = Depends(get_db)) -> LifecycleManager:
    return LifecycleManager(
        SqlAlchemyLifecycleStore(db),
        default_timeout=settings.persistence_timeout_seconds,
    )


def get_admin_actor(actor: ActorContext = Depends(get_actor_context)) -> ActorContext:
    """Actor for admin-only routes; non-admins get ``Unauthorized``."""
    ensure_admin(actor)
    return actor


def to_transition_response(result: TransitionResult) -> TransitionResponse:
    return TransitionResponse(
        target_type=result.target.target_type,
        target_id=result.target.id,
        action=result.action,
        previous_status=result.previous_status,
        new_status=result.new_status,
        account_id=result.account_id,
        account_status=result.account_status,
        audit_entry_id=result.audit_entry_id,
    )
