"""Generic transition endpoint accepting both agent identifiers."""

from fastapi import APIRouter, Depends

from app.api.deps import get_admin_actor, get_lifecycle_manager, to_transition_response
from app.schemas.transition import TransitionCommand, TransitionResponse
from app.services.lifecycle_service import LifecycleManager, resolve_target
from app.services.lifecycle_types import ActorContext

router: APIRouter = APIRouter()


@router.post("", response_model=TransitionResponse)
def apply_transition(
    payload: TransitionCommand,
    manager: LifecycleManager = Depends(get_lifecycle_manager),
    actor: ActorContext = Depends(get_admin_actor),
) -> TransitionResponse:
    target = resolve_target(payload.action, account_id=payload.account_id, application_id=payload.application_id)
    result = manager.apply_transition(actor, target, payload.action, payload.reason, notes=payload.notes)
    return to_transition_response(result)
