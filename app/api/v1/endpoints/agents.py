"""Agent approval endpoints.

Approve/reject address the agent *application* id. Suspend/ban/reactivate
of an agent go through the users endpoints with the agent's account id.
"""

from math import ceil

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from app.api.deps import get_admin_actor, get_lifecycle_manager, to_transition_response
from app.core.config import settings
from app.db.session import get_db
from app.models import Account
from app.schemas.account import AccountRead, AgentApplicationRead, AgentPage, AgentRead
from app.schemas.transition import TransitionRequest, TransitionResponse
from app.services.lifecycle_service import LifecycleManager
from app.services.lifecycle_types import ActorContext, ApplicationTarget
from app.services.status_projection import project_account
from app.services.user_service import count_traders_registered, get_agent_application, list_agents

router: APIRouter = APIRouter()


def _serialize_agent(db: Session, account: Account) -> AgentRead:
    application = account.agent_application
    return AgentRead(
        account=AccountRead.model_validate(account),
        application=AgentApplicationRead.model_validate(application) if application is not None else None,
        status=project_account(account),
        traders_registered=count_traders_registered(db, account.id),
    )


@router.get("", response_model=AgentPage)
def get_agents(
    status_filter: str | None = Query(default=None, alias="status"),
    page: int = Query(default=1, ge=1),
    page_size: int = Query(default=settings.audit_page_size, ge=1, le=settings.audit_max_page_size),
    db: Session = Depends(get_db),
    actor: ActorContext = Depends(get_admin_actor),
) -> AgentPage:
    try:
        agents, total = list_agents(db, status=status_filter, page=page, page_size=page_size)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return AgentPage(
        items=[_serialize_agent(db, agent) for agent in agents],
        total=total,
        page=page,
        page_size=page_size,
        total_pages=ceil(total / page_size) if total else 0,
    )


@router.get("/pending", response_model=AgentPage)
def get_pending_agents(
    page: int = Query(default=1, ge=1),
    page_size: int = Query(default=settings.audit_page_size, ge=1, le=settings.audit_max_page_size),
    db: Session = Depends(get_db),
    actor: ActorContext = Depends(get_admin_actor),
) -> AgentPage:
    """Agents awaiting an approval decision."""
    return get_agents(status_filter="PENDING", page=page, page_size=page_size, db=db, actor=actor)


@router.get("/active", response_model=AgentPage)
def get_active_agents(
    page: int = Query(default=1, ge=1),
    page_size: int = Query(default=settings.audit_page_size, ge=1, le=settings.audit_max_page_size),
    db: Session = Depends(get_db),
    actor: ActorContext = Depends(get_admin_actor),
) -> AgentPage:
    """Approved agents whose accounts are active."""
    return get_agents(status_filter="APPROVED", page=page, page_size=page_size, db=db, actor=actor)


@router.get("/{application_id}", response_model=AgentRead)
def get_agent(
    application_id: str,
    db: Session = Depends(get_db),
    actor: ActorContext = Depends(get_admin_actor),
) -> AgentRead:
    application = get_agent_application(db, application_id)
    if application is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Agent application not found")
    return _serialize_agent(db, application.account)


@router.post("/{application_id}/approve", response_model=TransitionResponse)
def approve_agent(
    application_id: str,
    payload: TransitionRequest | None = None,
    manager: LifecycleManager = Depends(get_lifecycle_manager),
    actor: ActorContext = Depends(get_admin_actor),
) -> TransitionResponse:
    payload = payload or TransitionRequest()
    result = manager.apply_transition(
        actor, ApplicationTarget(application_id), "approve", payload.reason, notes=payload.notes
    )
    return to_transition_response(result)


@router.post("/{application_id}/reject", response_model=TransitionResponse)
def reject_agent(
    application_id: str,
    payload: TransitionRequest | None = None,
    manager: LifecycleManager = Depends(get_lifecycle_manager),
    actor: ActorContext = Depends(get_admin_actor),
) -> TransitionResponse:
    payload = payload or TransitionRequest()
    result = manager.apply_transition(
        actor, ApplicationTarget(application_id), "reject", payload.reason, notes=payload.notes
    )
    return to_transition_response(result)
