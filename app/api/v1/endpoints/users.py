"""Trader/agent/buyer account endpoints, including standing changes."""

from math import ceil

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from app.api.deps import get_admin_actor, get_lifecycle_manager, to_transition_response
from app.core.config import settings
from app.db.session import get_db
from app.schemas.account import AccountPage, AccountRead
from app.schemas.transition import StatusUpdateRequest, TransitionRequest, TransitionResponse
from app.services.lifecycle_errors import UnknownAction
from app.services.lifecycle_service import LifecycleManager
from app.services.lifecycle_types import AccountTarget, ActorContext
from app.services.user_service import get_account_by_id, list_accounts

router: APIRouter = APIRouter()

ACTION_BY_TARGET_STATUS: dict[str, str] = {
    "SUSPENDED": "suspend",
    "BANNED": "ban",
    "ACTIVE": "reactivate",
}


@router.get("", response_model=AccountPage)
def get_users(
    role: str | None = Query(default=None),
    status_filter: str | None = Query(default=None, alias="status"),
    search: str | None = Query(default=None),
    page: int = Query(default=1, ge=1),
    page_size: int = Query(default=settings.audit_page_size, ge=1, le=settings.audit_max_page_size),
    db: Session = Depends(get_db),
    actor: ActorContext = Depends(get_admin_actor),
) -> AccountPage:
    try:
        accounts, total = list_accounts(
            db, role=role, status=status_filter, search=search, page=page, page_size=page_size
        )
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return AccountPage(
        items=[AccountRead.model_validate(account) for account in accounts],
        total=total,
        page=page,
        page_size=page_size,
        total_pages=ceil(total / page_size) if total else 0,
    )


@router.get("/{account_id}", response_model=AccountRead)
def get_user(
    account_id: str,
    db: Session = Depends(get_db),
    actor: ActorContext = Depends(get_admin_actor),
) -> AccountRead:
    account = get_account_by_id(db, account_id)
    if account is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Account not found")
    return AccountRead.model_validate(account)


@router.post("/{account_id}/{action}", response_model=TransitionResponse)
def change_user_standing(
    account_id: str,
    action: str,
    payload: TransitionRequest | None = None,
    manager: LifecycleManager = Depends(get_lifecycle_manager),
    actor: ActorContext = Depends(get_admin_actor),
) -> TransitionResponse:
    """Suspend, ban or reactivate an account by its account id."""
    payload = payload or TransitionRequest()
    result = manager.apply_transition(actor, AccountTarget(account_id), action, payload.reason, notes=payload.notes)
    return to_transition_response(result)


@router.put("/{account_id}/status", response_model=TransitionResponse)
def update_user_status(
    account_id: str,
    payload: StatusUpdateRequest,
    manager: LifecycleManager = Depends(get_lifecycle_manager),
    actor: ActorContext = Depends(get_admin_actor),
) -> TransitionResponse:
    action = ACTION_BY_TARGET_STATUS.get(payload.status.strip().upper())
    if action is None:
        raise UnknownAction(
            f"Cannot set status {payload.status!r}; use one of {', '.join(ACTION_BY_TARGET_STATUS)}",
            status=payload.status,
        )
    result = manager.apply_transition(actor, AccountTarget(account_id), action, payload.reason, notes=payload.notes)
    return to_transition_response(result)
