"""Admin account management (super admin only for creation)."""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.api.deps import get_admin_actor
from app.db.session import get_db
from app.schemas.account import AccountRead, AdminCreate
from app.services.account_service import create_admin, list_admins
from app.services.lifecycle_types import ActorContext

router: APIRouter = APIRouter()


@router.get("", response_model=list[AccountRead])
def get_admins(
    db: Session = Depends(get_db),
    actor: ActorContext = Depends(get_admin_actor),
) -> list[AccountRead]:
    return [AccountRead.model_validate(admin) for admin in list_admins(db)]


@router.post("", response_model=AccountRead, status_code=status.HTTP_201_CREATED)
def post_admin(
    payload: AdminCreate,
    db: Session = Depends(get_db),
    actor: ActorContext = Depends(get_admin_actor),
) -> AccountRead:
    try:
        admin = create_admin(
            db,
            actor,
            email=payload.email,
            password=payload.password,
            full_name=payload.full_name,
            phone_number=payload.phone_number,
        )
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return AccountRead.model_validate(admin)
