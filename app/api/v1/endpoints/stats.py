"""Dashboard statistics endpoint."""

from typing import Any

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.deps import get_admin_actor
from app.db.session import get_db
from app.services.lifecycle_types import ActorContext
from app.services.user_service import lifecycle_stats

router: APIRouter = APIRouter()


@router.get("", summary="Account lifecycle counts")
def get_stats(
    db: Session = Depends(get_db),
    actor: ActorContext = Depends(get_admin_actor),
) -> dict[str, Any]:
    return lifecycle_stats(db)
