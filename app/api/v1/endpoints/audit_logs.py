"""Audit log query endpoint."""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.api.deps import get_admin_actor
from app.core.config import settings
from app.db.session import get_db
from app.schemas.audit import AuditLogPage, AuditLogRead
from app.services.audit_service import build_pagination
from app.services.lifecycle_store import SqlAlchemyLifecycleStore
from app.services.lifecycle_types import ActorContext, AuditFilters

router: APIRouter = APIRouter()


@router.get("", response_model=AuditLogPage)
def get_audit_logs(
    admin_email: str | None = Query(default=None),
    action: str | None = Query(default=None),
    target: str | None = Query(default=None),
    search: str | None = Query(default=None),
    page: int = Query(default=1, ge=1),
    page_size: int = Query(default=settings.audit_page_size, ge=1, le=settings.audit_max_page_size),
    db: Session = Depends(get_db),
    actor: ActorContext = Depends(get_admin_actor),
) -> AuditLogPage:
    """Newest-first audit entries, filtered by actor, action, target and free text."""
    filters = AuditFilters(admin_email=admin_email, action=action, target=target, search=search)
    result = SqlAlchemyLifecycleStore(db).query_audit_log(filters, build_pagination(page, page_size))
    return AuditLogPage(
        items=[AuditLogRead.model_validate(entry) for entry in result.items],
        total=result.total,
        page=result.page,
        page_size=result.page_size,
        total_pages=result.total_pages,
    )
