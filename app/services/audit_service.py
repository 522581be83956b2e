"""Audit log helpers."""

from __future__ import annotations

from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session

from app.core.config import settings
from app.models import AuditLog
from app.models.audit_log import AUDIT_ACTIONS
from app.services.lifecycle_types import ActorContext, AuditDraft, AuditFilters, AuditPage, Pagination
from app.utils.time import utc_now


def build_audit_log(draft: AuditDraft) -> AuditLog:
    return AuditLog(
        created_at=draft.created_at,
        admin_id=draft.admin_id,
        admin_email=draft.admin_email,
        action=draft.action,
        target_type=draft.target_type,
        target_id=draft.target_id,
        reason=draft.reason,
        notes=draft.notes,
        ip_address=draft.ip_address,
        user_agent=draft.user_agent,
    )


def log_action(
    db: Session,
    *,
    actor: ActorContext,
    action: str,
    target_type: str,
    target_id: str,
    reason: str | None = None,
    notes: str | None = None,
) -> AuditLog:
    """Stage an audit entry in the caller's transaction; the caller commits."""
    if action not in AUDIT_ACTIONS:
        raise ValueError(f"Unknown audit action: {action}")
    entry = build_audit_log(
        AuditDraft(
            admin_id=actor.admin_id,
            admin_email=actor.email,
            action=action,
            target_type=target_type,
            target_id=target_id,
            created_at=utc_now(),
            reason=reason,
            notes=notes,
            ip_address=actor.ip_address,
            user_agent=actor.user_agent,
        )
    )
    db.add(entry)
    return entry


def build_pagination(page: int = 1, page_size: int | None = None) -> Pagination:
    """Validate page parameters against configured limits."""
    size = settings.audit_page_size if page_size is None else page_size
    if page < 1:
        raise ValueError("page must be >= 1")
    if size < 1 or size > settings.audit_max_page_size:
        raise ValueError(f"page_size must be between 1 and {settings.audit_max_page_size}")
    return Pagination(page=page, page_size=size)


def _contains(value: str) -> str:
    escaped = value.strip().lower().replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def query_audit_log(db: Session, filters: AuditFilters, pagination: Pagination) -> AuditPage:
    """Return one page of audit entries, newest first."""
    conditions = []
    if filters.admin_email and filters.admin_email.strip():
        conditions.append(func.lower(AuditLog.admin_email).like(_contains(filters.admin_email), escape="\\"))
    if filters.action and filters.action.strip():
        conditions.append(AuditLog.action == filters.action.strip().upper())
    if filters.target and filters.target.strip():
        pattern = _contains(filters.target)
        conditions.append(
            or_(
                func.lower(AuditLog.target_type).like(pattern, escape="\\"),
                func.lower(AuditLog.target_id).like(pattern, escape="\\"),
            )
        )
    if filters.search and filters.search.strip():
        pattern = _contains(filters.search)
        conditions.append(
            or_(
                func.lower(func.coalesce(AuditLog.reason, "")).like(pattern, escape="\\"),
                func.lower(func.coalesce(AuditLog.notes, "")).like(pattern, escape="\\"),
            )
        )

    count_stmt = select(func.count()).select_from(AuditLog)
    items_stmt = select(AuditLog)
    for condition in conditions:
        count_stmt = count_stmt.where(condition)
        items_stmt = items_stmt.where(condition)

    total = db.scalar(count_stmt) or 0
    items = db.scalars(
        items_stmt.order_by(AuditLog.created_at.desc(), AuditLog.id.desc())
        .offset(pagination.offset)
        .limit(pagination.page_size)
    ).all()
    return AuditPage(items=list(items), total=total, page=pagination.page, page_size=pagination.page_size)
