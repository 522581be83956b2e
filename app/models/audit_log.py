"""Append-only audit log of administrative actions."""

from datetime import datetime, timezone

from sqlalchemy import DateTime, Index, String, Text, event
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base

AUDIT_ACTIONS = ("APPROVE_AGENT", "REJECT_AGENT", "SUSPEND_USER", "BAN_USER", "REACTIVATE_USER", "CREATE_ADMIN")
AUDIT_TARGET_TYPES = ("ACCOUNT", "AGENT_APPLICATION")


class AuditLog(Base):
    """Stores an immutable trail of account lifecycle actions."""

    __tablename__ = "audit_logs"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
    admin_id: Mapped[str] = mapped_column(String(36), nullable=False)
    admin_email: Mapped[str] = mapped_column(String(255), nullable=False)
    action: Mapped[str] = mapped_column(String(32), nullable=False)
    target_type: Mapped[str] = mapped_column(String(32), nullable=False)
    target_id: Mapped[str] = mapped_column(String(36), nullable=False)
    reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    ip_address: Mapped[str | None] = mapped_column(String(64), nullable=True)
    user_agent: Mapped[str | None] = mapped_column(String(512), nullable=True)

    __table_args__ = (
        Index("ix_audit_logs_created_at_id", "created_at", "id"),
        Index("ix_audit_logs_target", "target_type", "target_id"),
    )


@event.listens_for(AuditLog, "before_update")
def _reject_audit_update(mapper, connection, target: AuditLog) -> None:
    raise ValueError(f"Audit log entry {target.id} is immutable")


@event.listens_for(AuditLog, "before_delete")
def _reject_audit_delete(mapper, connection, target: AuditLog) -> None:
    raise ValueError(f"Audit log entry {target.id} cannot be deleted")
