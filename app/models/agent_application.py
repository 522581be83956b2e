"""Approval record for field agents."""

from datetime import datetime, timezone
from uuid import uuid4

from sqlalchemy import DateTime, Enum, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base

IDENTITY_TYPES = ("NIN", "BVN", "PASSPORT")
APPROVAL_STATUSES = ("PENDING", "APPROVED", "REJECTED")


class AgentApplication(Base):
    """One-to-one extension of an AGENT account tracking its approval."""

    __tablename__ = "agent_applications"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid4()))
    account_id: Mapped[str] = mapped_column(ForeignKey("accounts.id"), nullable=False, unique=True)
    territory_id: Mapped[str] = mapped_column(String(64), nullable=False)
    identity_type: Mapped[str] = mapped_column(Enum(*IDENTITY_TYPES, name="identity_type"), nullable=False)
    identity_number: Mapped[str] = mapped_column(String(64), nullable=False)
    identity_document_url: Mapped[str | None] = mapped_column(String(512), nullable=True)
    approval_status: Mapped[str] = mapped_column(
        Enum(*APPROVAL_STATUSES, name="approval_status"),
        nullable=False,
        default="PENDING",
    )
    status_version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    rejection_reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    reviewed_by_id: Mapped[str | None] = mapped_column(ForeignKey("accounts.id"), nullable=True)
    reviewed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))

    account: Mapped["Account"] = relationship(back_populates="agent_application", foreign_keys=[account_id])
