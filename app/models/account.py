"""Account ORM model shared by traders, agents, buyers and admins."""

from datetime import datetime, timezone
from uuid import uuid4

from sqlalchemy import CheckConstraint, DateTime, Enum, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base

ACCOUNT_ROLES = ("TRADER", "AGENT", "ADMIN", "SUPER_ADMIN", "BUYER")
ADMIN_ROLES = frozenset({"ADMIN", "SUPER_ADMIN"})
ACCOUNT_STATUSES = ("PENDING", "ACTIVE", "SUSPENDED", "BANNED")


def normalize_account_role(role: str) -> str:
    """Return canonical upper-case role or raise for unknown values."""
    canonical = str(role or "").strip().upper()
    if canonical not in ACCOUNT_ROLES:
        raise ValueError(f"Invalid role: {role}")
    return canonical


class Account(Base):
    """A person on the marketplace together with their account standing."""

    __tablename__ = "accounts"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid4()))
    role: Mapped[str] = mapped_column(Enum(*ACCOUNT_ROLES, name="account_role"), nullable=False)
    full_name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True, unique=True, index=True)
    phone_number: Mapped[str | None] = mapped_column(String(32), nullable=True, unique=True)
    password_hash: Mapped[str | None] = mapped_column(String(255), nullable=True)
    status: Mapped[str] = mapped_column(Enum(*ACCOUNT_STATUSES, name="account_status"), nullable=False, default="PENDING")
    status_version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    market_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    registered_by_agent_id: Mapped[str | None] = mapped_column(ForeignKey("accounts.id"), nullable=True, index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
    last_login_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    agent_application: Mapped["AgentApplication | None"] = relationship(
        back_populates="account",
        uselist=False,
        foreign_keys="AgentApplication.account_id",
    )

    __table_args__ = (
        CheckConstraint("email IS NOT NULL OR phone_number IS NOT NULL", name="ck_accounts_contact_present"),
    )
