"""Value types passed between callers, the lifecycle manager and storage."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from math import ceil
from typing import Union


@dataclass(frozen=True)
class ActorContext:
    """Authenticated administrator performing an action.

    Passed explicitly into every lifecycle call; the core never looks up the
    current user on its own.
    """

    admin_id: str
    email: str
    role: str
    ip_address: str | None = None
    user_agent: str | None = None


@dataclass(frozen=True)
class AccountTarget:
    id: str
    target_type: str = field(default="ACCOUNT", init=False)


@dataclass(frozen=True)
class ApplicationTarget:
    id: str
    target_type: str = field(default="AGENT_APPLICATION", init=False)


Target = Union[AccountTarget, ApplicationTarget]


@dataclass(frozen=True)
class AccountSnapshot:
    id: str
    role: str
    email: str | None
    status: str
    status_version: int


@dataclass(frozen=True)
class ApplicationSnapshot:
    id: str
    account_id: str
    approval_status: str
    status_version: int
    account: AccountSnapshot


@dataclass(frozen=True)
class StatusChange:
    """Status writes for one transition, guarded by expected versions."""

    account_id: str
    account_status: str
    account_version: int
    application_id: str | None = None
    application_status: str | None = None
    application_version: int | None = None
    rejection_reason: str | None = None
    reviewed_by_id: str | None = None
    reviewed_at: datetime | None = None


@dataclass(frozen=True)
class AuditDraft:
    admin_id: str
    admin_email: str
    action: str
    target_type: str
    target_id: str
    created_at: datetime
    reason: str | None = None
    notes: str | None = None
    ip_address: str | None = None
    user_agent: str | None = None


@dataclass(frozen=True)
class TransitionResult:
    target: Target
    action: str
    previous_status: str
    new_status: str
    account_id: str
    account_status: str
    audit_entry_id: int


@dataclass(frozen=True)
class AuditFilters:
    admin_email: str | None = None
    action: str | None = None
    target: str | None = None
    search: str | None = None


@dataclass(frozen=True)
class Pagination:
    page: int
    page_size: int

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size


@dataclass(frozen=True)
class AuditPage:
    items: list
    total: int
    page: int
    page_size: int

    @property
    def total_pages(self) -> int:
        return ceil(self.total / self.page_size) if self.total else 0
