"""Storage collaborator for the account lifecycle manager."""

from __future__ import annotations

import logging
import time
from typing import Protocol

from sqlalchemy import text, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.models import Account, AgentApplication, AuditLog
from app.services.audit_service import build_audit_log, query_audit_log
from app.services.lifecycle_errors import PersistenceFailure, StaleStatusError
from app.services.lifecycle_types import (
    AccountSnapshot,
    ApplicationSnapshot,
    AuditDraft,
    AuditFilters,
    AuditPage,
    Pagination,
    StatusChange,
)

logger = logging.getLogger(__name__)


class LifecycleStore(Protocol):
    """Point lookups plus the atomic status-and-audit write."""

    def load_account_status(self, account_id: str) -> AccountSnapshot | None: ...

    def load_agent_application(self, application_id: str) -> ApplicationSnapshot | None: ...

    def write_status_and_audit(self, change: StatusChange, entry: AuditDraft, timeout: float | None = None) -> int: ...

    def query_audit_log(self, filters: AuditFilters, pagination: Pagination) -> AuditPage: ...


def _account_snapshot(account: Account) -> AccountSnapshot:
    return AccountSnapshot(
        id=account.id,
        role=account.role,
        email=account.email,
        status=account.status,
        status_version=account.status_version,
    )


class SqlAlchemyLifecycleStore:
    """LifecycleStore backed by a SQLAlchemy session.

    ``write_status_and_audit`` runs in a single transaction: status rows are
    updated with a compare-and-swap on ``status_version`` and the audit row is
    inserted before the commit. Any failure rolls the whole unit back.
    """

    def __init__(self, db: Session) -> None:
        self.db = db

    def load_account_status(self, account_id: str) -> AccountSnapshot | None:
        account = self.db.get(Account, account_id, populate_existing=True)
        if account is None:
            return None
        return _account_snapshot(account)

    def load_agent_application(self, application_id: str) -> ApplicationSnapshot | None:
        application = self.db.get(AgentApplication, application_id, populate_existing=True)
        if application is None:
            return None
        account = self.db.get(Account, application.account_id, populate_existing=True)
        return ApplicationSnapshot(
            id=application.id,
            account_id=application.account_id,
            approval_status=application.approval_status,
            status_version=application.status_version,
            account=_account_snapshot(account),
        )

    def write_status_and_audit(self, change: StatusChange, entry: AuditDraft, timeout: float | None = None) -> int:
        deadline = None if timeout is None else time.monotonic() + timeout
        try:
            self._apply_statement_timeout(timeout)
            self._update_account(change)
            if change.application_id is not None:
                self._update_application(change)
            audit = self._insert_audit(entry)
            audit_id = audit.id
            if deadline is not None and time.monotonic() > deadline:
                raise PersistenceFailure(
                    f"Timed out after {timeout}s writing {entry.action} for {entry.target_id}",
                    target=entry.target_id,
                )
            self.db.commit()
        except StaleStatusError:
            self.db.rollback()
            raise
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.exception("[LIFECYCLE] Status write failed for %s %s", entry.target_type, entry.target_id)
            raise PersistenceFailure(
                f"Could not record {entry.action} for {entry.target_id}; nothing was changed.",
                target=entry.target_id,
            ) from exc
        except Exception:
            self.db.rollback()
            raise
        return audit_id

    def query_audit_log(self, filters: AuditFilters, pagination: Pagination) -> AuditPage:
        return query_audit_log(self.db, filters, pagination)

    def _apply_statement_timeout(self, timeout: float | None) -> None:
        if timeout is None:
            return
        millis = max(int(timeout * 1000), 1)
        dialect = self.db.get_bind().dialect.name
        if dialect == "sqlite":
            self.db.execute(text(f"PRAGMA busy_timeout = {millis}"))
        elif dialect == "postgresql":
            self.db.execute(text(f"SET LOCAL statement_timeout = {millis}"))

    def _update_account(self, change: StatusChange) -> None:
        result = self.db.execute(
            update(Account)
            .where(Account.id == change.account_id, Account.status_version == change.account_version)
            .values(status=change.account_status, status_version=Account.status_version + 1)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            raise StaleStatusError(change.account_id)

    def _update_application(self, change: StatusChange) -> None:
        values = {
            "approval_status": change.application_status,
            "status_version": AgentApplication.status_version + 1,
            "reviewed_by_id": change.reviewed_by_id,
            "reviewed_at": change.reviewed_at,
            "rejection_reason": change.rejection_reason,
        }
        result = self.db.execute(
            update(AgentApplication)
            .where(
                AgentApplication.id == change.application_id,
                AgentApplication.status_version == change.application_version,
            )
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            raise StaleStatusError(change.application_id)

    def _insert_audit(self, entry: AuditDraft) -> AuditLog:
        audit = build_audit_log(entry)
        self.db.add(audit)
        self.db.flush()
        return audit
