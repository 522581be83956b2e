from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from app.db.base import Base
from app.models import AuditLog
from app.services.audit_service import build_audit_log, build_pagination, log_action, query_audit_log
from app.services.lifecycle_store import SqlAlchemyLifecycleStore
from app.services.lifecycle_types import ActorContext, AuditDraft, AuditFilters, Pagination

BASE_TIME = datetime(2025, 3, 1, 9, 0, tzinfo=timezone.utc)


def _build_session_local() -> sessionmaker:
    engine = create_engine("sqlite+pysqlite:///:memory:", future=True)
    Base.metadata.create_all(bind=engine)
    return sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)


def _add_entry(db: Session, minutes: int, **overrides) -> AuditLog:
    values = {
        "admin_id": "admin-1",
        "admin_email": "ops@takeam.ng",
        "action": "SUSPEND_USER",
        "target_type": "ACCOUNT",
        "target_id": "acct-1",
        "created_at": BASE_TIME + timedelta(minutes=minutes),
    }
    values.update(overrides)
    entry = build_audit_log(AuditDraft(**values))
    db.add(entry)
    db.flush()
    return entry


def _seed(db: Session) -> None:
    _add_entry(db, 0, action="APPROVE_AGENT", target_type="AGENT_APPLICATION", target_id="app-7", reason="Approved by admin")
    _add_entry(db, 5, reason="Late deliveries", notes="Third warning this month")
    _add_entry(db, 10, action="BAN_USER", admin_email="Root@TakeAm.ng", reason="Fraud_ring 100%")
    _add_entry(db, 10, action="REACTIVATE_USER", target_id="acct-2", reason="Reactivated by admin")
    db.commit()


def test_entries_are_newest_first_with_id_tiebreak() -> None:
    session_local = _build_session_local()

    with session_local() as db:
        _seed(db)
        page = query_audit_log(db, AuditFilters(), Pagination(page=1, page_size=10))

    assert page.total == 4
    assert [entry.action for entry in page.items] == ["REACTIVATE_USER", "BAN_USER", "SUSPEND_USER", "APPROVE_AGENT"]
    assert page.total_pages == 1


def test_filters_are_case_insensitive_and_combine() -> None:
    session_local = _build_session_local()

    with session_local() as db:
        _seed(db)
        store = SqlAlchemyLifecycleStore(db)
        first_page = Pagination(page=1, page_size=10)

        by_admin = store.query_audit_log(AuditFilters(admin_email="root@"), first_page)
        assert [entry.action for entry in by_admin.items] == ["BAN_USER"]

        by_action = store.query_audit_log(AuditFilters(action=" approve_agent "), first_page)
        assert [entry.target_id for entry in by_action.items] == ["app-7"]

        by_target_type = store.query_audit_log(AuditFilters(target="agent_application"), first_page)
        assert by_target_type.total == 1

        by_target_id = store.query_audit_log(AuditFilters(target="ACCT-2"), first_page)
        assert [entry.action for entry in by_target_id.items] == ["REACTIVATE_USER"]

        by_notes = store.query_audit_log(AuditFilters(search="third WARNING"), first_page)
        assert [entry.reason for entry in by_notes.items] == ["Late deliveries"]

        combined = store.query_audit_log(AuditFilters(admin_email="ops@", target="acct-1"), first_page)
        assert [entry.action for entry in combined.items] == ["SUSPEND_USER"]


def test_like_wildcards_in_filters_are_literal() -> None:
    session_local = _build_session_local()

    with session_local() as db:
        _seed(db)
        first_page = Pagination(page=1, page_size=10)

        assert query_audit_log(db, AuditFilters(search="100%"), first_page).total == 1
        assert query_audit_log(db, AuditFilters(search="fraud_ring"), first_page).total == 1
        assert query_audit_log(db, AuditFilters(search="%"), first_page).total == 1
        assert query_audit_log(db, AuditFilters(search="_"), first_page).total == 1


def test_pagination_slices_and_counts() -> None:
    session_local = _build_session_local()

    with session_local() as db:
        _seed(db)
        second = query_audit_log(db, AuditFilters(), build_pagination(page=2, page_size=3))
        beyond = query_audit_log(db, AuditFilters(), build_pagination(page=5, page_size=3))

    assert (second.total, second.total_pages, second.page) == (4, 2, 2)
    assert [entry.action for entry in second.items] == ["APPROVE_AGENT"]
    assert beyond.items == []
    assert beyond.total == 4


@pytest.mark.parametrize(("page", "page_size"), [(0, 10), (-1, 10), (1, 0), (1, 101)])
def test_build_pagination_rejects_out_of_range(page: int, page_size: int) -> None:
    with pytest.raises(ValueError):
        build_pagination(page=page, page_size=page_size)


def test_build_pagination_uses_configured_default() -> None:
    pagination = build_pagination()

    assert (pagination.page, pagination.page_size, pagination.offset) == (1, 50, 0)


def test_log_action_stages_entry_without_committing() -> None:
    session_local = _build_session_local()
    actor = ActorContext(admin_id="root-1", email="root@takeam.ng", role="SUPER_ADMIN", user_agent="pytest")

    with session_local() as db:
        entry = log_action(db, actor=actor, action="CREATE_ADMIN", target_type="ACCOUNT", target_id="acct-9")
        assert entry in db.new
        db.rollback()
        assert query_audit_log(db, AuditFilters(), Pagination(page=1, page_size=10)).total == 0

        with pytest.raises(ValueError, match="Unknown audit action"):
            log_action(db, actor=actor, action="DELETE_USER", target_type="ACCOUNT", target_id="acct-9")


def test_audit_entries_cannot_be_updated_or_deleted() -> None:
    session_local = _build_session_local()

    with session_local() as db:
        entry = _add_entry(db, 0, reason="Late deliveries")
        db.commit()

        entry.reason = "edited"
        with pytest.raises(ValueError, match="immutable"):
            db.commit()
        db.rollback()

        db.delete(entry)
        with pytest.raises(ValueError, match="cannot be deleted"):
            db.commit()
        db.rollback()

        assert db.get(AuditLog, entry.id).reason == "Late deliveries"
