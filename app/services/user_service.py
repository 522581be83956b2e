"""Account and agent read operations for the admin dashboard."""

from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session, selectinload

from app.models import Account, AgentApplication
from app.models.account import ACCOUNT_STATUSES, normalize_account_role
from app.services.status_projection import (
    count_by_projected_status,
    filter_by_projected_status,
    normalize_projected_status,
)


def get_account_by_id(db: Session, account_id: str) -> Account | None:
    return db.get(Account, account_id)


def get_agent_application(db: Session, application_id: str) -> AgentApplication | None:
    return db.scalar(
        select(AgentApplication)
        .options(selectinload(AgentApplication.account))
        .where(AgentApplication.id == application_id)
        .limit(1)
    )


def count_traders_registered(db: Session, agent_account_id: str) -> int:
    """Traders registered in the field by the given agent account."""
    return db.scalar(
        select(func.count())
        .select_from(Account)
        .where(Account.registered_by_agent_id == agent_account_id, Account.role == "TRADER")
    ) or 0


def list_accounts(
    db: Session,
    *,
    role: str | None = None,
    status: str | None = None,
    search: str | None = None,
    page: int = 1,
    page_size: int = 50,
) -> tuple[list[Account], int]:
    """Return one page of accounts filtered by stored role/status and a name/contact search."""
    stmt = select(Account)
    count_stmt = select(func.count()).select_from(Account)
    conditions = []
    if role:
        conditions.append(Account.role == normalize_account_role(role))
    if status:
        canonical_status = status.strip().upper()
        if canonical_status not in ACCOUNT_STATUSES:
            raise ValueError(f"Unknown account status: {status}")
        conditions.append(Account.status == canonical_status)
    if search and search.strip():
        pattern = f"%{search.strip().lower()}%"
        conditions.append(
            or_(
                func.lower(Account.full_name).like(pattern),
                func.lower(func.coalesce(Account.email, "")).like(pattern),
                func.coalesce(Account.phone_number, "").like(pattern),
            )
        )
    for condition in conditions:
        stmt = stmt.where(condition)
        count_stmt = count_stmt.where(condition)

    total = db.scalar(count_stmt) or 0
    items = db.scalars(
        stmt.order_by(Account.created_at.desc(), Account.id.asc()).offset((page - 1) * page_size).limit(page_size)
    ).all()
    return list(items), total


def list_agents(
    db: Session,
    *,
    status: str | None = None,
    page: int = 1,
    page_size: int = 50,
) -> tuple[list[Account], int]:
    """Agent accounts filtered by projected status, computed fresh for this query."""
    normalize_projected_status(status)
    agents = db.scalars(
        select(Account)
        .options(selectinload(Account.agent_application))
        .where(Account.role == "AGENT")
        .order_by(Account.created_at.desc(), Account.id.asc())
    ).all()
    matching = filter_by_projected_status(agents, status)
    start = (page - 1) * page_size
    return matching[start:start + page_size], len(matching)


def lifecycle_stats(db: Session) -> dict[str, object]:
    """Counts shown on the dashboard landing page."""
    rows = db.execute(select(Account.role, Account.status, func.count()).group_by(Account.role, Account.status)).all()
    by_role: dict[str, dict[str, int]] = {}
    for role, status, count in rows:
        by_role.setdefault(role, {state: 0 for state in ACCOUNT_STATUSES})[status] = count

    agents = db.scalars(
        select(Account).options(selectinload(Account.agent_application)).where(Account.role == "AGENT")
    ).all()
    agent_counts = count_by_projected_status(agents)
    return {
        "accounts_by_role": by_role,
        "agents_by_status": agent_counts,
        "pending_agent_applications": agent_counts["PENDING"],
        "total_accounts": sum(sum(states.values()) for states in by_role.values()),
    }
