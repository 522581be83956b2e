"""Role normalization and validation for marketplace account registration."""

import pytest
from sqlalchemy import create_engine, select
from sqlalchemy.orm import Session

from app.db.base import Base
from app.models import Account, AgentApplication
from app.models.account import normalize_account_role
from app.services.account_service import register_account
from app.services.lifecycle_errors import DuplicateAccount


def _session() -> Session:
    engine = create_engine("sqlite+pysqlite:///:memory:", future=True)
    Base.metadata.create_all(bind=engine)
    return Session(engine)


def test_register_account_normalizes_lowercase_role() -> None:
    with _session() as session:
        account = register_account(session, role=" buyer ", full_name="Bola Buyer", email="bola@takeam.ng")

    assert account.role == "BUYER"
    assert account.status == "PENDING"
    assert account.status_version == 1


def test_register_account_rejects_unknown_role() -> None:
    with _session() as session:
        try:
            register_account(session, role="manager", full_name="Mo", email="mo@takeam.ng")
            assert False, "Expected ValueError for unknown role"
        except ValueError as exc:
            assert "Invalid role" in str(exc)


@pytest.mark.parametrize("role", ["admin", "SUPER_ADMIN"])
def test_admin_roles_cannot_self_register(role: str) -> None:
    with _session() as session:
        with pytest.raises(ValueError, match="cannot self-register"):
            register_account(session, role=role, full_name="Sneaky", email="sneaky@takeam.ng")
        assert session.scalars(select(Account)).all() == []


def test_normalize_account_role() -> None:
    assert normalize_account_role("trader") == "TRADER"
    assert normalize_account_role("Super_Admin") == "SUPER_ADMIN"
    with pytest.raises(ValueError):
        normalize_account_role("")


def test_contact_is_required() -> None:
    with _session() as session:
        with pytest.raises(ValueError, match="email or phone number"):
            register_account(session, role="TRADER", full_name="Nobody", email="  ", phone_number=None)


def test_agent_registration_creates_pending_application() -> None:
    with _session() as session:
        agent = register_account(
            session,
            role="agent",
            full_name="Ada Field",
            phone_number="+2348022222222",
            territory_id=" market-oshodi ",
            identity_type="passport",
            identity_number="A1234567",
            identity_document_url="https://files.takeam.ng/id/a1234567.jpg",
        )
        application = session.scalar(select(AgentApplication).where(AgentApplication.account_id == agent.id))

        assert agent.status == "PENDING"
        assert application is not None
        assert application.approval_status == "PENDING"
        assert application.identity_type == "PASSPORT"
        assert application.territory_id == "market-oshodi"
        assert application.id != agent.id


@pytest.mark.parametrize(
    ("identity_type", "territory_id", "message"),
    [
        ("DRIVERS_LICENSE", "market-oshodi", "Invalid identity type"),
        (None, "market-oshodi", "Invalid identity type"),
        ("NIN", "  ", "territory"),
    ],
)
def test_agent_registration_validates_identity(identity_type, territory_id, message: str) -> None:
    with _session() as session:
        with pytest.raises(ValueError, match=message):
            register_account(
                session,
                role="AGENT",
                full_name="Ada Field",
                email="ada@takeam.ng",
                territory_id=territory_id,
                identity_type=identity_type,
                identity_number="12345678901",
            )
        assert session.scalars(select(Account)).all() == []


def test_traders_need_no_application() -> None:
    with _session() as session:
        trader = register_account(session, role="TRADER", full_name="Tunde", phone_number="+2348033333333")
        assert trader.agent_application is None
        assert session.scalars(select(AgentApplication)).all() == []


def test_duplicate_contact_is_rejected() -> None:
    with _session() as session:
        register_account(session, role="TRADER", full_name="Tunde", email="tunde@takeam.ng", phone_number="+2348044444444")
        with pytest.raises(DuplicateAccount):
            register_account(session, role="BUYER", full_name="Other", phone_number="+2348044444444")
        with pytest.raises(DuplicateAccount):
            register_account(session, role="BUYER", full_name="Other", email="tunde@takeam.ng")
