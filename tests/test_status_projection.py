"""Projected list status for agents and users."""

from types import SimpleNamespace

import pytest

from app.services.status_projection import (
    count_by_projected_status,
    filter_by_projected_status,
    project_status,
)


def _account(status: str, approval: str | None = None) -> SimpleNamespace:
    application = SimpleNamespace(approval_status=approval) if approval is not None else None
    return SimpleNamespace(status=status, agent_application=application)


@pytest.mark.parametrize("account_status", ["PENDING", "ACTIVE", "SUSPENDED", "BANNED"])
def test_pending_application_wins_regardless_of_account(account_status: str) -> None:
    assert project_status(account_status, "PENDING") == "PENDING"


def test_active_account_without_pending_application_is_approved() -> None:
    assert project_status("ACTIVE") == "APPROVED"
    assert project_status("ACTIVE", "APPROVED") == "APPROVED"


def test_other_states_pass_through() -> None:
    assert project_status("SUSPENDED", "APPROVED") == "SUSPENDED"
    assert project_status("BANNED") == "BANNED"
    assert project_status("PENDING") == "PENDING"


def test_rejected_application_on_pending_account_is_rejected() -> None:
    assert project_status("PENDING", "REJECTED") == "REJECTED"


def test_filter_and_count_helpers() -> None:
    accounts = [
        _account("PENDING", "PENDING"),
        _account("ACTIVE", "APPROVED"),
        _account("PENDING", "REJECTED"),
        _account("SUSPENDED", "APPROVED"),
        _account("ACTIVE"),
    ]

    assert len(filter_by_projected_status(accounts, "approved")) == 2
    assert filter_by_projected_status(accounts, None) == accounts
    assert count_by_projected_status(accounts) == {
        "PENDING": 1,
        "APPROVED": 2,
        "REJECTED": 1,
        "SUSPENDED": 1,
        "BANNED": 0,
    }
    with pytest.raises(ValueError):
        filter_by_projected_status(accounts, "deleted")
