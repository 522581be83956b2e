"""Transition table tests for account and agent application status."""

import pytest

from app.models.account import ACCOUNT_STATUSES
from app.models.agent_application import APPROVAL_STATUSES
from app.services.account_status import (
    LIFECYCLE_ACTIONS,
    allowed_account_actions,
    can_transition_account,
    can_transition_application,
    clean_reason,
    next_account_status,
    normalize_action,
    reason_required,
)

LEGAL_ACCOUNT_MOVES = {
    ("PENDING", "approve"): "ACTIVE",
    ("PENDING", "reject"): "PENDING",
    ("ACTIVE", "suspend"): "SUSPENDED",
    ("ACTIVE", "ban"): "BANNED",
    ("SUSPENDED", "ban"): "BANNED",
    ("SUSPENDED", "reactivate"): "ACTIVE",
    ("BANNED", "reactivate"): "ACTIVE",
}


@pytest.mark.parametrize("state", ACCOUNT_STATUSES)
@pytest.mark.parametrize("action", LIFECYCLE_ACTIONS)
def test_account_table_matches_legal_moves(state: str, action: str) -> None:
    expected = LEGAL_ACCOUNT_MOVES.get((state, action))
    assert can_transition_account(state, action) is (expected is not None)
    if expected is not None:
        assert next_account_status(state, action) == expected


@pytest.mark.parametrize("state", APPROVAL_STATUSES)
@pytest.mark.parametrize("action", LIFECYCLE_ACTIONS)
def test_application_table_only_allows_decisions_while_pending(state: str, action: str) -> None:
    expected = state == "PENDING" and action in {"approve", "reject"}
    assert can_transition_application(state, action) is expected


def test_allowed_actions_are_listed_per_state() -> None:
    assert allowed_account_actions("ACTIVE") == ["suspend", "ban"]
    assert allowed_account_actions("SUSPENDED") == ["ban", "reactivate"]
    assert allowed_account_actions("BANNED") == ["reactivate"]
    assert allowed_account_actions("UNKNOWN") == []


def test_normalize_action_accepts_case_and_whitespace() -> None:
    assert normalize_action("  Suspend ") == "suspend"
    assert normalize_action("delete") is None
    assert normalize_action("") is None


def test_reason_rules() -> None:
    assert {action for action in LIFECYCLE_ACTIONS if reason_required(action)} == {"reject", "suspend", "ban"}
    assert clean_reason("   ") is None
    assert clean_reason("  fraud report ") == "fraud report"
    assert clean_reason(None) is None
