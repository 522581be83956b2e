"""Account and agent-application status transition table."""

from __future__ import annotations

LIFECYCLE_ACTIONS: tuple[str, ...] = ("approve", "reject", "suspend", "ban", "reactivate")
APPLICATION_ACTIONS: frozenset[str] = frozenset({"approve", "reject"})
ACCOUNT_ACTIONS: frozenset[str] = frozenset({"suspend", "ban", "reactivate"})
REASON_REQUIRED_ACTIONS: frozenset[str] = frozenset({"reject", "suspend", "ban"})

DEFAULT_REASONS: dict[str, str] = {
    "approve": "Approved by admin",
    "reactivate": "Reactivated by admin",
}

AUDIT_ACTION_BY_ACTION: dict[str, str] = {
    "approve": "APPROVE_AGENT",
    "reject": "REJECT_AGENT",
    "suspend": "SUSPEND_USER",
    "ban": "BAN_USER",
    "reactivate": "REACTIVATE_USER",
}

# (account status, action) -> account status after the action.
ACCOUNT_TRANSITIONS: dict[str, dict[str, str]] = {
    "PENDING": {"approve": "ACTIVE", "reject": "PENDING"},
    "ACTIVE": {"suspend": "SUSPENDED", "ban": "BANNED"},
    "SUSPENDED": {"ban": "BANNED", "reactivate": "ACTIVE"},
    "BANNED": {"reactivate": "ACTIVE"},
}

APPLICATION_TRANSITIONS: dict[str, dict[str, str]] = {
    "PENDING": {"approve": "APPROVED", "reject": "REJECTED"},
    "APPROVED": {},
    "REJECTED": {},
}


def normalize_action(action: str) -> str | None:
    """Return the canonical action keyword, or None when unrecognized."""
    canonical = str(action or "").strip().lower()
    if canonical not in LIFECYCLE_ACTIONS:
        return None
    return canonical


def allowed_account_actions(current: str) -> list[str]:
    """Actions legal from an account status, in table order."""
    transitions = ACCOUNT_TRANSITIONS.get(current, {})
    return [action for action in LIFECYCLE_ACTIONS if action in transitions]


def allowed_application_actions(current: str) -> list[str]:
    transitions = APPLICATION_TRANSITIONS.get(current, {})
    return [action for action in LIFECYCLE_ACTIONS if action in transitions]


def can_transition_account(current: str, action: str) -> bool:
    """Return whether the account table has a row for ``(current, action)``."""
    return action in ACCOUNT_TRANSITIONS.get(current, {})


def can_transition_application(current: str, action: str) -> bool:
    return action in APPLICATION_TRANSITIONS.get(current, {})


def next_account_status(current: str, action: str) -> str:
    return ACCOUNT_TRANSITIONS[current][action]


def next_application_status(current: str, action: str) -> str:
    return APPLICATION_TRANSITIONS[current][action]


def reason_required(action: str) -> bool:
    return action in REASON_REQUIRED_ACTIONS


def clean_reason(reason: str | None) -> str | None:
    """Trim a reason, collapsing whitespace-only values to None."""
    if reason is None:
        return None
    trimmed = reason.strip()
    return trimmed or None
