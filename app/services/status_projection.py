"""Unified approval status used for agent/user list filtering.

Projections are display-only and recomputed on every read; transition
decisions always use the stored account and application status.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable
from typing import TypeVar

PROJECTED_STATUSES: tuple[str, ...] = ("PENDING", "APPROVED", "REJECTED", "SUSPENDED", "BANNED")

T = TypeVar("T")


def project_status(account_status: str, application_status: str | None = None) -> str:
    """Combine account and agent application status into one list status."""
    if application_status == "PENDING":
        return "PENDING"
    if account_status == "ACTIVE":
        return "APPROVED"
    if application_status == "REJECTED" and account_status == "PENDING":
        return "REJECTED"
    return account_status


def project_account(account) -> str:
    """Projection for an ``Account`` row, using its agent application when present."""
    application = account.agent_application
    return project_status(account.status, application.approval_status if application is not None else None)


def normalize_projected_status(value: str | None) -> str | None:
    if value is None or not value.strip():
        return None
    canonical = value.strip().upper()
    if canonical not in PROJECTED_STATUSES:
        raise ValueError(f"Unknown status filter: {value}")
    return canonical


def filter_by_projected_status(accounts: Iterable[T], status: str | None) -> list[T]:
    wanted = normalize_projected_status(status)
    if wanted is None:
        return list(accounts)
    return [account for account in accounts if project_account(account) == wanted]


def count_by_projected_status(accounts: Iterable) -> dict[str, int]:
    counts = Counter(project_account(account) for account in accounts)
    return {status: counts.get(status, 0) for status in PROJECTED_STATUSES}
