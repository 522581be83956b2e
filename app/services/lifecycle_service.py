"""Account lifecycle manager: the single writer of account and agent approval status."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import NoReturn

from app.services.account_status import (
    ACCOUNT_ACTIONS,
    APPLICATION_ACTIONS,
    AUDIT_ACTION_BY_ACTION,
    DEFAULT_REASONS,
    allowed_account_actions,
    allowed_application_actions,
    can_transition_account,
    can_transition_application,
    clean_reason,
    next_account_status,
    next_application_status,
    normalize_action,
    reason_required,
)
from app.services.lifecycle_errors import (
    AmbiguousTarget,
    InvalidTransition,
    NotFound,
    ReasonRequired,
    StaleStatusError,
    UnknownAction,
)
from app.services.lifecycle_store import LifecycleStore
from app.services.lifecycle_types import (
    AccountSnapshot,
    AccountTarget,
    ActorContext,
    ApplicationSnapshot,
    ApplicationTarget,
    AuditDraft,
    StatusChange,
    Target,
    TransitionResult,
)
from app.services.security_guards import ensure_admin, ensure_can_manage_account
from app.services.target_locks import TargetLockRegistry, target_locks
from app.utils.time import utc_now

logger = logging.getLogger(__name__)

TARGET_LABELS: dict[str, str] = {"ACCOUNT": "an account", "AGENT_APPLICATION": "an agent application"}


def expected_target_type(action: str) -> str:
    """Sub-resource an action operates on."""
    return "AGENT_APPLICATION" if action in APPLICATION_ACTIONS else "ACCOUNT"


def resolve_target(action: str, *, account_id: str | None = None, application_id: str | None = None) -> Target:
    """Pick the identifier the action needs from the pair a caller holds.

    Callers that know both identifiers of an agent pass both; the action
    decides which one is used. When only the other identifier is given it is
    passed on as is and the manager reports the mismatch against the
    account's state. Neither identifier is ``AmbiguousTarget``.
    """
    canonical = normalize_action(action)
    if canonical is None:
        raise UnknownAction(f"Unknown action: {action!r}", action=action)
    expected = expected_target_type(canonical)
    if not account_id and not application_id:
        raise AmbiguousTarget(
            f"Action {canonical} needs {TARGET_LABELS[expected]} id",
            action=canonical,
            expected_target_type=expected,
        )
    if expected == "AGENT_APPLICATION":
        return ApplicationTarget(application_id) if application_id else AccountTarget(account_id)
    return AccountTarget(account_id) if account_id else ApplicationTarget(application_id)


class LifecycleManager:
    """Validates and applies approve/reject/suspend/ban/reactivate transitions.

    Every successful call writes the new status and exactly one audit entry in
    one unit through the store. All validation happens before that write.
    """

    def __init__(
        self,
        store: LifecycleStore,
        *,
        locks: TargetLockRegistry | None = None,
        default_timeout: float | None = None,
    ) -> None:
        self.store = store
        self.locks = locks if locks is not None else target_locks
        self.default_timeout = default_timeout

    def apply_transition(
        self,
        actor: ActorContext,
        target: Target | str,
        action: str,
        reason: str | None = None,
        *,
        notes: str | None = None,
        timeout: float | None = None,
    ) -> TransitionResult:
        canonical = normalize_action(action)
        if canonical is None:
            raise UnknownAction(f"Unknown action: {action!r}", action=action)
        ensure_admin(actor)

        cleaned_reason = clean_reason(reason)
        if reason_required(canonical) and cleaned_reason is None:
            raise ReasonRequired(f"A reason is required to {canonical}", action=canonical)
        if cleaned_reason is None:
            cleaned_reason = DEFAULT_REASONS.get(canonical)

        effective_timeout = self.default_timeout if timeout is None else timeout
        resolved = self._resolve(canonical, target)
        lock_key = f"{resolved.target_type}:{resolved.id}"
        with self.locks.hold(lock_key, effective_timeout):
            return self._apply_locked(
                actor,
                resolved,
                canonical,
                cleaned_reason,
                clean_reason(notes),
                effective_timeout,
            )

    def _resolve(self, action: str, target: Target | str) -> Target:
        expected = expected_target_type(action)
        if isinstance(target, (AccountTarget, ApplicationTarget)):
            if target.target_type == expected:
                return target
            if isinstance(target, AccountTarget):
                account = self.store.load_account_status(target.id)
                if account is None:
                    raise NotFound(f"No account with id {target.id}", target_id=target.id)
            else:
                application = self.store.load_agent_application(target.id)
                if application is None:
                    raise NotFound(f"No agent application with id {target.id}", target_id=target.id)
                account = application.account
            self._reject_mismatched(account, action, target.id, expected)

        target_id = str(target)
        if expected == "AGENT_APPLICATION":
            if self.store.load_agent_application(target_id) is not None:
                return ApplicationTarget(target_id)
            account = self.store.load_account_status(target_id)
            if account is None:
                raise NotFound(f"No agent application or account with id {target_id}", target_id=target_id)
            self._reject_mismatched(account, action, target_id, expected)
        else:
            if self.store.load_account_status(target_id) is not None:
                return AccountTarget(target_id)
            application = self.store.load_agent_application(target_id)
            if application is None:
                raise NotFound(f"No account or agent application with id {target_id}", target_id=target_id)
            self._reject_mismatched(application.account, action, target_id, expected)

    def _reject_mismatched(self, account: AccountSnapshot, action: str, target_id: str, expected: str) -> NoReturn:
        # Account state is checked first so an illegal action reads as one.
        if not can_transition_account(account.status, action):
            raise InvalidTransition(
                current_state=account.status,
                action=action,
                allowed_actions=allowed_account_actions(account.status),
                target_id=target_id,
            )
        raise AmbiguousTarget(
            f"{target_id} does not identify {TARGET_LABELS[expected]}; {action} needs {TARGET_LABELS[expected]} id",
            target_id=target_id,
            expected_target_type=expected,
        )

    def _apply_locked(
        self,
        actor: ActorContext,
        target: Target,
        action: str,
        reason: str | None,
        notes: str | None,
        timeout: float | None,
    ) -> TransitionResult:
        now = utc_now()
        if isinstance(target, ApplicationTarget):
            application = self.store.load_agent_application(target.id)
            if application is None:
                raise NotFound(f"No agent application with id {target.id}", target_id=target.id)
            change, previous, new = self._plan_application_change(actor, application, action, reason, now)
        else:
            account = self.store.load_account_status(target.id)
            if account is None:
                raise NotFound(f"No account with id {target.id}", target_id=target.id)
            change, previous, new = self._plan_account_change(actor, account, action)

        draft = AuditDraft(
            admin_id=actor.admin_id,
            admin_email=actor.email,
            action=AUDIT_ACTION_BY_ACTION[action],
            target_type=target.target_type,
            target_id=target.id,
            created_at=now,
            reason=reason,
            notes=notes,
            ip_address=actor.ip_address,
            user_agent=actor.user_agent,
        )
        try:
            audit_id = self.store.write_status_and_audit(change, draft, timeout)
        except StaleStatusError:
            logger.info("[LIFECYCLE] Lost status race on %s %s; re-reading", target.target_type, target.id)
            self._raise_from_current_state(target, action)

        logger.info(
            "[LIFECYCLE] %s %s %s: %s -> %s by %s (audit_id=%s)",
            action,
            target.target_type,
            target.id,
            previous,
            new,
            actor.email,
            audit_id,
        )
        return TransitionResult(
            target=target,
            action=action,
            previous_status=previous,
            new_status=new,
            account_id=change.account_id,
            account_status=change.account_status,
            audit_entry_id=audit_id,
        )

    def _plan_application_change(
        self,
        actor: ActorContext,
        application: ApplicationSnapshot,
        action: str,
        reason: str | None,
        now: datetime,
    ) -> tuple[StatusChange, str, str]:
        if not can_transition_application(application.approval_status, action):
            raise InvalidTransition(
                current_state=application.approval_status,
                action=action,
                allowed_actions=allowed_application_actions(application.approval_status),
                target_id=application.id,
            )
        account = application.account
        if not can_transition_account(account.status, action):
            raise InvalidTransition(
                current_state=account.status,
                action=action,
                allowed_actions=allowed_account_actions(account.status),
                target_id=application.id,
            )
        new_application_status = next_application_status(application.approval_status, action)
        change = StatusChange(
            account_id=account.id,
            account_status=next_account_status(account.status, action),
            account_version=account.status_version,
            application_id=application.id,
            application_status=new_application_status,
            application_version=application.status_version,
            rejection_reason=reason if action == "reject" else None,
            reviewed_by_id=actor.admin_id,
            reviewed_at=now,
        )
        return change, application.approval_status, new_application_status

    def _plan_account_change(
        self,
        actor: ActorContext,
        account: AccountSnapshot,
        action: str,
    ) -> tuple[StatusChange, str, str]:
        ensure_can_manage_account(actor, account)
        if not can_transition_account(account.status, action):
            raise InvalidTransition(
                current_state=account.status,
                action=action,
                allowed_actions=[a for a in allowed_account_actions(account.status) if a in ACCOUNT_ACTIONS],
                target_id=account.id,
            )
        new_status = next_account_status(account.status, action)
        change = StatusChange(
            account_id=account.id,
            account_status=new_status,
            account_version=account.status_version,
        )
        return change, account.status, new_status

    def _raise_from_current_state(self, target: Target, action: str) -> NoReturn:
        if isinstance(target, ApplicationTarget):
            application = self.store.load_agent_application(target.id)
            if application is None:
                raise NotFound(f"No agent application with id {target.id}", target_id=target.id)
            if not can_transition_application(application.approval_status, action):
                current = application.approval_status
                allowed = allowed_application_actions(current)
            else:
                current = application.account.status
                allowed = allowed_account_actions(current)
        else:
            account = self.store.load_account_status(target.id)
            if account is None:
                raise NotFound(f"No account with id {target.id}", target_id=target.id)
            current = account.status
            allowed = [a for a in allowed_account_actions(current) if a in ACCOUNT_ACTIONS]
        raise InvalidTransition(current_state=current, action=action, allowed_actions=allowed, target_id=target.id)
