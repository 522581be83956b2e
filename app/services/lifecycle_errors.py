"""Error taxonomy for account lifecycle operations.

The core raises these without any dependency on the web framework; the
FastAPI application maps ``status_code`` onto the HTTP response.
"""

from __future__ import annotations

from typing import Any


class LifecycleError(Exception):
    """Base class for lifecycle failures surfaced to administrators."""

    kind: str = "LifecycleError"
    status_code: int = 400

    def __init__(self, detail: str, **extra: Any) -> None:
        super().__init__(detail)
        self.detail = detail
        self.extra = extra

    def to_dict(self) -> dict[str, Any]:
        return {"error": self.kind, "detail": self.detail, **self.extra}


class NotFound(LifecycleError):
    kind = "NotFound"
    status_code = 404


class UnknownAction(LifecycleError):
    kind = "UnknownAction"
    status_code = 400


class InvalidTransition(LifecycleError):
    """Requested action is not legal from the target's current state."""

    kind = "InvalidTransition"
    status_code = 409

    def __init__(self, *, current_state: str, action: str, allowed_actions: list[str], target_id: str) -> None:
        allowed = ", ".join(allowed_actions) if allowed_actions else "none"
        super().__init__(
            f"Cannot {action} {target_id} while it is {current_state}; allowed actions: {allowed}.",
            current_state=current_state,
            action=action,
            allowed_actions=list(allowed_actions),
        )
        self.current_state = current_state
        self.action = action
        self.allowed_actions = list(allowed_actions)


class ReasonRequired(LifecycleError):
    kind = "ReasonRequired"
    status_code = 422


class AmbiguousTarget(LifecycleError):
    kind = "AmbiguousTarget"
    status_code = 400


class PersistenceFailure(LifecycleError):
    """Storage failed or timed out; nothing was written."""

    kind = "PersistenceFailure"
    status_code = 503


class Unauthorized(LifecycleError):
    kind = "Unauthorized"
    status_code = 403


class DuplicateAccount(LifecycleError):
    kind = "DuplicateAccount"
    status_code = 409


class StaleStatusError(Exception):
    """Compare-and-swap on ``status_version`` lost a race with another writer."""
