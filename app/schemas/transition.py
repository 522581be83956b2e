"""Lifecycle transition request and response schemas."""

from pydantic import BaseModel


class TransitionRequest(BaseModel):
    """Body for approve/reject/suspend/ban/reactivate endpoints."""

    reason: str | None = None
    notes: str | None = None


class StatusUpdateRequest(BaseModel):
    """Legacy ``PUT /users/{id}/status`` body: target status instead of action."""

    status: str
    reason: str | None = None
    notes: str | None = None


class TransitionCommand(BaseModel):
    """Generic transition carrying whichever identifiers the caller holds."""

    action: str
    account_id: str | None = None
    application_id: str | None = None
    reason: str | None = None
    notes: str | None = None


class TransitionResponse(BaseModel):
    target_type: str
    target_id: str
    action: str
    previous_status: str
    new_status: str
    account_id: str
    account_status: str
    audit_entry_id: int
