"""Schema exports."""

from app.schemas.account import (
    AccountPage,
    AccountRead,
    AdminCreate,
    AgentApplicationRead,
    AgentPage,
    AgentRead,
)
from app.schemas.audit import AuditLogPage, AuditLogRead
from app.schemas.auth import LoginRequest, TokenResponse
from app.schemas.transition import (
    StatusUpdateRequest,
    TransitionCommand,
    TransitionRequest,
    TransitionResponse,
)

__all__ = [
    "AccountPage",
    "AccountRead",
    "AdminCreate",
    "AgentApplicationRead",
    "AgentPage",
    "AgentRead",
    "AuditLogPage",
    "AuditLogRead",
    "LoginRequest",
    "TokenResponse",
    "StatusUpdateRequest",
    "TransitionCommand",
    "TransitionRequest",
    "TransitionResponse",
]
