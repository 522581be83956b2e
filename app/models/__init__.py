"""Application models package."""

from app.models.account import Account
from app.models.agent_application import AgentApplication
from app.models.audit_log import AuditLog

__all__ = ["Account", "AgentApplication", "AuditLog"]
