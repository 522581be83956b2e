"""Account, agent and admin schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict


class AccountRead(BaseModel):
    id: str
    role: str
    full_name: str
    email: str | None = None
    phone_number: str | None = None
    status: str
    market_id: str | None = None
    registered_by_agent_id: str | None = None
    created_at: datetime
    last_login_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)


class AccountPage(BaseModel):
    items: list[AccountRead]
    total: int
    page: int
    page_size: int
    total_pages: int


class AgentApplicationRead(BaseModel):
    id: str
    account_id: str
    territory_id: str
    identity_type: str
    identity_number: str
    identity_document_url: str | None = None
    approval_status: str
    rejection_reason: str | None = None
    reviewed_by_id: str | None = None
    reviewed_at: datetime | None = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class AgentRead(BaseModel):
    """Agent account with its application and the projected list status.

    ``account.id`` drives suspend/ban/reactivate, ``application.id`` drives
    approve/reject.
    """

    account: AccountRead
    application: AgentApplicationRead | None = None
    status: str
    traders_registered: int = 0


class AgentPage(BaseModel):
    items: list[AgentRead]
    total: int
    page: int
    page_size: int
    total_pages: int


class AdminCreate(BaseModel):
    email: str
    password: str
    full_name: str | None = None
    phone_number: str | None = None
