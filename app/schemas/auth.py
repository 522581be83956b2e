"""Authentication-related request and response schemas."""

from pydantic import BaseModel


class LoginRequest(BaseModel):
    """Payload for dashboard login."""

    email: str
    password: str


class TokenResponse(BaseModel):
    """JWT response payload."""

    access_token: str
    token_type: str = "bearer"
    expires_in: int
