"""Authentication endpoints (API JWT)."""

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.security import create_access_token, get_current_account
from app.db.session import get_db
from app.models.account import Account
from app.schemas.account import AccountRead
from app.schemas.auth import LoginRequest, TokenResponse
from app.services.account_service import authenticate_account

router: APIRouter = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/login", response_model=TokenResponse)
def login(payload: LoginRequest, db: Session = Depends(get_db)) -> TokenResponse:
    account: Account | None = authenticate_account(db, payload.email, payload.password)
    if account is None:
        logger.info("[AUTH] Rejected login for %s", payload.email)
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Incorrect email or password")
    return TokenResponse(
        access_token=create_access_token(data={"sub": account.id, "role": account.role}),
        expires_in=settings.jwt_expire_minutes * 60,
    )


@router.get("/me", response_model=AccountRead)
def me(current_account: Account = Depends(get_current_account)) -> AccountRead:
    return AccountRead.model_validate(current_account)
