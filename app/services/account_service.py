"""Account provisioning, admin management and credential checks."""

from __future__ import annotations

import logging

from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.security import get_password_hash, verify_password
from app.models import Account, AgentApplication
from app.models.account import ADMIN_ROLES, normalize_account_role
from app.models.agent_application import IDENTITY_TYPES
from app.services.audit_service import log_action
from app.services.lifecycle_errors import DuplicateAccount
from app.services.lifecycle_types import ActorContext
from app.services.security_guards import ensure_super_admin
from app.utils.time import utc_now

logger = logging.getLogger(__name__)

SELF_REGISTERED_ROLES = frozenset({"TRADER", "AGENT", "BUYER"})
DEV_SUPER_ADMIN_PASSWORD = "ChangeMe123!"


def _clean(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value or None


def _ensure_contact_available(db: Session, email: str | None, phone_number: str | None) -> None:
    if email is None and phone_number is None:
        raise ValueError("Either email or phone number is required")
    conditions = []
    if email is not None:
        conditions.append(Account.email == email)
    if phone_number is not None:
        conditions.append(Account.phone_number == phone_number)
    existing = db.scalar(select(Account).where(or_(*conditions)).limit(1))
    if existing is not None:
        raise DuplicateAccount("An account with this email or phone number already exists")


def register_account(
    db: Session,
    *,
    role: str,
    full_name: str,
    email: str | None = None,
    phone_number: str | None = None,
    password: str | None = None,
    market_id: str | None = None,
    registered_by_agent_id: str | None = None,
    territory_id: str | None = None,
    identity_type: str | None = None,
    identity_number: str | None = None,
    identity_document_url: str | None = None,
) -> Account:
    """Create a PENDING trader, agent or buyer; agents also get an application.

    Registration belongs to the onboarding service in production. This helper
    applies the same validation for seeding and tests.
    """
    canonical_role = normalize_account_role(role)
    if canonical_role not in SELF_REGISTERED_ROLES:
        raise ValueError(f"Role {canonical_role} cannot self-register")
    email = _clean(email)
    phone_number = _clean(phone_number)
    _ensure_contact_available(db, email, phone_number)

    application: AgentApplication | None = None
    if canonical_role == "AGENT":
        identity = str(identity_type or "").strip().upper()
        if identity not in IDENTITY_TYPES:
            raise ValueError(f"Invalid identity type: {identity_type}")
        if not _clean(territory_id) or not _clean(identity_number):
            raise ValueError("Agents need an assigned territory and an identity number")
        application = AgentApplication(
            territory_id=territory_id.strip(),
            identity_type=identity,
            identity_number=identity_number.strip(),
            identity_document_url=_clean(identity_document_url),
            approval_status="PENDING",
        )

    account = Account(
        role=canonical_role,
        full_name=full_name.strip(),
        email=email,
        phone_number=phone_number,
        password_hash=get_password_hash(password) if password else None,
        status="PENDING",
        market_id=_clean(market_id),
        registered_by_agent_id=registered_by_agent_id,
    )
    if application is not None:
        account.agent_application = application
    db.add(account)
    db.commit()
    db.refresh(account)
    return account


def authenticate_account(db: Session, email: str, password: str) -> Account | None:
    account = db.scalar(select(Account).where(Account.email == email.strip()).limit(1))
    if account is None or account.status != "ACTIVE" or not account.password_hash:
        return None
    if not verify_password(password, account.password_hash):
        return None
    account.last_login_at = utc_now()
    db.commit()
    db.refresh(account)
    return account


def list_admins(db: Session) -> list[Account]:
    return list(
        db.scalars(select(Account).where(Account.role.in_(sorted(ADMIN_ROLES))).order_by(Account.created_at.asc())).all()
    )


def create_admin(
    db: Session,
    actor: ActorContext,
    *,
    email: str,
    password: str,
    full_name: str | None = None,
    phone_number: str | None = None,
) -> Account:
    """Create an ACTIVE admin account; only super admins may do this."""
    ensure_super_admin(actor)
    email = _clean(email)
    if email is None:
        raise ValueError("Admin email is required")
    phone_number = _clean(phone_number)
    _ensure_contact_available(db, email, phone_number)

    admin = Account(
        role="ADMIN",
        full_name=_clean(full_name) or email.split("@")[0],
        email=email,
        phone_number=phone_number,
        password_hash=get_password_hash(password),
        status="ACTIVE",
    )
    db.add(admin)
    try:
        db.flush()
        log_action(db, actor=actor, action="CREATE_ADMIN", target_type="ACCOUNT", target_id=admin.id)
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise DuplicateAccount("An account with this email or phone number already exists") from exc
    db.refresh(admin)
    logger.info("[SECURITY] Admin %s created by %s", email, actor.email)
    return admin


def ensure_super_admin_account(db: Session) -> bool:
    """Ensure a super admin exists so the dashboard can be bootstrapped.

    Returns:
        bool: True when a super admin existed before this call.
    """
    existing = db.scalar(select(Account).where(Account.role == "SUPER_ADMIN").limit(1))
    if existing is not None:
        logger.info("[BOOTSTRAP] Super admin exists")
        return True

    password = settings.super_admin_password
    if not password:
        if settings.app_env != "dev":
            logger.warning("[BOOTSTRAP] SUPER_ADMIN_PASSWORD not set; skipping super admin creation.")
            return False
        password = DEV_SUPER_ADMIN_PASSWORD

    db.add(
        Account(
            role="SUPER_ADMIN",
            full_name="Super Admin",
            email=settings.super_admin_email,
            password_hash=get_password_hash(password),
            status="ACTIVE",
        )
    )
    db.commit()
    if password == DEV_SUPER_ADMIN_PASSWORD:
        logger.warning(
            "[SECURITY] Default super admin created: %s. Change the default password immediately.",
            settings.super_admin_email,
        )
    else:
        logger.info("[BOOTSTRAP] Super admin %s created", settings.super_admin_email)
    return False
