"""Shared SQLAlchemy base declarative class and model imports."""

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Base class for ORM models."""


# Import model modules so metadata is populated before create_all.
from app.models import account as _account  # noqa: E402,F401
from app.models import agent_application as _agent_application  # noqa: E402,F401
from app.models import audit_log as _audit_log  # noqa: E402,F401
