"""SQLAlchemy ORM models."""

from app.models.account import Account, Role
from app.models.base import Base

__all__ = ["Account", "Base", "Role"]
