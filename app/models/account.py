"""ORM model for registered accounts (credentials and role)."""

import enum

from sqlalchemy import Column, DateTime, Enum, Integer, String, func

from app.models.base import Base


class Role(str, enum.Enum):
    """Account role; ADMIN accounts get isAdmin=true in their tokens."""

    STANDARD = "standard"
    ADMIN = "admin"


class Account(Base):
    """
    Registered account used for signup, login and token issuance.

    username and email are each unique; the database enforces it, so concurrent
    signups for the same identity are settled by the unique indexes.
    """

    __tablename__ = "accounts"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(255), nullable=False, unique=True, index=True)
    email = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    role = Column(
        Enum(Role, name="account_role", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=Role.STANDARD,
        server_default=Role.STANDARD.value,
    )
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
