"""Declarative base shared by the ORM models (and by Alembic autogenerate)."""

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass
