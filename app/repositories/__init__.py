"""Persistence adapters."""

from app.repositories.accounts import AccountStore, DuplicateKeyError, SqlAlchemyAccountStore

__all__ = ["AccountStore", "DuplicateKeyError", "SqlAlchemyAccountStore"]
