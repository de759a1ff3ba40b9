"""Derive token claims from a persisted account."""

from app.models import Account, Role
from app.schemas.auth import CredentialClaims


def claims_from_account(account: Account) -> CredentialClaims:
    """Map an account to its token claims; only the ADMIN role sets is_admin."""
    return CredentialClaims(
        id=account.id,
        email=account.email,
        username=account.username,
        is_admin=account.role == Role.ADMIN,
    )
