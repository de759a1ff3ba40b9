"""Signup, login and refresh: the credential lifecycle on top of the hasher, token authority and account store."""

import logging
import secrets
from functools import lru_cache

from app.core.errors import (
    AuthError,
    DuplicateAccountError,
    InvalidCredentialsError,
    InvalidTokenError,
    MissingTokenError,
)
from app.core.security import hash_password, verify_password
from app.core.tokens import TokenAuthority
from app.repositories.accounts import AccountStore, DuplicateKeyError
from app.schemas.auth import TokenPair
from app.services.claims import claims_from_account

__all__ = [
    "AuthError",
    "AuthService",
    "DuplicateAccountError",
    "InvalidCredentialsError",
    "InvalidTokenError",
    "MissingTokenError",
]

logger = logging.getLogger(__name__)


@lru_cache
def _placeholder_hash() -> str:
    """Throwaway hash at the configured cost, checked against when the email is unknown."""
    return hash_password(secrets.token_urlsafe(32))


class AuthService:
    """
    One-shot credential operations. Holds no per-request state.

    Domain failures raise AuthError subclasses with generic messages; any other
    error from the account store propagates unchanged.
    """

    def __init__(self, accounts: AccountStore, tokens: TokenAuthority) -> None:
        self.accounts = accounts
        self.tokens = tokens
        # Built once per process so the first unknown-email login is not slower than the rest.
        _placeholder_hash()

    def signup(self, username: str, email: str, password: str) -> TokenPair:
        """
        Register an account and return its first token pair.

        Uniqueness is left to the store (no lookup before insert), so concurrent
        signups for the same username or email cannot both succeed.
        """
        password_hash = hash_password(password)
        try:
            account = self.accounts.create_account(
                username=username, email=email, password_hash=password_hash
            )
        except DuplicateKeyError as e:
            logger.info("Signup rejected: duplicate account", extra={"field": e.field})
            raise DuplicateAccountError() from None

        logger.info("Account created", extra={"account_id": account.id})
        return self.tokens.issue_pair(claims_from_account(account))

    def login(self, email: str, password: str) -> TokenPair:
        """Authenticate by email and password and return a fresh token pair."""
        account = self.accounts.find_account_by_email(email)
        if account is None:
            # Spend the same bcrypt time as a real check so response timing does not reveal the miss.
            verify_password(password, _placeholder_hash())
            logger.info("Login failed", extra={"reason": "unknown_email"})
            raise InvalidCredentialsError()
        if not verify_password(password, account.password_hash):
            logger.info("Login failed", extra={"reason": "bad_password", "account_id": account.id})
            raise InvalidCredentialsError()

        return self.tokens.issue_pair(claims_from_account(account))

    def refresh(self, refresh_token: str | None) -> str:
        """
        Mint a new access token from a valid refresh token.

        The refresh token itself is neither rotated nor invalidated; it stays
        usable until it expires.
        """
        if not refresh_token:
            raise MissingTokenError()
        try:
            claims = self.tokens.verify_refresh(refresh_token)
        except InvalidTokenError:
            logger.info("Refresh rejected: invalid refresh token")
            raise
        return self.tokens.issue_access(claims)
