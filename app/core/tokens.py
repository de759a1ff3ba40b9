"""JWT issuance and verification for access and refresh tokens."""

import logging
from datetime import UTC, datetime, timedelta
from functools import lru_cache
from typing import Any

import jwt
from pydantic import ValidationError

from app.core.config import get_settings
from app.core.durations import parse_duration
from app.core.errors import InvalidTokenError
from app.schemas.auth import CredentialClaims, TokenPair

logger = logging.getLogger(__name__)

# Wire names of the identity claims; registered claims (iat, exp) come on top.
CLAIM_FIELDS = frozenset({"id", "email", "username", "isAdmin"})
REGISTERED_CLAIMS = frozenset({"iat", "exp"})


class TokenAuthority:
    """
    Signs and verifies the two token kinds.

    Access and refresh tokens carry identical claims but are signed with
    independent secrets, so one kind never verifies as the other.
    """

    def __init__(
        self,
        access_secret: str,
        access_expires_in: timedelta,
        refresh_secret: str,
        refresh_expires_in: timedelta,
        algorithm: str = "HS256",
    ) -> None:
        if access_secret == refresh_secret:
            raise ValueError("Access and refresh tokens must use different secrets")
        self._access_secret = access_secret
        self._refresh_secret = refresh_secret
        self.access_expires_in = access_expires_in
        self.refresh_expires_in = refresh_expires_in
        self.algorithm = algorithm

    def issue_access(self, claims: CredentialClaims) -> str:
        """Sign claims as a short-lived access token."""
        return self._sign(claims, self._access_secret, self.access_expires_in)

    def issue_refresh(self, claims: CredentialClaims) -> str:
        """Sign claims as a long-lived refresh token."""
        return self._sign(claims, self._refresh_secret, self.refresh_expires_in)

    def issue_pair(self, claims: CredentialClaims) -> TokenPair:
        """Issue an access and a refresh token for the same claims."""
        return TokenPair(
            access_token=self.issue_access(claims),
            refresh_token=self.issue_refresh(claims),
        )

    def verify_refresh(self, token: str) -> CredentialClaims:
        """
        Verify a refresh token and return the claims embedded at issuance.

        Raises InvalidTokenError for a bad signature, a malformed token or
        payload, or an expired token; the caller cannot tell which.
        """
        return self._verify(token, self._refresh_secret, InvalidTokenError())

    def verify_access(self, token: str) -> CredentialClaims:
        """Verify an access token; same failure contract as verify_refresh."""
        return self._verify(
            token, self._access_secret, InvalidTokenError("Invalid or expired token")
        )

    def _sign(self, claims: CredentialClaims, secret: str, expires_in: timedelta) -> str:
        now = datetime.now(UTC)
        payload: dict[str, Any] = {
            **claims.to_payload(),
            "iat": now,
            "exp": now + expires_in,
        }
        return jwt.encode(payload, secret, algorithm=self.algorithm)

    def _verify(self, token: str, secret: str, error: InvalidTokenError) -> CredentialClaims:
        try:
            payload = jwt.decode(
                token,
                secret,
                algorithms=[self.algorithm],
                options={"require": ["exp", "iat"]},
            )
        except jwt.PyJWTError as e:
            logger.debug("Token rejected: %s", type(e).__name__)
            raise error from None
        if set(payload) - REGISTERED_CLAIMS != CLAIM_FIELDS:
            logger.debug("Token rejected: unexpected claim set")
            raise error
        try:
            return CredentialClaims.model_validate(payload)
        except ValidationError:
            logger.debug("Token rejected: malformed claims")
            raise error from None


@lru_cache
def get_token_authority() -> TokenAuthority:
    """Return the process-wide TokenAuthority built from settings."""
    settings = get_settings()
    return TokenAuthority(
        access_secret=settings.ACCESS_TOKEN_SECRET.get_secret_value(),
        access_expires_in=parse_duration(settings.ACCESS_TOKEN_EXPIRES_IN),
        refresh_secret=settings.REFRESH_TOKEN_SECRET.get_secret_value(),
        refresh_expires_in=parse_duration(settings.REFRESH_TOKEN_EXPIRES_IN),
        algorithm=settings.JWT_ALGORITHM,
    )
