"""Request/response schemas for auth endpoints and the claims carried by tokens."""

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from app.core.security import (
    EMAIL_MAX_LEN,
    PASSWORD_MAX_LEN,
    PASSWORD_MIN_LEN,
    USERNAME_MAX_LEN,
    USERNAME_MIN_LEN,
)


class CredentialClaims(BaseModel):
    """
    Identity claims embedded in every access and refresh token.

    Serialized with the wire names id, email, username, isAdmin and nothing else.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)

    id: int
    email: str
    username: str
    is_admin: bool = Field(alias="isAdmin")

    def to_payload(self) -> dict[str, int | str | bool]:
        """Claims as a JWT payload dict (wire names)."""
        return self.model_dump(by_alias=True)


class TokenPair(BaseModel):
    """Access and refresh tokens returned after signup or login."""

    model_config = ConfigDict(populate_by_name=True)

    access_token: str = Field(..., alias="accessToken", description="Short-lived JWT access token")
    refresh_token: str = Field(
        ..., alias="refreshToken", description="Long-lived JWT used only to mint access tokens"
    )


class AccessTokenResponse(BaseModel):
    """New access token minted from a refresh token."""

    model_config = ConfigDict(populate_by_name=True)

    access_token: str = Field(..., alias="accessToken", description="JWT access token")


class SignUpRequest(BaseModel):
    """New account registration."""

    username: str = Field(
        ..., min_length=USERNAME_MIN_LEN, max_length=USERNAME_MAX_LEN, description="Username"
    )
    email: EmailStr = Field(..., max_length=EMAIL_MAX_LEN, description="Email address")
    password: str = Field(
        ..., min_length=PASSWORD_MIN_LEN, max_length=PASSWORD_MAX_LEN, description="Password"
    )


class LoginRequest(BaseModel):
    """Credentials for login."""

    email: EmailStr = Field(..., max_length=EMAIL_MAX_LEN, description="Email address")
    # No minimum beyond non-empty: older accounts may predate the signup length policy.
    password: str = Field(..., min_length=1, max_length=PASSWORD_MAX_LEN, description="Password")


class RefreshRequest(BaseModel):
    """Refresh token presented to mint a new access token (may also come from a cookie)."""

    model_config = ConfigDict(populate_by_name=True)

    refresh_token: str | None = Field(default=None, alias="refreshToken")
