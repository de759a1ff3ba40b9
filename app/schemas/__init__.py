"""Pydantic request/response schemas."""

from app.schemas.auth import (
    AccessTokenResponse,
    CredentialClaims,
    LoginRequest,
    RefreshRequest,
    SignUpRequest,
    TokenPair,
)
from app.schemas.health import HealthResponse

__all__ = [
    "AccessTokenResponse",
    "CredentialClaims",
    "HealthResponse",
    "LoginRequest",
    "RefreshRequest",
    "SignUpRequest",
    "TokenPair",
]
