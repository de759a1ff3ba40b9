"""Signup, login and refresh endpoints plus the bearer-token dependency (get_current_user)."""

from typing import Annotated

from fastapi import APIRouter, Cookie, Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.errors import AuthError, InvalidTokenError
from app.core.tokens import TokenAuthority, get_token_authority
from app.repositories.accounts import SqlAlchemyAccountStore
from app.schemas.auth import (
    AccessTokenResponse,
    CredentialClaims,
    LoginRequest,
    RefreshRequest,
    SignUpRequest,
    TokenPair,
)
from app.services.auth_service import AuthService

router = APIRouter()
security = HTTPBearer(auto_error=False)


def get_auth_service(
    db: Annotated[Session, Depends(get_db)],
    tokens: Annotated[TokenAuthority, Depends(get_token_authority)],
) -> AuthService:
    """Dependency: AuthService bound to the request's DB session."""
    return AuthService(SqlAlchemyAccountStore(db), tokens)


def _forbidden(error: AuthError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=error.message)


@router.post("/signup", response_model=TokenPair, status_code=status.HTTP_201_CREATED)
def signup(
    body: SignUpRequest,
    service: Annotated[AuthService, Depends(get_auth_service)],
) -> TokenPair:
    """
    Register a new account; returns an access and a refresh token.
    Fails with 403 if the username or email is already taken (without saying which).
    """
    try:
        return service.signup(body.username, str(body.email), body.password)
    except AuthError as e:
        raise _forbidden(e) from e


@router.post("/login", response_model=TokenPair)
def login(
    body: LoginRequest,
    service: Annotated[AuthService, Depends(get_auth_service)],
) -> TokenPair:
    """
    Authenticate with email and password; returns an access and a refresh token.
    Include the access token in the Authorization header as: Bearer <accessToken>
    """
    try:
        return service.login(str(body.email), body.password)
    except AuthError as e:
        raise _forbidden(e) from e


@router.post("/refresh", response_model=AccessTokenResponse)
def refresh(
    service: Annotated[AuthService, Depends(get_auth_service)],
    body: RefreshRequest | None = None,
    refresh_token_cookie: Annotated[str | None, Cookie(alias="refresh_token")] = None,
) -> AccessTokenResponse:
    """
    Exchange a refresh token (JSON body refreshToken, or the refresh_token cookie)
    for a new access token. The refresh token stays valid until it expires.
    """
    token = (body.refresh_token if body else None) or refresh_token_cookie
    try:
        return AccessTokenResponse(access_token=service.refresh(token))
    except AuthError as e:
        raise _forbidden(e) from e


def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    tokens: Annotated[TokenAuthority, Depends(get_token_authority)],
) -> CredentialClaims:
    """Dependency: require a valid Bearer access token and return its claims. Raises 401 if missing or invalid."""
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    try:
        return tokens.verify_access(credentials.credentials)
    except InvalidTokenError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=e.message,
            headers={"WWW-Authenticate": "Bearer"},
        ) from e


@router.get("/me", response_model=CredentialClaims)
def read_current_user(
    current_user: Annotated[CredentialClaims, Depends(get_current_user)],
) -> CredentialClaims:
    """Return the claims of the authenticated caller."""
    return current_user
