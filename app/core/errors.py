"""Authentication error kinds. Messages are deliberately generic and stable."""


class AuthError(Exception):
    """Base class for authentication failures that callers may show to users."""

    default_message = "Authentication failed"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class DuplicateAccountError(AuthError):
    """Raised on signup when the username or the email is already registered."""

    default_message = "Username or email already exists"


class InvalidCredentialsError(AuthError):
    """Raised on login for an unknown email and for a wrong password alike."""

    default_message = "Invalid credentials"


class MissingTokenError(AuthError):
    """Raised on refresh when no refresh token was supplied."""

    default_message = "No refresh token provided, please login again"


class InvalidTokenError(AuthError):
    """Raised when a token is malformed, expired, or signed with another secret."""

    default_message = "Invalid refresh token"
