"""Password hashing and verification (bcrypt)."""

import base64
import hashlib

import bcrypt

from app.core.config import settings

# bcrypt only reads the first 72 bytes of its input.
BCRYPT_MAX_BYTES = 72

# Min/max lengths for username and password validation (input validation).
USERNAME_MIN_LEN = 1
USERNAME_MAX_LEN = 255
EMAIL_MAX_LEN = 255
PASSWORD_MIN_LEN = 8
PASSWORD_MAX_LEN = 128


def _password_bytes(plain_password: str) -> bytes:
    """
    Encode a password for bcrypt.

    Passwords that fit bcrypt's 72-byte window are used as-is, so hashes stay
    interchangeable with any other bcrypt implementation. Longer ones, and ones
    containing NUL (where C implementations stop reading), are reduced to a
    base64 SHA-256 digest; plain truncation would let two passwords sharing a
    72-byte prefix verify against each other.
    """
    pw_bytes = plain_password.encode("utf-8", "surrogatepass")
    if len(pw_bytes) <= BCRYPT_MAX_BYTES and b"\x00" not in pw_bytes:
        return pw_bytes
    return base64.b64encode(hashlib.sha256(pw_bytes).digest())


def hash_password(plain_password: str, rounds: int | None = None) -> str:
    """Hash a plain-text password for storage. Salt and cost are embedded in the result."""
    salt = bcrypt.gensalt(rounds=rounds or settings.BCRYPT_ROUNDS)
    return bcrypt.hashpw(_password_bytes(plain_password), salt).decode("utf-8")


def verify_password(plain_password: str, hashed: str) -> bool:
    """Verify a plain password against a stored hash. A mismatch is False, never an error."""
    try:
        return bcrypt.checkpw(_password_bytes(plain_password), hashed.encode("utf-8"))
    except (ValueError, TypeError):
        return False
