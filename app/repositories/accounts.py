"""Account persistence: the store contract used by the auth service and its SQLAlchemy adapter."""

from typing import Protocol

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.models import Account, Role

# SQLSTATE for unique_violation (PostgreSQL).
PG_UNIQUE_VIOLATION = "23505"
UNIQUE_FIELDS = ("username", "email")


class DuplicateKeyError(Exception):
    """
    A uniqueness constraint rejected the insert.

    field names the colliding column when the database reports it, else None.
    """

    def __init__(self, field: str | None = None) -> None:
        self.field = field
        super().__init__(f"Duplicate key on {field or 'unique field'}")


class AccountStore(Protocol):
    """Contract for creating and looking up accounts."""

    def create_account(self, username: str, email: str, password_hash: str) -> Account:
        """Insert a new account; raise DuplicateKeyError if username or email is taken."""
        ...

    def find_account_by_email(self, email: str) -> Account | None:
        """Return the account registered with email, or None."""
        ...


def _is_unique_violation(error: IntegrityError) -> bool:
    orig = error.orig
    if getattr(orig, "pgcode", None) == PG_UNIQUE_VIOLATION:
        return True
    if getattr(orig, "sqlstate", None) == PG_UNIQUE_VIOLATION:
        return True
    return "UNIQUE constraint failed" in str(orig)


def _colliding_field(error: IntegrityError) -> str | None:
    """
    Best-effort column name from the driver's error.

    The constraint name wins when the driver reports one; the message is a
    fallback only, since PostgreSQL's DETAIL line echoes the submitted value.
    """
    orig = error.orig
    diag = getattr(orig, "diag", None)
    constraint = getattr(diag, "constraint_name", None)
    if constraint:
        for field in UNIQUE_FIELDS:
            if constraint.endswith(f"_{field}"):
                return field
        return None
    # SQLite: "UNIQUE constraint failed: accounts.email"
    message = str(orig).splitlines()[0] if str(orig) else ""
    for field in UNIQUE_FIELDS:
        if f"{Account.__tablename__}.{field}" in message:
            return field
    return None


class SqlAlchemyAccountStore:
    """AccountStore backed by a SQLAlchemy session."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def create_account(
        self,
        username: str,
        email: str,
        password_hash: str,
        role: Role = Role.STANDARD,
    ) -> Account:
        """Insert an account in one commit; role defaults to STANDARD."""
        account = Account(
            username=username, email=email, password_hash=password_hash, role=role
        )
        self.session.add(account)
        try:
            self.session.commit()
        except IntegrityError as e:
            self.session.rollback()
            if _is_unique_violation(e):
                raise DuplicateKeyError(_colliding_field(e)) from e
            raise
        self.session.refresh(account)
        return account

    def find_account_by_email(self, email: str) -> Account | None:
        return self.session.execute(
            select(Account).where(Account.email == email)
        ).scalar_one_or_none()
