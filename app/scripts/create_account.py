"""
Create an account (e.g. the first admin). Run from project root:
  python -m app.scripts.create_account USERNAME EMAIL PASSWORD [role]
Example:
  python -m app.scripts.create_account admin admin@example.com your-secure-password admin
"""
import argparse
import sys

from pydantic import EmailStr, TypeAdapter, ValidationError

from app.core.database import SessionLocal
from app.core.security import (
    PASSWORD_MAX_LEN,
    PASSWORD_MIN_LEN,
    USERNAME_MAX_LEN,
    hash_password,
)
from app.models import Role
from app.repositories.accounts import DuplicateKeyError, SqlAlchemyAccountStore


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create a Gatekeeper account from the command line.")
    parser.add_argument("username", help=f"Username (1-{USERNAME_MAX_LEN} chars)")
    parser.add_argument("email", help="Email address")
    parser.add_argument("password", help=f"Password ({PASSWORD_MIN_LEN}-{PASSWORD_MAX_LEN} chars)")
    parser.add_argument(
        "role", nargs="?", default=Role.STANDARD.value, choices=[r.value for r in Role]
    )
    args = parser.parse_args(argv)

    username = args.username.strip()
    if not username or len(username) > USERNAME_MAX_LEN:
        print("Invalid username length.", file=sys.stderr)
        return 1
    if not (PASSWORD_MIN_LEN <= len(args.password) <= PASSWORD_MAX_LEN):
        print(f"Password must be {PASSWORD_MIN_LEN}-{PASSWORD_MAX_LEN} characters.", file=sys.stderr)
        return 1
    try:
        email = str(TypeAdapter(EmailStr).validate_python(args.email.strip()))
    except ValidationError:
        print("Invalid email address.", file=sys.stderr)
        return 1

    db = SessionLocal()
    try:
        store = SqlAlchemyAccountStore(db)
        try:
            account = store.create_account(
                username=username,
                email=email,
                password_hash=hash_password(args.password),
                role=Role(args.role),
            )
        except DuplicateKeyError:
            print("Username or email already exists.", file=sys.stderr)
            return 1
        print(f"Created account '{username}' <{email}> with role '{account.role.value}'.")
        return 0
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
