"""
Create a user (e.g. first admin). Run from project root:
  python -m warden.scripts.create_user EMAIL PASSWORD [role]
Example:
  python -m warden.scripts.create_user admin@example.com your-secure-password admin
"""
import argparse
import sys

from warden.core.database import SessionLocal, init_db
from warden.core.errors import AppError
from warden.models.role import DEFAULT_ROLE_NAMES, ROLE_USER
from warden.services.credential_store import CredentialStore
from warden.services.validation import validate_new_account


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create a Warden user without the HTTP API.")
    parser.add_argument("email", help="Email address")
    parser.add_argument("password", help="Password (8-128 chars)")
    parser.add_argument("role", nargs="?", default=ROLE_USER, choices=list(DEFAULT_ROLE_NAMES))
    args = parser.parse_args(argv)

    init_db()
    db = SessionLocal()
    try:
        validate_new_account(args.email, args.password)
        user = CredentialStore(db).create(
            email=args.email,
            password=args.password,
            role=args.role,
        )
        print(f"Created user '{user.email}' with role '{user.role}'.")
        return 0
    except AppError as e:
        problems = "; ".join(e.details.values()) if e.details else e.message
        print(problems, file=sys.stderr)
        return 1
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
