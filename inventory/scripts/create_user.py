"""
Create a user (e.g. an extra admin) without going through the API. Run from project root:
  python -m inventory.scripts.create_user USERNAME EMAIL PASSWORD [role]
Example:
  python -m inventory.scripts.create_user storekeeper store@example.com a-long-password admin
"""
import argparse
import logging
import sys

from pydantic import ValidationError

from inventory.core.database import SessionLocal
from inventory.core.validation import ValidationFailed
from inventory.schemas.auth import REGISTER_RULES, RegisterRequest
from inventory.services.users import DuplicateCredentialError, register_user

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create an inventory user.")
    parser.add_argument("username", help="Username (at least 3 chars)")
    parser.add_argument("email", help="Email address")
    parser.add_argument("password", help="Password (at least 6 chars)")
    parser.add_argument("role", nargs="?", default="user", choices=["user", "admin"])
    args = parser.parse_args(argv)

    payload = {
        "username": args.username.strip(),
        "email": args.email.strip(),
        "password": args.password,
        "role": args.role,
    }
    try:
        body = RegisterRequest.model_validate(REGISTER_RULES.validate(payload))
    except ValidationFailed as e:
        for err in e.errors:
            print(f"{err.field}: {err.message}", file=sys.stderr)
        return 1
    except ValidationError as e:
        print(str(e), file=sys.stderr)
        return 1

    db = SessionLocal()
    try:
        user = register_user(db, body)
    except DuplicateCredentialError as e:
        print(e.message, file=sys.stderr)
        return 1
    finally:
        db.close()
    print(f"Created user '{user.username}' with role '{user.role}'.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
