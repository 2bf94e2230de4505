"""
Create a user from the command line (e.g. the first admin). Run from project root:
  python -m accounts.scripts.create_user NAME EMAIL PASSWORD [role]
Example:
  python -m accounts.scripts.create_user "Ada Admin" ada@example.org your-secure-password admin
"""
import argparse
import sys

from pydantic import ValidationError

from accounts.core.config import get_settings
from accounts.core.database import session_scope
from accounts.core.errors import AlreadyExists
from accounts.schemas.auth import SignUpRequest
from accounts.services.users import create_user


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create an account without going through sign-up.")
    parser.add_argument("name", help='Full name, e.g. "Jane Doe" (2-100 chars)')
    parser.add_argument("email", help="Email address (stored lowercase)")
    parser.add_argument("password", help="Password (8-100 chars)")
    parser.add_argument("role", nargs="?", default="user", choices=["user", "admin"])
    args = parser.parse_args(argv)

    try:
        payload = SignUpRequest(
            name=args.name,
            email=args.email,
            password=args.password,
            role=args.role,
        )
    except ValidationError as exc:
        for error in exc.errors():
            field = ".".join(str(p) for p in error["loc"])
            print(f"{field}: {error['msg']}", file=sys.stderr)
        return 1

    try:
        with session_scope() as db:
            user = create_user(db, payload, rounds=get_settings().BCRYPT_ROUNDS)
    except AlreadyExists:
        print(f"User '{payload.email}' already exists.", file=sys.stderr)
        return 1
    print(f"Created user '{user.email}' (id {user.id}) with role '{user.role}'.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
