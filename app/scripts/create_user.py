"""
Create a user (e.g. the first admin). Run from project root:
  python -m app.scripts.create_user USERNAME EMAIL PASSWORD [--admin]
Example:
  python -m app.scripts.create_user admin admin@example.com your-secure-password --admin
"""
import argparse
import sys

from email_validator import EmailNotValidError, validate_email

from app.core.database import session_scope
from app.schemas.auth import PASSWORD_MAX_LEN, USERNAME_MAX_LEN
from app.schemas.roles import Role
from app.services.accounts import create_user
from app.services.user_store import DuplicateUserError, UserStore


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create an IAM user outside the public registration endpoint.")
    parser.add_argument("username", help=f"Username (1-{USERNAME_MAX_LEN} chars)")
    parser.add_argument("email", help="Email address")
    parser.add_argument("password", help=f"Password (1-{PASSWORD_MAX_LEN} chars)")
    parser.add_argument("--admin", action="store_true", help="Also grant the ADMIN role")
    args = parser.parse_args(argv)

    username = args.username.strip()
    if not username or len(username) > USERNAME_MAX_LEN:
        print("Invalid username length.", file=sys.stderr)
        return 1
    # Same rules as EmailStr on the register endpoint, including normalization.
    try:
        email = validate_email(args.email.strip(), check_deliverability=False).normalized
    except EmailNotValidError as e:
        print(f"Invalid email address: {e}", file=sys.stderr)
        return 1
    if not args.password.strip() or len(args.password) > PASSWORD_MAX_LEN:
        print(f"Password must be 1-{PASSWORD_MAX_LEN} characters.", file=sys.stderr)
        return 1

    roles = [Role.USER, Role.ADMIN] if args.admin else [Role.USER]
    with session_scope() as db:
        try:
            user = create_user(UserStore(db), username, email, args.password, roles=roles)
        except DuplicateUserError as e:
            print(e.message, file=sys.stderr)
            return 1
        print(f"Created user '{user.username}' with roles {', '.join(user.roles)}.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
