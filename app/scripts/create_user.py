"""
Create a user (e.g. the first admin, since self-registration cannot create admins).
Run from project root:
  python -m app.scripts.create_user NAME EMAIL PASSWORD [role]
Example:
  python -m app.scripts.create_user "Finance Admin" admin@example.com your-secure-password admin
"""
import argparse
import logging
import sys

from app.core.config import get_settings
from app.core.database import SessionLocal
from app.core.errors import AppError
from app.models import ROLES
from app.services.auth import register_user

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create a Financial Tracker user.")
    parser.add_argument("name", help="Display name")
    parser.add_argument("email", help="Login email (must be unused)")
    parser.add_argument("password", help="Password")
    parser.add_argument("role", nargs="?", default="user", choices=list(ROLES))
    args = parser.parse_args(argv)

    # The CLI is the trusted path for admins, so bypass ALLOW_ADMIN_REGISTRATION.
    settings = get_settings().model_copy(update={"ALLOW_ADMIN_REGISTRATION": True})

    db = SessionLocal()
    try:
        user = register_user(
            db,
            settings,
            name=args.name,
            email=args.email,
            password=args.password,
            role=args.role,
        )
    except AppError as e:
        print(e.message, file=sys.stderr)
        return 1
    finally:
        db.close()
    print(f"Created user '{user.email}' (id={user.id}) with role '{user.role}'.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
