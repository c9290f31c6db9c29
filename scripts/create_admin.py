import argparse
import getpass
import sys
from pathlib import Path
from typing import Optional, Sequence

ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from app.db.database import Base, SessionLocal, engine
from app.models.user_models import User
from app.models.user_role_models import AppRole, UserRole
from app.models import imported_user_models  # noqa: F401
from app.services.access_policy import grant_role
from app.utils.hashing import get_password_hash

MIN_PASSWORD_LENGTH = 12


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Create an importer admin or promote an existing user")
    parser.add_argument("email", help="Login email of the admin")
    parser.add_argument("--name", dest="full_name", default=None, help="Display name for a new user")
    return parser.parse_args(argv)


def prompt_for_password() -> str:
    for _ in range(3):
        password = getpass.getpass("Password: ")
        confirm = getpass.getpass("Confirm password: ")
        if password != confirm:
            print("Passwords do not match. Try again.", file=sys.stderr)
            continue
        if len(password) < MIN_PASSWORD_LENGTH:
            print(f"Password must be at least {MIN_PASSWORD_LENGTH} characters long.", file=sys.stderr)
            continue
        return password
    raise SystemExit("Failed to set password after three attempts.")


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)
    email = args.email.strip().lower()

    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        user = db.query(User).filter(User.email == email).first()
        if user is None:
            password = prompt_for_password()
            user = User(
                email=email,
                full_name=(args.full_name or "").strip() or None,
                password=get_password_hash(password),
            )
            user.roles.append(UserRole(role=AppRole.user))
            db.add(user)
            db.commit()
            db.refresh(user)
            print(f"Created user {user.id} <{user.email}>")

        grant_role(db, user, AppRole.admin)
        print(f"Granted admin role to {user.email}")
    finally:
        db.close()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
