"""Create or reset an admin account so the first access token can be issued.

Usage:
    python -m odontoforense.create_admin --email admin@example.com --name "Admin"

The password is read from ``--password`` or the ``ADMIN_PASSWORD`` variable.
"""
import argparse
import os
import sys

from odontoforense.auth.jwt_handler import hash_password
from odontoforense.database import SessionLocal, create_schema
from odontoforense.models.user import Role, User


def upsert_admin(db, email: str, name: str, password: str) -> tuple[User, bool]:
    user = db.query(User).filter(User.email == email).first()
    created = user is None
    if created:
        user = User(email=email, name=name, role=Role.ADMIN.value, hashed_password=hash_password(password))
        db.add(user)
    else:
        user.name = name
        user.role = Role.ADMIN.value
        user.hashed_password = hash_password(password)
    db.commit()
    db.refresh(user)
    return user, created


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--email", required=True)
    parser.add_argument("--name", default="Administrador")
    parser.add_argument("--password", default=os.getenv("ADMIN_PASSWORD"))
    args = parser.parse_args(argv)

    if not args.password:
        print("A password is required (--password or ADMIN_PASSWORD).", file=sys.stderr)
        return 1

    create_schema()
    db = SessionLocal()
    try:
        user, created = upsert_admin(db, args.email.strip().lower(), args.name, args.password)
    finally:
        db.close()

    print(f"{'Created' if created else 'Updated'} admin {user.email} (id={user.id})")
    return 0


if __name__ == "__main__":
    sys.exit(main())
