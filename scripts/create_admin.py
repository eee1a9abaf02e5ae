"""
Create (or reset the password of) a named staff account.

Usage:
    python scripts/create_admin.py alice            # prompts for the password
    python scripts/create_admin.py bob --role staff

Uses the app's SQLAlchemy engine and DATABASE_URL from tableside/core/config.py.
"""

import argparse
import getpass
import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from tableside.db.session import SessionLocal, create_db
from tableside.models.user import RoleEnum
from tableside.services.auth import create_or_reset_user


def main(argv=None):
    parser = argparse.ArgumentParser(description=__doc__.strip().splitlines()[0])
    parser.add_argument("username")
    parser.add_argument("--role", choices=[r.value for r in RoleEnum], default=RoleEnum.admin.value)
    parser.add_argument("--password", help="read from a prompt when omitted")
    args = parser.parse_args(argv)

    password = args.password or getpass.getpass(f"Password for {args.username}: ")
    if not password:
        parser.error("password must not be empty")

    create_db()
    db = SessionLocal()
    try:
        user = create_or_reset_user(db, args.username, password, args.role)
        print(f"USER_OK id={user.id} username={user.username} role={user.role.value}")
    finally:
        db.close()


if __name__ == "__main__":
    main()
