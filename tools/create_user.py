from __future__ import annotations

import argparse
import getpass

from freshlink.accounts import create_user
from freshlink.db import Base, SessionLocal, engine

# Provision a hotel or dealer account in the database named by DATABASE_URL.
#   python tools/create_user.py h4 "Hotel Sunrise" sunrise@hotel.com --role hotel


def main() -> None:
    parser = argparse.ArgumentParser(description="Create a FreshLink login")
    parser.add_argument("user_id", help="public id used on orders, e.g. h4 or d3")
    parser.add_argument("name")
    parser.add_argument("email")
    parser.add_argument("--role", choices=["hotel", "dealer"], required=True)
    parser.add_argument("--password", help="prompted for when omitted")
    args = parser.parse_args()

    password = args.password or getpass.getpass("Password: ")
    if not password:
        raise SystemExit("Password must not be empty")

    Base.metadata.create_all(bind=engine)
    with SessionLocal() as db:
        try:
            u = create_user(db, args.user_id, args.name, args.email, password, args.role)
        except ValueError as e:
            raise SystemExit(str(e))

    print(f"OK  {u.role}  {u.public_id}  {u.email}")


if __name__ == "__main__":
    main()
