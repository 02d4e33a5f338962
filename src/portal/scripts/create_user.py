#!/usr/bin/env python3
"""
Create an account from the command line (signup only ever creates plain users,
so this is how the first admin gets in). Run from project root:
  python -m portal.scripts.create_user NAME EMAIL PASSWORD [role]
Example:
  python -m portal.scripts.create_user Ann ann@example.com a-long-password admin
"""
from __future__ import annotations

import argparse
import sys
from typing import Optional, Sequence

from pymongo import MongoClient

from portal.auth.passwords import hash_password
from portal.config import Settings
from portal.infra.mongo import USERS_COLLECTION, connect, ensure_indexes
from portal.infra.user_repo import EmailTakenError, UserRepo
from portal.schemas import SignupForm, validate


def main(argv: Optional[Sequence[str]] = None, *, client: Optional[MongoClient] = None,
         settings: Optional[Settings] = None) -> int:
    parser = argparse.ArgumentParser(description="Create a portal account.")
    parser.add_argument("name", help="Display name (1-30 chars)")
    parser.add_argument("email", help="Email address (stored lowercase)")
    parser.add_argument("password", help="Password (8-64 chars)")
    parser.add_argument("role", nargs="?", default="user", choices=["user", "admin"])
    args = parser.parse_args(argv)

    form, errors = validate(SignupForm, {"name": args.name, "email": args.email, "password": args.password})
    if errors:
        for msg in errors:
            print(msg, file=sys.stderr)
        return 1

    settings = settings or Settings.from_env()
    owns_client = client is None
    client = client or connect(settings)
    try:
        db = client[settings.mongodb_database]
        ensure_indexes(db)
        users = UserRepo(db[USERS_COLLECTION])
        try:
            rec = users.insert(
                name=form.name,
                email=str(form.email),
                password_hash=hash_password(form.password),
                user_type=args.role,
            )
        except EmailTakenError:
            print(f"Email '{str(form.email).lower()}' is already registered.", file=sys.stderr)
            return 1
        print(f"Created '{rec.name}' <{rec.email}> with role '{rec.user_type}'.")
        return 0
    finally:
        if owns_client:
            client.close()


if __name__ == "__main__":
    sys.exit(main())
