#!/usr/bin/env python3
from __future__ import annotations

from getpass import getpass

from webforms.auth.users import register
from webforms.config import load_settings
from webforms.errors import DuplicateUsername
from webforms.infra.db import Database
from webforms.infra.user_repo import UserRepository


def main() -> None:
    settings = load_settings()
    db = Database(settings.database_url)
    db.init_schema()

    username = input("Username: ").strip()
    pw1 = getpass("Password: ")
    pw2 = getpass("Repeat password: ")
    if pw1 != pw2:
        raise SystemExit("Passwords do not match")
    if not username or not pw1:
        raise SystemExit("Username and password are required")

    try:
        user_id = register(UserRepository(db), username, pw1)
    except DuplicateUsername:
        raise SystemExit(f"User '{username}' already exists")
    finally:
        db.dispose()
    print(f"OK -> user {username} (id={user_id}) in {settings.database_url}")


if __name__ == "__main__":
    main()
