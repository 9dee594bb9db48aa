# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from webforms.auth.users import UserRecord
from webforms.errors import DuplicateUsername
from webforms.infra.db import Database, User


class UserRepository:
    def __init__(self, db: Database) -> None:
        self._db = db

    def find_user_by_username(self, username: str) -> Optional[UserRecord]:
        with self._db.session_scope() as session:
            row = session.execute(select(User).where(User.username == username)).scalar_one_or_none()
            if row is None:
                return None
            return UserRecord(id=row.id, username=row.username, password_hash=row.password_hash)

    def insert_user(self, username: str, password_hash: str) -> int:
        with self._db.session_scope() as session:
            row = User(username=username, password_hash=password_hash)
            session.add(row)
            try:
                session.flush()
            except IntegrityError as exc:
                raise DuplicateUsername(username) from exc
            return row.id
