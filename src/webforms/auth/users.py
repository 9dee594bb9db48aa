# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Protocol

from webforms.auth.passwords import decoy_hash, hash_password, verify_password
from webforms.auth.session import SessionCookieCodec
from webforms.auth.store import SessionStore
from webforms.errors import DuplicateUsername, InvalidCredentials
from webforms.logging_config import log_id

logger = logging.getLogger("webforms.auth")


@dataclass(frozen=True)
class UserRecord:
    id: int
    username: str
    password_hash: str


class UserStore(Protocol):
    def find_user_by_username(self, username: str) -> Optional[UserRecord]: ...

    def insert_user(self, username: str, password_hash: str) -> int: ...


def register(users: UserStore, username: str, password: str) -> int:
    """Create a user and return its id.

    Raises DuplicateUsername if the name is taken. Storage/hashing failures
    propagate as StorageError/HashingError.
    """
    if not username or not password:
        raise ValueError("Username and password are required")
    password_hash = hash_password(password)
    try:
        user_id = users.insert_user(username, password_hash)
    except DuplicateUsername:
        logger.info("register rejected: duplicate username user=%s", log_id(username))
        raise
    logger.info("registered user_id=%s", user_id)
    return user_id


def authenticate(users: UserStore, username: str, password: str) -> UserRecord:
    """Return the user for valid credentials, else raise InvalidCredentials.

    Exactly one argon2 verification runs per call, whether or not the user
    exists and whatever the password is.
    """
    u = users.find_user_by_username(username) if username else None
    digest = u.password_hash if u is not None else decoy_hash()
    ok = verify_password(password or "", digest)
    if u is None or not ok:
        raise InvalidCredentials()
    return u


def login(
    users: UserStore,
    sessions: SessionStore,
    codec: SessionCookieCodec,
    username: str,
    password: str,
) -> str:
    """Authenticate and open a session. Returns the encoded cookie value.

    If encoding fails after the session exists, the session is dropped so no
    half-issued login is left behind.
    """
    try:
        u = authenticate(users, username, password)
    except InvalidCredentials:
        logger.warning("login failed user=%s", log_id(username))
        raise

    token = sessions.create(u.id)
    try:
        cookie_value = codec.encode(token)
    except BaseException:
        sessions.invalidate(token)
        raise
    logger.info("login user_id=%s", u.id)
    return cookie_value


def logout(sessions: SessionStore, codec: SessionCookieCodec, cookie_value: Optional[str]) -> bool:
    """Invalidate whatever session the cookie names. Always safe to call."""
    token = codec.decode(cookie_value or "")
    removed = sessions.invalidate(token) if token else False
    logger.info("logout live_session=%s", removed)
    return removed
