# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import logging
import os
import secrets
from dataclasses import dataclass

logger = logging.getLogger("webforms")

DEFAULT_DATABASE_URL = "sqlite:///data/webforms.db"
DEFAULT_COOKIE_SALT = "webforms.session.v1"

_TRUE = {"1", "true", "yes", "y"}


@dataclass(frozen=True)
class Settings:
    secret_key: str
    database_url: str = DEFAULT_DATABASE_URL
    env: str = "development"
    cookie_secure: bool = False
    cookie_salt: str = DEFAULT_COOKIE_SALT
    session_max_age: int = 0  # seconds; 0 = sessions never expire

    @property
    def is_production(self) -> bool:
        return self.env in ("production", "prod")


def load_settings() -> Settings:
    """Read settings from the environment.

    A missing secret key is fatal in production. Elsewhere a random key is
    generated, so cookies only survive as long as the process (which is also
    true of the in-memory sessions they point to).
    """
    env = os.getenv("WEBFORMS_ENV", "development").strip().lower()
    secret = os.getenv("WEBFORMS_SECRET_KEY") or os.getenv("SECRET_KEY")
    if not secret:
        if env in ("production", "prod"):
            raise RuntimeError("Missing WEBFORMS_SECRET_KEY (or SECRET_KEY) in environment")
        logger.warning("WEBFORMS_SECRET_KEY not set, using a random per-process key")
        secret = secrets.token_urlsafe(32)

    max_age = int(os.getenv("WEBFORMS_SESSION_MAX_AGE", "0") or 0)
    if max_age < 0:
        raise ValueError("WEBFORMS_SESSION_MAX_AGE must be >= 0")

    return Settings(
        secret_key=secret,
        database_url=os.getenv("WEBFORMS_DATABASE_URL", DEFAULT_DATABASE_URL),
        env=env,
        cookie_secure=os.getenv("WEBFORMS_COOKIE_SECURE", "false").lower() in _TRUE,
        cookie_salt=os.getenv("WEBFORMS_COOKIE_SALT", DEFAULT_COOKIE_SALT),
        session_max_age=max_age,
    )
