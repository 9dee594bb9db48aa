# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union
from urllib.parse import quote

from fastapi import HTTPException, Request

from webforms.auth.session import COOKIE_NAME, SessionCookieCodec
from webforms.auth.store import SessionStore
from webforms.config import Settings


@dataclass(frozen=True)
class Authenticated:
    user_id: int


@dataclass(frozen=True)
class Anonymous:
    pass


ANONYMOUS = Anonymous()

Identity = Union[Authenticated, Anonymous]


def resolve_identity(cookie_value: Optional[str], codec: SessionCookieCodec, sessions: SessionStore) -> Identity:
    """cookie -> token -> user id. Anything missing or invalid is ANONYMOUS."""
    if not cookie_value:
        return ANONYMOUS
    token = codec.decode(cookie_value)
    if not token:
        return ANONYMOUS
    user_id = sessions.resolve(token)
    if user_id is None:
        return ANONYMOUS
    return Authenticated(user_id)


def load_identity_from_request(request: Request) -> Identity:
    state = request.app.state
    return resolve_identity(request.cookies.get(COOKIE_NAME), state.codec, state.sessions)


def current_identity(request: Request) -> Identity:
    ident = getattr(request.state, "identity", None)
    if ident is not None:
        return ident
    return load_identity_from_request(request)


def require_user(request: Request) -> Authenticated:
    ident = current_identity(request)
    if isinstance(ident, Authenticated):
        return ident
    next_url = str(request.url.path)
    if request.url.query:
        next_url += "?" + request.url.query
    loc = "/login?next=" + quote(next_url, safe="/")
    raise HTTPException(status_code=303, headers={"Location": loc})


def safe_next(next_url: str) -> str:
    """Only local paths are allowed as post-login targets."""
    n = (next_url or "").strip()
    if not n.startswith("/") or n.startswith("//") or "\\" in n:
        return "/"
    return n


def cookie_settings(settings: Settings) -> dict:
    out = {"httponly": True, "samesite": "strict", "secure": settings.cookie_secure, "path": "/"}
    if settings.session_max_age:
        out["max_age"] = settings.session_max_age
    return out
