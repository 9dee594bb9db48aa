# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import secrets
import threading
import time
from dataclasses import dataclass, field
from typing import Callable, Dict, Optional

TOKEN_BYTES = 32  # 256 bits


@dataclass(frozen=True)
class Session:
    token: str
    user_id: int
    created_at: float = field(default_factory=time.time)


class SessionStore:
    """Process-wide map of session token -> user id.

    Only ``create``, ``resolve`` and ``invalidate`` touch the map (``clear`` is
    for shutdown). Writers serialise on a lock held just for the dict update;
    readers do a single ``dict.get`` and never take it, so lookups do not
    block each other.

    With ``max_age`` set, an entry older than that many seconds is dropped on
    the first ``resolve`` that sees it.
    """

    def __init__(self, *, max_age: Optional[int] = None, clock: Callable[[], float] = time.time) -> None:
        self._sessions: Dict[str, Session] = {}
        self._lock = threading.Lock()
        self._max_age = max_age or None
        self._clock = clock

    def create(self, user_id: int) -> str:
        with self._lock:
            token = secrets.token_urlsafe(TOKEN_BYTES)
            while token in self._sessions:
                token = secrets.token_urlsafe(TOKEN_BYTES)
            self._sessions[token] = Session(token=token, user_id=user_id, created_at=self._clock())
        return token

    def resolve(self, token: str) -> Optional[int]:
        if not token:
            return None
        sess = self._sessions.get(token)
        if sess is None:
            return None
        if self._max_age is not None and self._clock() - sess.created_at > self._max_age:
            self.invalidate(token)
            return None
        return sess.user_id

    def invalidate(self, token: str) -> bool:
        """Drop ``token``. Returns whether a live session was removed."""
        if not token:
            return False
        with self._lock:
            return self._sessions.pop(token, None) is not None

    def clear(self) -> None:
        with self._lock:
            self._sessions.clear()

    def __len__(self) -> int:
        return len(self._sessions)
