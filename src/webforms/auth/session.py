# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import base64
import hmac
from typing import Optional

from cryptography.fernet import Fernet, InvalidToken
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.hkdf import HKDF
from itsdangerous import BadData, URLSafeTimedSerializer

COOKIE_NAME = "session_id"


def _fernet_key(secret: str) -> bytes:
    hkdf = HKDF(algorithm=hashes.SHA256(), length=32, salt=None, info=b"webforms.session.cookie")
    return base64.urlsafe_b64encode(hkdf.derive(secret.encode("utf-8")))


class SessionCookieCodec:
    """Turns a session token into a cookie value and back.

    The token is encrypted with Fernet (key derived from the secret) and the
    ciphertext is wrapped in a signed, timestamped itsdangerous envelope.
    ``decode`` returns None for anything it did not produce itself: bad
    signature, non-canonical signature encoding, expired envelope, foreign key
    or garbage.
    """

    def __init__(self, secret_key: str, *, salt: str = "webforms.session.v1", max_age: Optional[int] = None) -> None:
        if not secret_key:
            raise ValueError("secret_key is required")
        self._serializer = URLSafeTimedSerializer(secret_key=secret_key, salt=salt)
        self._signer = self._serializer.make_signer(salt)
        self._fernet = Fernet(_fernet_key(secret_key))
        self._max_age = max_age or None

    def encode(self, token: str) -> str:
        ciphertext = self._fernet.encrypt(token.encode("utf-8")).decode("ascii")
        return self._serializer.dumps(ciphertext)

    def decode(self, cookie_value: str) -> Optional[str]:
        if not cookie_value:
            return None
        try:
            head, sig = cookie_value.rsplit(".", 1)
            # itsdangerous accepts signatures whose unused base64 bits differ;
            # only the exact encoding we emit is valid here.
            if not hmac.compare_digest(self._signer.get_signature(head), sig.encode("ascii")):
                return None
            ciphertext = self._serializer.loads(cookie_value, max_age=self._max_age)
            if not isinstance(ciphertext, str):
                return None
            return self._fernet.decrypt(ciphertext.encode("ascii")).decode("utf-8")
        except (ValueError, BadData, InvalidToken):
            return None
