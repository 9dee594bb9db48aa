# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

from functools import lru_cache

from argon2 import PasswordHasher
from argon2.exceptions import HashingError as Argon2HashingError
from argon2.exceptions import InvalidHashError, VerificationError

from webforms.errors import HashingError

_PH = PasswordHasher()


def hash_password(plain: str) -> str:
    if not plain:
        raise ValueError("Empty password")
    try:
        return _PH.hash(plain)
    except Argon2HashingError as exc:
        raise HashingError("password hashing failed") from exc


def verify_password(plain: str, hash_value: str) -> bool:
    """Check ``plain`` against an argon2 digest. Malformed digests give False."""
    if not hash_value:
        return False
    try:
        return _PH.verify(hash_value, plain)
    except (VerificationError, InvalidHashError, UnicodeError):
        return False


@lru_cache(maxsize=1)
def decoy_hash() -> str:
    """Digest checked against when the user does not exist (equal cost on both paths)."""
    return _PH.hash("webforms-decoy-password")
