# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Authentication.

This package provides:
- Password hashing/verification (argon2)
- The in-memory session store (token -> user id)
- The session cookie codec (itsdangerous envelope + Fernet)
- Register / login / logout flows
"""
