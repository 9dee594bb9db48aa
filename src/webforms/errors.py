# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Application error types.

Credential and integrity problems are ordinary outcomes and never leave the
auth layer as anything more specific than ``InvalidCredentials`` (or no
identity at all). Storage and hashing failures are internal errors.
"""

from __future__ import annotations


class WebformsError(Exception):
    """Base class for all application errors."""


class DuplicateUsername(WebformsError):
    def __init__(self, username: str) -> None:
        super().__init__(f"username already taken: {username!r}")
        self.username = username


class InvalidCredentials(WebformsError):
    """Unknown user or wrong password. Deliberately does not say which."""


class StorageError(WebformsError):
    """The record store failed (connection, SQL error, ...)."""


class HashingError(WebformsError):
    """Password hashing failed."""


class FormNotFound(WebformsError):
    def __init__(self, form_id: int) -> None:
        super().__init__(f"form {form_id} not found")
        self.form_id = form_id
