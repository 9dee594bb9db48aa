# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import hashlib
import logging
import logging.config
import os
from typing import Any, Dict


def get_logging_config(level: str = "INFO") -> Dict[str, Any]:
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "default": {"format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s"},
        },
        "handlers": {
            "default": {
                "class": "logging.StreamHandler",
                "formatter": "default",
                "stream": "ext://sys.stdout",
            },
        },
        "loggers": {
            "webforms": {"handlers": ["default"], "level": level, "propagate": False},
        },
    }


def setup_logging() -> None:
    level = os.getenv("WEBFORMS_LOG_LEVEL", "INFO").upper()
    logging.config.dictConfig(get_logging_config(level))


def log_id(value: object) -> str:
    """Short SHA-256 prefix, for putting usernames/user ids in logs."""
    return hashlib.sha256(str(value).encode("utf-8")).hexdigest()[:12]
