"""config.py — Environment configuration, validation limits and logging for notes_api."""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Any

from notes_shared.aws_clients import DYNAMODB_REGION, _get_ddb

__all__ = [
    "DYNAMODB_REGION",
    "LOG_LEVEL",
    "MAX_CONTENT_LENGTH",
    "MAX_TAGS",
    "MAX_TAG_LENGTH",
    "MAX_TITLE_LENGTH",
    "NOTES_TABLE",
    "NotesConfig",
    "logger",
]

# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------

NOTES_TABLE = os.environ.get("NOTES_TABLE", os.environ.get("TABLE_NOTES", "notes"))
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()

MAX_TITLE_LENGTH = 500
MAX_CONTENT_LENGTH = 100_000
MAX_TAGS = 50
MAX_TAG_LENGTH = 100

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

logger = logging.getLogger()
logger.setLevel(getattr(logging, LOG_LEVEL, logging.INFO))


@dataclass(frozen=True)
class NotesConfig:
    """Store client and table binding, built once per execution environment."""

    ddb: Any
    notes_table: str

    @classmethod
    def from_env(cls) -> "NotesConfig":
        return cls(ddb=_get_ddb(DYNAMODB_REGION), notes_table=NOTES_TABLE)
