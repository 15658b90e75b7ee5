"""Core constants used across bulksync modules.

This module centralizes non-domain-specific constants.
Keeping values here avoids magic literals in business logic.
"""

from __future__ import annotations

from pathlib import Path

DEFAULT_DATABASE_PATH = Path(".bulksync") / "lookups.sqlite3"
DEFAULT_TABLE_PREFIX = "ann_"
FINGERPRINT_HASH_ALGORITHM = "sha1"
FINGERPRINT_SEPARATOR = "__"
SNAPSHOT_TOKEN_HASH_ALGORITHM = "sha256"
RENDERED_LINE_SEPARATOR = "\r\n"
LINE_BREAK_PATTERN = r"\r\n|[\r\n]"
ID_COLUMN_NAME = "id"
SYNC_SPEC_VERSION = 1
TRUE_ENV_VALUES = ("1", "true", "yes", "on")
FALSE_ENV_VALUES = ("0", "false", "no", "off", "")
