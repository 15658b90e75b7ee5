"""Runtime configuration model for bulksync.

This module owns all environment variable parsing and validation.
Other modules consume a typed config object instead of raw env reads.
"""

from __future__ import annotations

from dataclasses import dataclass
import os
from pathlib import Path
import re

from core.constants import (
    DEFAULT_DATABASE_PATH,
    DEFAULT_TABLE_PREFIX,
    FALSE_ENV_VALUES,
    TRUE_ENV_VALUES,
)
from core.errors import BulkSyncConfigError

_TABLE_PREFIX_PATTERN = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$|^$")


@dataclass(frozen=True)
class BulkSyncConfig:
    """Validated runtime configuration.

    Attributes:
        database_path: SQLite database file holding the lookup tables.
        table_prefix: Prefix prepended to every lookup table name.
        collapse_duplicates: Collapse duplicate submitted lines before diffing.
    """

    database_path: Path
    table_prefix: str = DEFAULT_TABLE_PREFIX
    collapse_duplicates: bool = False

    @classmethod
    def from_env(cls) -> "BulkSyncConfig":
        """Build config from process environment variables.

        Returns:
            A validated config object.

        Raises:
            BulkSyncConfigError: If environment values are invalid.
        """
        database_value = os.getenv("BULKSYNC_DATABASE_PATH", str(DEFAULT_DATABASE_PATH))
        table_prefix = _parse_table_prefix(
            os.getenv("BULKSYNC_TABLE_PREFIX", DEFAULT_TABLE_PREFIX)
        )
        collapse_duplicates = _parse_flag(
            "BULKSYNC_COLLAPSE_DUPLICATES",
            os.getenv("BULKSYNC_COLLAPSE_DUPLICATES", "false"),
        )
        return cls(
            database_path=Path(database_value).expanduser().resolve(),
            table_prefix=table_prefix,
            collapse_duplicates=collapse_duplicates,
        )


def _parse_table_prefix(raw_value: str) -> str:
    """Validate the table prefix environment value.

    Args:
        raw_value: Raw string from environment.

    Returns:
        The prefix, unchanged.

    Raises:
        BulkSyncConfigError: If the prefix is not a SQL identifier fragment.
    """
    if _TABLE_PREFIX_PATTERN.match(raw_value):
        return raw_value
    raise BulkSyncConfigError(
        "Invalid BULKSYNC_TABLE_PREFIX value: "
        f"expected letters, digits and underscores, got '{raw_value}'. "
        "Set BULKSYNC_TABLE_PREFIX to a plain identifier prefix such as 'ann_'."
    )


def _parse_flag(env_name: str, raw_value: str) -> bool:
    """Parse a boolean environment flag.

    Args:
        env_name: Variable name for error context.
        raw_value: Raw string from environment.

    Returns:
        Parsed boolean.

    Raises:
        BulkSyncConfigError: If value is not a recognized boolean.
    """
    normalized = raw_value.strip().lower()
    if normalized in TRUE_ENV_VALUES:
        return True
    if normalized in FALSE_ENV_VALUES:
        return False
    raise BulkSyncConfigError(
        f"Invalid {env_name} value: expected one of "
        f"{TRUE_ENV_VALUES + FALSE_ENV_VALUES[:-1]}, got '{raw_value}'."
    )
