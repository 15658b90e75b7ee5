"""Bulksync exception hierarchy.

This module defines traceable domain errors with clear boundaries.
Each subsystem raises a specific error type for debuggability.
"""

from __future__ import annotations


class BulkSyncError(Exception):
    """Base exception for all bulksync failures."""


class BulkSyncConfigError(BulkSyncError):
    """Raised for invalid runtime configuration."""


class BulkSyncSchemaError(BulkSyncError):
    """Raised for schema registry lookup failures."""


class UnknownDomainError(BulkSyncSchemaError):
    """Raised when a domain has no registered schema descriptor."""


class BulkSyncStoreError(BulkSyncError):
    """Raised for row store read and write failures."""


class BulkSyncConflictError(BulkSyncError):
    """Raised when a table changed after its bulk text was rendered."""


class BulkSyncSpecError(BulkSyncError):
    """Raised for invalid or unsupported sync-spec files."""


class BulkSyncDependencyError(BulkSyncError):
    """Raised when an optional runtime dependency is missing."""
