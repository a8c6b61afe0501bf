"""
Exception taxonomy for the layout migration.

``MissingDependencyError`` is the expected, recoverable failure: a paragraph
references a block that was never migrated.  The section-building loop turns
it into a warning and moves on to the next item.  ``ResolutionError`` means
the migrated data is inconsistent and fails the whole row.
``ConfigurationError`` is raised before any resolution work starts.
"""

from __future__ import annotations

from typing import Any, Optional

# Severity levels used by the audit trail.
MESSAGE_ERROR = 1
MESSAGE_WARNING = 2
MESSAGE_NOTICE = 3
MESSAGE_INFORMATIONAL = 4


class LayoutMigrationError(Exception):
    """Base class for every error raised by the layout migration."""


class MissingDependencyError(LayoutMigrationError):
    """Raised when no migrated block corresponds to a paragraph."""

    def __init__(
        self,
        source_id: Any,
        migration_key: str,
        message: Optional[str] = None,
        severity: int = MESSAGE_WARNING,
    ) -> None:
        self.source_id = source_id
        self.migration_key = migration_key
        self.severity = severity
        if message is None:
            message = (
                f"Unable to find related migrated block for source id {source_id} "
                f"in migration {migration_key}"
            )
        super().__init__(message)


class ResolutionError(LayoutMigrationError):
    """Raised when a migrated block exists but its data cannot be resolved."""


class ConfigurationError(LayoutMigrationError):
    """Raised when a required configuration value is missing or invalid."""
