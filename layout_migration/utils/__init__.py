"""
Utility helpers used by the migration tool.

This subpackage exposes convenience functions for structured logging and
the handling of missing block dependencies.
"""

from .errors import ERRORS, MigrationReporter, handle_missing_dependency, report_error, report_ok

__all__ = ["ERRORS", "MigrationReporter", "handle_missing_dependency", "report_error", "report_ok"]
