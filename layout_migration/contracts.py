"""
Contracts for the collaborators the layout migration depends on.

Each protocol names the single capability the core needs.  The duckdb-backed
implementations live in :mod:`layout_migration.migrators.storage` and
:mod:`layout_migration.utils.config_store`; tests pass small stubs instead.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional, Protocol

from layout_migration.models.layout import LookupResult


class TypeDatasetReader(Protocol):
    def lookup_type_by_id(self, source_id: Any) -> Optional[str]:
        ...


class MigrationLookup(Protocol):
    def lookup(self, migration_key: str, source_ids: Iterable[Any]) -> List[LookupResult]:
        ...


class SubtypeReader(Protocol):
    def lookup_subtype_by_id(self, block_id: Any) -> Optional[str]:
        ...


class RevisionReader(Protocol):
    def latest_revision_id(self, block_id: Any) -> Any:
        ...


class LayoutConfigStore(Protocol):
    def get_layout_config(self, bundle_key: str) -> Optional[List[Dict[str, Any]]]:
        ...


class Reporter(Protocol):
    """Audit trail of the current migration run.

    Implementations may also provide ``display(message)`` for a
    human-visible channel; callers check for it with ``getattr``.
    """

    def record_warning(self, message: str, severity: int) -> None:
        ...
