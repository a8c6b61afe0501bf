"""
Resolution of paragraph references into layout components.

A paragraph was migrated into a block by another migration.  To place it in
a layout we need the id of that block, its type and its latest revision.
The lookup can legitimately find nothing (the block was never migrated),
which is reported as :class:`MissingDependencyError`.  A block that exists
but has no readable type is inconsistent data and raises
:class:`ResolutionError`.
"""

from __future__ import annotations

import uuid as uuid_lib
from typing import Any, Callable, Optional

from layout_migration.contracts import MigrationLookup, RevisionReader, SubtypeReader
from layout_migration.exceptions import MissingDependencyError, ResolutionError
from layout_migration.models.layout import (
    DEFAULT_REGION,
    Component,
    LayoutItem,
    Missing,
    Resolution,
    Resolved,
)


def _uuid4() -> str:
    return str(uuid_lib.uuid4())


class ComponentResolver:
    def __init__(
        self,
        lookup: MigrationLookup,
        subtype_reader: SubtypeReader,
        revision_reader: RevisionReader,
        uuid_factory: Optional[Callable[[], str]] = None,
    ) -> None:
        self.lookup = lookup
        self.subtype_reader = subtype_reader
        self.revision_reader = revision_reader
        self.uuid_factory = uuid_factory or _uuid4

    def lookup_block(self, migration_key: str, source_id: Any) -> Any:
        """
        Find the id of the block migrated from ``source_id``.

        When the lookup returns several rows the first one wins; the order
        is whatever the lookup service returns.

        :raises MissingDependencyError: if nothing was migrated for the id.
        """
        results = self.lookup.lookup(migration_key, [source_id])
        if not results:
            raise MissingDependencyError(source_id, migration_key)
        return results[0].id

    def resolve(self, item: LayoutItem, region: str = DEFAULT_REGION) -> Component:
        block_id = self.lookup_block(item.migration_key, item.source_id)
        # Point lookup of the type, the block itself is never loaded.
        block_type = self.subtype_reader.lookup_subtype_by_id(block_id)
        if not block_type:
            raise ResolutionError(
                f"An unknown error occurred trying to find the block type from migration "
                f"item type {item.type} with id {item.source_id}."
            )
        revision_id = self.revision_reader.latest_revision_id(block_id)
        return Component.inline_block(
            uuid=self.uuid_factory(),
            target_type=block_type,
            target_revision_id=revision_id,
            weight=item.delta,
            region=region,
        )

    def try_resolve(self, item: LayoutItem, region: str = DEFAULT_REGION) -> Resolution:
        """Like :meth:`resolve` but returns a missing dependency as a value."""
        try:
            return Resolved(self.resolve(item, region))
        except MissingDependencyError as e:
            return Missing(e)
