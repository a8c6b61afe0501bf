"""
duckdb-backed readers for the migration database.

The migration database holds a copy of the legacy paragraph table, the id
maps written by earlier migrations and the migrated block tables::

    paragraphs_item(item_id, bundle)
    migrate_map_<migration_id>(sourceid1, ..., destid1, destid2)
    block_content_field_data(id, type)
    block_content_revision(id, revision_id)

Every reader only issues point queries; nothing here writes.  Values are
always bound as parameters.  Migration ids end up in table names, so they
are validated first.
"""

from __future__ import annotations

import re
from typing import Any, Iterable, List, Optional

import duckdb

from layout_migration.exceptions import ConfigurationError
from layout_migration.models.layout import LookupResult

_IDENTIFIER = re.compile(r"^[A-Za-z0-9_]+$")


def connect(db_path: str, read_only: bool = True) -> duckdb.DuckDBPyConnection:
    """Open the migration database."""
    return duckdb.connect(database=db_path, read_only=read_only)


def table_exists(con: duckdb.DuckDBPyConnection, table_name: str) -> bool:
    row = con.execute(
        "SELECT count(*) FROM information_schema.tables WHERE table_name = ?",
        [table_name],
    ).fetchone()
    return bool(row and row[0])


def map_table_name(migration_id: str) -> str:
    if not migration_id or not _IDENTIFIER.match(migration_id):
        raise ConfigurationError(f"Invalid migration id '{migration_id}'.")
    return f"migrate_map_{migration_id}"


class DuckDBParagraphTypes:
    """Reads paragraph bundles from the legacy ``paragraphs_item`` table."""

    def __init__(self, con: duckdb.DuckDBPyConnection, table: str = "paragraphs_item") -> None:
        self.con = con
        self.table = table

    def lookup_type_by_id(self, source_id: Any) -> Optional[str]:
        row = self.con.execute(
            f"SELECT bundle FROM {self.table} WHERE item_id = ? LIMIT 1", [source_id]
        ).fetchone()
        return row[0] if row else None


class DuckDBMigrateLookup:
    """Looks up destination ids in the id map of an earlier migration."""

    def __init__(self, con: duckdb.DuckDBPyConnection) -> None:
        self.con = con

    def lookup(self, migration_key: str, source_ids: Iterable[Any]) -> List[LookupResult]:
        table = map_table_name(migration_key)
        if not table_exists(self.con, table):
            raise ConfigurationError(f"Migration '{migration_key}' has no id map table {table}.")
        values = list(source_ids)
        if not values:
            return []
        conditions = " AND ".join(f"sourceid{i} = ?" for i in range(1, len(values) + 1))
        query = f"SELECT destid1, destid2 FROM {table} WHERE {conditions} AND destid1 IS NOT NULL"
        rows = self.con.execute(query, values).fetchall()
        return [LookupResult(id=row[0], revision=row[1]) for row in rows]


class DuckDBBlockContent:
    """Point reads against the migrated block tables."""

    def __init__(self, con: duckdb.DuckDBPyConnection) -> None:
        self.con = con

    def lookup_subtype_by_id(self, block_id: Any) -> Optional[str]:
        row = self.con.execute(
            "SELECT type FROM block_content_field_data WHERE id = ? LIMIT 1", [block_id]
        ).fetchone()
        return row[0] if row else None

    def latest_revision_id(self, block_id: Any) -> Any:
        row = self.con.execute(
            "SELECT max(revision_id) FROM block_content_revision WHERE id = ?", [block_id]
        ).fetchone()
        return row[0] if row else None
