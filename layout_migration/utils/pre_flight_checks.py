from typing import Iterable

import duckdb

from layout_migration.migrators.storage import map_table_name, table_exists

REQUIRED_TABLES = ("paragraphs_item", "block_content_field_data", "block_content_revision")


class PreFlightCheckError(Exception):
    """Custom exception for pre-flight check failures."""
    pass


def run_layout_pre_flight_checks(con: duckdb.DuckDBPyConnection, migration_ids: Iterable[str]):
    """
    Verifies that the migration database holds everything the layout
    migration reads.

    Args:
        con: An open connection to the migration database.
        migration_ids: The migrations paragraphs are resolved through.

    Raises:
        PreFlightCheckError: If any check fails.
    """
    print("[INFO] Running pre-flight checks...")

    # Check 1: legacy paragraphs and migrated block tables
    for table in REQUIRED_TABLES:
        if not table_exists(con, table):
            raise PreFlightCheckError(f"Table '{table}' not found in the migration database.")

    # Check 2: id maps of the block migrations
    for migration_id in sorted(set(migration_ids)):
        table = map_table_name(migration_id)
        if not table_exists(con, table):
            raise PreFlightCheckError(
                f"Migration '{migration_id}' has not been run: table '{table}' not found."
            )

    print("[INFO] Pre-flight checks passed successfully.")
