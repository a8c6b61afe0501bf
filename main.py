"""
Entry point for the legacy paragraphs to layout sections migration.
"""

import glob
import os

from layout_migration.exceptions import ConfigurationError
from layout_migration.migration_tool import LayoutMigrationTool
from layout_migration.utils.pre_flight_checks import PreFlightCheckError, run_layout_pre_flight_checks

CONFIG_FILE = "config/migration_config.json"


def main():
    """
    Main function to run the layout migration.
    """
    tool = LayoutMigrationTool(config_file=CONFIG_FILE)
    tool.log_message("Starting layout migration.")

    try:
        run_layout_pre_flight_checks(tool.connection, tool.config["layout"]["map"].values())
    except (PreFlightCheckError, ConfigurationError) as e:
        tool.log_message(str(e), level="ERROR")
        tool.close()
        return

    # Dynamically find export files in the 'docs' directory
    docs_path = "docs/"
    csv_files = glob.glob(os.path.join(docs_path, "*.csv"))
    jsonl_files = glob.glob(os.path.join(docs_path, "*.jsonl"))

    tool.log_message(f"Discovered CSV files: {csv_files}", level="DEBUG")
    tool.log_message(f"Discovered JSON Lines files: {jsonl_files}", level="DEBUG")

    if not csv_files and not jsonl_files:
        tool.log_message(
            f"No node export files (.csv or .jsonl) found in '{docs_path}' directory.",
            level="ERROR",
        )
        tool.close()
        return

    rows = []
    for csv_path in csv_files:
        rows.extend(tool.extract_rows(csv_path=csv_path))
    for jsonl_path in jsonl_files:
        rows.extend(tool.extract_rows(jsonl_path=jsonl_path))

    if not rows:
        tool.log_message("No rows found in any of the export files.", level="ERROR")
        tool.close()
        return

    tool.log_message(f"Found a total of {len(rows)} rows to migrate.")

    try:
        tool.migrate_rows(rows)
    except ConfigurationError as e:
        tool.log_message(str(e), level="ERROR")
    finally:
        tool.close()

    tool.log_message("Migration process finished.")


if __name__ == "__main__":
    main()
