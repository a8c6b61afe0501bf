#!/usr/bin/env python3
"""
Initializes the duckdb migration database from CSV exports.

Each CSV file in the exports directory becomes a table named after the file,
e.g. ``exports/paragraphs_item.csv`` -> ``paragraphs_item`` and
``exports/migrate_map_d7_paragraph_text.csv`` -> ``migrate_map_d7_paragraph_text``.
Existing tables are left untouched.
"""

import argparse
import os
import re
from pathlib import Path

import duckdb
import pandas as pd

DB_PATH = 'data/migration.duckdb'
EXPORTS_DIR = 'exports'


def table_name_for(csv_file):
    """Table name derived from the CSV file name."""
    return re.sub(r'[^A-Za-z0-9_]', '_', Path(csv_file).stem).lower()


def load_csv(con, csv_file):
    """Create a table from ``csv_file``. Returns the number of rows loaded, or None if it already existed."""
    table_name = table_name_for(csv_file)
    existing_tables = {row[0] for row in con.execute("SHOW TABLES;").fetchall()}
    if table_name in existing_tables:
        print(f"Table '{table_name}' already exists. Skipping.")
        return None

    print(f"Reading CSV file {csv_file}")
    df = pd.read_csv(csv_file)

    # Clean column names so they are valid SQL identifiers
    df.columns = [col.strip().replace(' ', '_').replace('-', '_').lower() for col in df.columns]

    print(f"Creating table '{table_name}'...")
    con.register('df_temp', df)
    con.execute(f"CREATE TABLE {table_name} AS SELECT * FROM df_temp")
    con.unregister('df_temp')
    print(f"Table '{table_name}' created with {len(df)} rows.")
    return len(df)


def initialize_database(db_path=DB_PATH, exports_dir=EXPORTS_DIR):
    """
    Creates the migration database and one table per CSV export.
    """
    os.makedirs(os.path.dirname(db_path) or '.', exist_ok=True)
    con = duckdb.connect(database=db_path, read_only=False)
    try:
        for csv_file in sorted(Path(exports_dir).glob('*.csv')):
            load_csv(con, csv_file)
    finally:
        con.close()
        print("Database connection closed.")


def main():
    parser = argparse.ArgumentParser(description="Load CSV exports into the migration database.")
    parser.add_argument('--db', default=DB_PATH, help="Path of the duckdb database")
    parser.add_argument('--exports', default=EXPORTS_DIR, help="Directory holding the CSV exports")
    args = parser.parse_args()
    initialize_database(args.db, args.exports)


if __name__ == "__main__":
    main()
