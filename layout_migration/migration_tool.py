"""
High-level orchestration of the layout migration.

This module defines a :class:`LayoutMigrationTool` class that ties together
the paragraph type resolver, the component resolver, the section builder and
the reporting utilities into a complete pipeline.  For every source row it
builds the layout field out of the bundle's default sections and one section
made of the row's paragraphs, flattens it and writes the serialized sections
to a JSON Lines output file.

Configuration is supplied via a JSON file path or directly as a dictionary.
The ``layout`` section must include ``source_field``; ``map`` maps paragraph
types to the block migrations that migrated them.  The ``database`` section
points to the duckdb migration database.  Run settings (dry-run, limit,
output path) live under the ``migration`` key.
"""

from __future__ import annotations

import json
import os
from typing import Any, Callable, Dict, Iterable, List, Optional

from layout_migration.exceptions import ConfigurationError, MissingDependencyError, ResolutionError
from layout_migration.extractors.paragraph_types import ParagraphTypeResolver
from layout_migration.extractors.source_rows import extract_rows_from_csv, extract_rows_from_jsonl
from layout_migration.migrators.component_resolver import ComponentResolver
from layout_migration.migrators.layout_process import (
    LAYOUT_PROPERTY,
    DefaultLayout,
    ParagraphsLayout,
    pre_row_save,
)
from layout_migration.migrators.storage import (
    DuckDBBlockContent,
    DuckDBMigrateLookup,
    DuckDBParagraphTypes,
    connect,
)
from layout_migration.models.layout import DEFAULT_LAYOUT, DEFAULT_REGION, LayoutItem, Section
from layout_migration.parsers.layout_flattener import flatten
from layout_migration.parsers.section_builder import SectionBuilder
from layout_migration.utils.config_store import JsonConfigStore
from layout_migration.utils.errors import (
    MigrationReporter,
    handle_missing_dependency,
    report_error,
    report_ok,
)


def _item_id(item: Any) -> Any:
    return item.get("value") if isinstance(item, dict) else item


def _field_items(value: Any) -> List[Any]:
    """Items of a paragraphs field value.  A lone ``{"value": id}`` item is
    wrapped; anything else that is not a list or tuple has no items."""
    if isinstance(value, dict):
        return [value] if "value" in value else []
    if isinstance(value, (list, tuple)):
        return list(value)
    return []


class LayoutMigrationTool:
    """
    Encapsulates all state and behavior required to migrate the layouts of
    a set of legacy nodes.  Collaborators default to the duckdb database and
    the JSON configuration exports named in the configuration; any of them
    can be passed in instead.  One instance corresponds to one run: its
    paragraph type cache lives as long as the instance.
    """

    def __init__(
        self,
        config: Optional[Dict[str, Any]] = None,
        *,
        config_file: Optional[str] = None,
        type_reader=None,
        lookup=None,
        subtype_reader=None,
        revision_reader=None,
        config_store=None,
        reporter: Optional[MigrationReporter] = None,
        uuid_factory: Optional[Callable[[], str]] = None,
    ) -> None:
        if config_file and os.path.exists(config_file):
            with open(config_file, "r", encoding="utf-8") as f:
                config = json.load(f)
        elif config is None:
            # Default configuration
            config = {}

        # Ensure essential keys exist to prevent KeyErrors
        config.setdefault("database", {})
        config["database"].setdefault("path", os.getenv("LAYOUT_MIGRATION_DB", "data/migration.duckdb"))

        config.setdefault("layout", {})
        config["layout"].setdefault("source_field", None)
        config["layout"].setdefault("bundle", None)
        config["layout"].setdefault("region", DEFAULT_REGION)
        config["layout"].setdefault("layout_template", DEFAULT_LAYOUT)
        config["layout"].setdefault("config_dir", os.getenv("LAYOUT_MIGRATION_CONFIG_DIR", "config/sync"))
        config["layout"].setdefault("map", {})

        config.setdefault("migration", {})
        config["migration"].setdefault("id", "")
        config["migration"].setdefault("dry_run", False)
        config["migration"].setdefault("limit", None)
        config["migration"].setdefault("display_messages", True)
        config["migration"].setdefault("output", "reports/layouts.jsonl")

        self.config = config
        self._con = None

        if None in (type_reader, lookup, subtype_reader, revision_reader):
            self._con = connect(config["database"]["path"])
            block_content = DuckDBBlockContent(self._con)
            type_reader = type_reader or DuckDBParagraphTypes(self._con)
            lookup = lookup or DuckDBMigrateLookup(self._con)
            subtype_reader = subtype_reader or block_content
            revision_reader = revision_reader or block_content
        if config_store is None:
            config_store = JsonConfigStore(config["layout"]["config_dir"])

        self.paragraph_types = ParagraphTypeResolver(type_reader)
        self.component_resolver = ComponentResolver(lookup, subtype_reader, revision_reader, uuid_factory)
        self.section_builder = SectionBuilder(config_store)
        self.reporter = reporter or MigrationReporter(
            config["migration"]["id"],
            display_messages=config["migration"]["display_messages"],
        )

    def log_message(self, message: str, level: str = "INFO") -> None:
        print(f"[{level}] {message}")
        # Append to log file
        os.makedirs("reports/migration", exist_ok=True)
        with open("reports/migration/migration.log", "a", encoding="utf-8") as f:
            f.write(f"{level}: {message}\n")

    @property
    def connection(self):
        """The duckdb connection, or ``None`` when every reader was injected."""
        return self._con

    def close(self) -> None:
        if self._con is not None:
            self._con.close()
            self._con = None

    def extract_rows(self, csv_path: Optional[str] = None, jsonl_path: Optional[str] = None) -> List[Dict[str, Any]]:
        rows: List[Dict[str, Any]] = []
        source_field = self.config["layout"]["source_field"]
        if csv_path and os.path.exists(csv_path):
            self.log_message(f"Extracting rows from CSV {csv_path}")
            try:
                rows.extend(extract_rows_from_csv(csv_path, source_field))
            except ValueError as e:
                self.log_message(f"Error extracting CSV: {e}", "ERROR")
        if jsonl_path and os.path.exists(jsonl_path):
            self.log_message(f"Extracting rows from JSON Lines {jsonl_path}")
            try:
                rows.extend(extract_rows_from_jsonl(jsonl_path))
            except ValueError as e:
                self.log_message(f"Error extracting JSON Lines: {e}", "ERROR")
        return rows

    def build_items(
        self, source_items: Iterable[Any], migration_key_map: Optional[Dict[str, str]], reporter=None
    ) -> List[LayoutItem]:
        """
        Turn raw field items into layout items, in field order.

        Every paragraph type must have a migration in ``migration_key_map``;
        this is checked for the whole field before any block is resolved.
        Paragraphs missing from the legacy table are reported and skipped.

        :raises ConfigurationError: if the map is missing or lacks a type.
        """
        if migration_key_map is None:
            raise ConfigurationError("No paragraph type to migration map configured.")
        items: List[LayoutItem] = []
        for delta, raw in enumerate(_field_items(source_items)):
            source_id = _item_id(raw)
            paragraph_type = self.paragraph_types.resolve_type(source_id)
            if paragraph_type is None:
                handle_missing_dependency(
                    MissingDependencyError(
                        source_id, "", message=f"Unable to find paragraph type for source id {source_id}"
                    ),
                    reporter or self.reporter,
                )
                continue
            if paragraph_type not in migration_key_map:
                raise ConfigurationError(
                    f"No migration configured for paragraph type '{paragraph_type}' (source id {source_id})."
                )
            items.append(LayoutItem(
                type=paragraph_type,
                source_id=source_id,
                delta=delta,
                migration_key=migration_key_map[paragraph_type],
            ))
        return items

    def transform_paragraphs_to_section(
        self,
        source_items: Iterable[Any],
        migration_key_map: Optional[Dict[str, str]],
        *,
        reporter=None,
        region: Optional[str] = None,
        layout_template: Optional[str] = None,
    ) -> Section:
        """
        Build one section holding a component per resolvable paragraph.

        Paragraphs whose block was never migrated are recorded as warnings
        and skipped; the other components keep their source order.

        :param source_items: Field items (``{"value": id}``) or bare ids.
        :param migration_key_map: Paragraph type -> block migration id.
        :param reporter: Audit trail, defaults to the tool's reporter.
        :return: The section.
        :raises ConfigurationError: see :meth:`build_items`.
        :raises ResolutionError: if a migrated block is inconsistent.
        """
        reporter = reporter or self.reporter
        region = region or self.config["layout"]["region"]
        items = self.build_items(source_items, migration_key_map, reporter)
        section = self.section_builder.new_section(
            layout_template=layout_template or self.config["layout"]["layout_template"]
        )
        for item in items:
            outcome = self.component_resolver.try_resolve(item, region)
            if outcome.ok:
                section.append_component(outcome.component)
            else:
                # Keep the row, only this paragraph is dropped.
                handle_missing_dependency(outcome.error, reporter)
        return section

    def default_sections_for(self, bundle_key: str) -> List[Section]:
        """Default sections of ``bundle_key``; an empty list means none."""
        return self.section_builder.load_defaults(bundle_key)

    def flatten(self, raw_layout_value: Any) -> List[Any]:
        return flatten(raw_layout_value)

    def migrate_rows(self, rows: Iterable[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """
        Build the layout field of every row.  Rows whose data is
        inconsistent are reported and skipped; the rest of the batch
        continues.  If ``dry_run`` is enabled the results are only
        returned, nothing is written to the output file.

        :param rows: Source rows.
        :return: One ``{"id": ..., "layout_builder__layout": [...]}``
            entry per migrated row.
        :raises ConfigurationError: if ``layout.source_field`` is not set.
        """
        layout_config = self.config["layout"]
        dry_run: bool = self.config["migration"].get("dry_run", False)
        limit: Optional[int] = self.config["migration"].get("limit")
        output: str = self.config["migration"]["output"]

        if not layout_config.get("source_field"):
            raise ConfigurationError("Missing source_field for paragraph layout process plugin.")

        paragraphs = ParagraphsLayout(layout_config, self)
        defaults = DefaultLayout({"bundle": layout_config.get("bundle")}, self)
        results: List[Dict[str, Any]] = []
        count = 0

        for row in rows:
            if limit is not None and count >= limit:
                break
            count += 1
            row_id = row.get("nid", row.get("id"))
            self.reporter.source_id = row_id
            self.log_message(f"Building layout for row '{row_id}'")

            try:
                row.setdefault("destination", {})[LAYOUT_PROPERTY] = [
                    defaults.transform(None, row, self.reporter),
                    paragraphs.transform(None, row, self.reporter),
                ]
                pre_row_save(row, LAYOUT_PROPERTY)
            except (ResolutionError, ConfigurationError) as e:
                code = "CONFIGURATION" if isinstance(e, ConfigurationError) else "ROW_FAILED"
                report_error(code, row, e)
                self.log_message(f"Failed to build layout for row '{row_id}': {e}", "ERROR")
                continue
            except Exception as e:
                report_error("ROW_FAILED", row, e)
                self.log_message(f"Unexpected error building layout for row '{row_id}': {e}", "ERROR")
                continue

            sections = row["destination"][LAYOUT_PROPERTY]
            entry = {"id": row_id, LAYOUT_PROPERTY: [s.to_config() for s in sections]}
            results.append(entry)
            report_ok("LAYOUT_BUILT", row, {"sections": len(sections)})

            if dry_run:
                self.log_message(f"Dry-run: would write layout for row '{row_id}'")
            else:
                os.makedirs(os.path.dirname(output) or ".", exist_ok=True)
                with open(output, "a", encoding="utf-8") as f:
                    json.dump(entry, f, ensure_ascii=False, default=str)
                    f.write("\n")

        self.reporter.source_id = None
        self.log_message(f"Built layouts for {len(results)} of {count} rows")
        return results
