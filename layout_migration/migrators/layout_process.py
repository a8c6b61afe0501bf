"""
Process steps that build the layout field of a migrated node.

:class:`ParagraphsLayout` turns the legacy paragraphs field of a row into a
single section.  :class:`DefaultLayout` supplies the default sections of the
node bundle.  Both can contribute to the same destination property, so the
result is nested; :func:`pre_row_save` flattens it before the row is
written.

Rows are plain dictionaries.  Source fields sit at the top level, constants
under ``constants`` and computed values under ``destination``::

    {
        "nid": 12,
        "field_paragraphs": [{"value": 7}, {"value": 9}],
        "constants": {"map": {"text": "d7_paragraph_text"}},
        "destination": {"layout_builder__layout": [...]},
    }
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from layout_migration.contracts import Reporter
from layout_migration.exceptions import ConfigurationError
from layout_migration.models.layout import Section
from layout_migration.parsers.layout_flattener import flatten

LAYOUT_PROPERTY = "layout_builder__layout"


class ParagraphsLayout:
    """
    Build one section from the paragraphs field of a row.

    Configuration keys:

    * ``source_field`` (required): the source field holding paragraph ids.
    * ``map``: paragraph type -> block migration id, used when the row has
      no ``constants.map``.
    * ``region`` / ``layout_template``: where the components go.
    """

    def __init__(self, configuration: Dict[str, Any], tool: Any) -> None:
        self.configuration = configuration
        self.tool = tool

    def transform(self, value: Any, row: Dict[str, Any], reporter: Optional[Reporter] = None) -> Section:
        source_field = self.configuration.get("source_field")
        if not source_field:
            raise ConfigurationError("Missing source_field for paragraph layout process plugin.")

        # The whole field is needed to build the section, the incoming value is ignored.
        values = row.get(source_field) or []
        migration_key_map = (row.get("constants") or {}).get("map") or self.configuration.get("map")
        return self.tool.transform_paragraphs_to_section(
            values,
            migration_key_map,
            reporter=reporter,
            region=self.configuration.get("region"),
            layout_template=self.configuration.get("layout_template"),
        )


class DefaultLayout:
    """
    Add the default layout of a bundle.

    With a ``bundle`` configured, returns the bundle's default sections, or
    ``None`` when it has none.  Without one the incoming value passes
    through unchanged.
    """

    def __init__(self, configuration: Dict[str, Any], tool: Any) -> None:
        self.configuration = configuration
        self.tool = tool

    def transform(self, value: Any, row: Dict[str, Any], reporter: Optional[Reporter] = None) -> Any:
        bundle = self.configuration.get("bundle")
        if bundle:
            sections = self.tool.default_sections_for(bundle)
            return sections or None
        return value


def pre_row_save(row: Dict[str, Any], destination_property: str = LAYOUT_PROPERTY) -> Dict[str, Any]:
    """Flatten ``destination_property`` of ``row`` in place, if it is set."""
    destination = row.get("destination") or {}
    current: Optional[List[Any]] = destination.get(destination_property)
    if current:
        destination[destination_property] = flatten(current)
    return row
