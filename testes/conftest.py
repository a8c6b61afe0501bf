import itertools
import os
import sys

import pytest

# Ensure project root is on sys.path for imports when running tests directly
PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from layout_migration.models.layout import LookupResult
from layout_migration.utils.config_store import DictConfigStore


class CountingTypeReader:
    def __init__(self, types):
        self.types = types
        self.calls = []

    def lookup_type_by_id(self, source_id):
        self.calls.append(source_id)
        return self.types.get(source_id)


class StubLookup:
    """Maps (migration_key, source_id) to a list of destination ids."""

    def __init__(self, mapping):
        self.mapping = mapping
        self.calls = []

    def lookup(self, migration_key, source_ids):
        source_ids = list(source_ids)
        self.calls.append((migration_key, source_ids))
        ids = self.mapping.get((migration_key, source_ids[0]), [])
        return [LookupResult(id=block_id, revision=None) for block_id in ids]


class StubBlocks:
    def __init__(self, types, revisions):
        self.types = types
        self.revisions = revisions
        self.subtype_calls = []
        self.revision_calls = []

    def lookup_subtype_by_id(self, block_id):
        self.subtype_calls.append(block_id)
        return self.types.get(block_id)

    def latest_revision_id(self, block_id):
        self.revision_calls.append(block_id)
        return self.revisions.get(block_id)


class ListReporter:
    def __init__(self, with_display=True):
        self.warnings = []
        self.displayed = []
        if with_display:
            self.display = self.displayed.append

    def record_warning(self, message, severity):
        self.warnings.append((message, severity))


def sequential_uuids():
    counter = itertools.count(1)
    return lambda: f"uuid-{next(counter)}"


@pytest.fixture
def type_reader():
    return CountingTypeReader({1: "text", 2: "image", 3: "text", 4: "quote"})


@pytest.fixture
def lookup():
    # Paragraph 2 was never migrated.
    return StubLookup({
        ("d7_paragraph_text", 1): [101],
        ("d7_paragraph_text", 3): [103],
        ("d7_paragraph_quote", 4): [104],
    })


@pytest.fixture
def blocks():
    return StubBlocks(
        types={101: "basic", 102: "image", 103: "basic"},
        revisions={101: 1001, 102: 1002, 103: 1003, 104: 1004},
    )


@pytest.fixture
def reporter():
    return ListReporter()


@pytest.fixture
def key_map():
    return {"text": "d7_paragraph_text", "image": "d7_paragraph_image", "quote": "d7_paragraph_quote"}


@pytest.fixture
def default_page_section():
    return {
        "layout_id": "layout_twocol",
        "layout_settings": {"label": "Header", "column_widths": "50-50"},
        "components": {
            "c-1": {
                "uuid": "c-1",
                "region": "first",
                "configuration": {"id": "field_block:node:page:title", "label_display": "0"},
                "additional": {},
                "weight": 0,
            },
            "c-2": {
                "uuid": "c-2",
                "region": "second",
                "configuration": {
                    "id": "inline_block:basic",
                    "view_mode": "full",
                    "block_revision_id": 55,
                },
                "additional": {"class": "wide"},
                "weight": 3,
            },
        },
        "third_party_settings": {},
    }


@pytest.fixture
def config_store(default_page_section):
    return DictConfigStore({
        "core.entity_view_display.node.page.default": {
            "third_party_settings": {"layout_builder": {"sections": [default_page_section]}},
        },
        "core.entity_view_display.node.article.default": {
            "third_party_settings": {"layout_builder": {"enabled": False}},
        },
    })


@pytest.fixture
def make_tool(type_reader, lookup, blocks, reporter, config_store, key_map):
    from layout_migration.migration_tool import LayoutMigrationTool

    def _make(**overrides):
        config = {
            "layout": {"source_field": "field_paragraphs", "bundle": "page", "map": key_map},
            "migration": {"id": "d7_node_page", "output": "reports/layouts.jsonl"},
        }
        for section, values in overrides.items():
            config.setdefault(section, {}).update(values)
        return LayoutMigrationTool(
            config,
            type_reader=type_reader,
            lookup=lookup,
            subtype_reader=blocks,
            revision_reader=blocks,
            config_store=config_store,
            reporter=reporter,
            uuid_factory=sequential_uuids(),
        )

    return _make
