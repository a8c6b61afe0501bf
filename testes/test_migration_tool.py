import os
import sys

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

import json

import pytest

from layout_migration.exceptions import ConfigurationError
from layout_migration.migrators.layout_process import (
    LAYOUT_PROPERTY,
    DefaultLayout,
    ParagraphsLayout,
    pre_row_save,
)
from layout_migration.models.layout import Section


@pytest.fixture(autouse=True)
def _run_in_tmp(tmp_path, monkeypatch):
    # Reports and logs are written relative to the working directory.
    monkeypatch.chdir(tmp_path)


def test_unresolvable_item_is_skipped_with_one_warning(make_tool, reporter, key_map):
    tool = make_tool()
    section = tool.transform_paragraphs_to_section([{"value": 1}, {"value": 2}, {"value": 3}], key_map)
    components = section.get_components("content")
    assert [c.target_revision_id for c in components] == [1001, 1003]
    assert [c.weight for c in components] == [0, 2]
    assert len(reporter.warnings) == 1
    assert "source id 2 in migration d7_paragraph_image" in reporter.warnings[0][0]


def test_bare_ids_are_accepted(make_tool, key_map):
    section = make_tool().transform_paragraphs_to_section([1, 3], key_map)
    assert [c.uuid for c in section.get_components()] == ["uuid-1", "uuid-2"]


def test_unmapped_type_fails_before_resolution(make_tool, lookup):
    tool = make_tool()
    with pytest.raises(ConfigurationError):
        tool.transform_paragraphs_to_section([1, 2], {"text": "d7_paragraph_text"})
    assert lookup.calls == []


def test_missing_map_is_configuration_error(make_tool):
    with pytest.raises(ConfigurationError):
        make_tool().transform_paragraphs_to_section([1], None)


def test_paragraph_missing_from_legacy_table_is_warning(make_tool, reporter, key_map):
    section = make_tool().transform_paragraphs_to_section([1, 999], key_map)
    assert len(section.get_components()) == 1
    assert reporter.warnings[0][0] == "Unable to find paragraph type for source id 999"


def test_default_sections(make_tool, default_page_section):
    tool = make_tool()
    assert tool.default_sections_for("article") == []
    sections = tool.default_sections_for("page")
    assert [s.to_config() for s in sections] == [default_page_section]


def test_paragraphs_layout_requires_source_field(make_tool):
    plugin = ParagraphsLayout({}, make_tool())
    with pytest.raises(ConfigurationError):
        plugin.transform(None, {"field_paragraphs": [{"value": 1}]})


def test_paragraphs_layout_prefers_row_constants(make_tool, lookup):
    plugin = ParagraphsLayout({"source_field": "field_paragraphs", "map": {}}, make_tool())
    row = {
        "field_paragraphs": [{"value": 1}],
        "constants": {"map": {"text": "d7_paragraph_text"}},
    }
    section = plugin.transform("ignored", row)
    assert len(section.get_components()) == 1
    assert lookup.calls == [("d7_paragraph_text", [1])]


def test_default_layout_plugin(make_tool):
    tool = make_tool()
    assert DefaultLayout({}, tool).transform("unchanged", {}) == "unchanged"
    assert DefaultLayout({"bundle": "article"}, tool).transform("x", {}) is None
    sections = DefaultLayout({"bundle": "page"}, tool).transform("x", {})
    assert len(sections) == 1 and isinstance(sections[0], Section)


def test_pre_row_save_flattens_layout_property():
    a, b, c = Section(), Section(layout_template="layout_twocol"), Section()
    row = {"destination": {LAYOUT_PROPERTY: [[a, b], None, c]}}
    pre_row_save(row)
    assert row["destination"][LAYOUT_PROPERTY] == [a, b, c]

    untouched = {"destination": {"title": "x"}}
    assert pre_row_save(untouched) == {"destination": {"title": "x"}}


def test_tool_flatten(make_tool):
    assert make_tool().flatten([["A"], None, ["B", ["C"]]]) == ["A", "B", "C"]


def test_migrate_rows_builds_and_writes_layouts(make_tool, default_page_section, tmp_path):
    tool = make_tool()
    rows = [
        {"nid": 10, "title": "Home", "field_paragraphs": [{"value": 1}, {"value": 2}, {"value": 3}]},
        # Block 104 has no type: the row fails but the batch continues.
        {"nid": 11, "title": "Broken", "field_paragraphs": [{"value": 4}]},
        {"nid": 12, "title": "Empty", "field_paragraphs": []},
    ]
    results = tool.migrate_rows(rows)

    assert [r["id"] for r in results] == [10, 12]
    home = results[0][LAYOUT_PROPERTY]
    assert home[0] == default_page_section
    assert [c["weight"] for c in home[1]["components"].values()] == [0, 2]
    assert results[1][LAYOUT_PROPERTY][1]["components"] == {}

    written = (tmp_path / "reports" / "layouts.jsonl").read_text(encoding="utf-8").splitlines()
    assert [json.loads(line)["id"] for line in written] == [10, 12]
    errors = (tmp_path / "reports" / "migration" / "errors.jsonl").read_text(encoding="utf-8")
    assert json.loads(errors.splitlines()[0])["id"] == 11


def test_migrate_rows_dry_run_and_limit(make_tool, tmp_path):
    tool = make_tool(migration={"dry_run": True, "limit": 1})
    rows = [{"nid": 1, "field_paragraphs": [1]}, {"nid": 2, "field_paragraphs": [3]}]
    results = tool.migrate_rows(rows)
    assert [r["id"] for r in results] == [1]
    assert not (tmp_path / "reports" / "layouts.jsonl").exists()


def test_migrate_rows_without_source_field_fails_eagerly(make_tool, lookup):
    tool = make_tool(layout={"source_field": None})
    with pytest.raises(ConfigurationError):
        tool.migrate_rows([{"nid": 1, "field_paragraphs": [1]}])
    assert lookup.calls == []


def test_single_item_field_value_is_wrapped(make_tool, reporter, key_map):
    section = make_tool().transform_paragraphs_to_section({"value": 1}, key_map)
    assert [c.target_revision_id for c in section.get_components()] == [1001]
    assert reporter.warnings == []


def test_scalar_field_value_has_no_items(make_tool, reporter, key_map, lookup):
    tool = make_tool()
    assert tool.build_items(7, key_map) == []
    assert tool.build_items(None, key_map) == []
    assert tool.build_items({"target_id": 1}, key_map) == []
    assert tool.transform_paragraphs_to_section(7, key_map).get_components() == []
    assert reporter.warnings == []
    assert lookup.calls == []


def test_migrate_rows_with_scalar_field_continues_batch(make_tool):
    rows = [
        {"nid": 1, "field_paragraphs": 7},
        {"nid": 2, "field_paragraphs": [{"value": 1}]},
    ]
    results = make_tool(migration={"dry_run": True}).migrate_rows(rows)
    assert [r["id"] for r in results] == [1, 2]
    assert results[0][LAYOUT_PROPERTY][1]["components"] == {}
    assert len(results[1][LAYOUT_PROPERTY][1]["components"]) == 1


def test_unexpected_error_fails_only_its_row(make_tool, lookup, monkeypatch, tmp_path):
    original = lookup.lookup

    def failing_lookup(migration_key, source_ids):
        if list(source_ids) == [3]:
            raise RuntimeError("connection lost")
        return original(migration_key, source_ids)

    monkeypatch.setattr(lookup, "lookup", failing_lookup)
    rows = [
        {"nid": 1, "field_paragraphs": [{"value": 3}]},
        {"nid": 2, "field_paragraphs": [{"value": 1}]},
    ]
    results = make_tool(migration={"dry_run": True}).migrate_rows(rows)

    assert [r["id"] for r in results] == [2]
    errors = (tmp_path / "reports" / "migration" / "errors.jsonl").read_text(encoding="utf-8").splitlines()
    failed = json.loads(errors[0])
    assert failed["id"] == 1
    assert failed["code"] == "ROW_FAILED"
