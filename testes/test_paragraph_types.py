import os
import sys

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from layout_migration.extractors.paragraph_types import ParagraphTypeResolver, TypeCache


def test_repeated_lookups_hit_cache(type_reader):
    resolver = ParagraphTypeResolver(type_reader)
    assert resolver.resolve_type(1) == "text"
    assert resolver.resolve_type(1) == "text"
    assert resolver.resolve_type(2) == "image"
    assert type_reader.calls == [1, 2]


def test_absent_id_returns_none_and_is_cached(type_reader):
    resolver = ParagraphTypeResolver(type_reader)
    assert resolver.resolve_type(999) is None
    assert resolver.resolve_type(999) is None
    assert type_reader.calls == [999]


def test_reset_forces_new_read(type_reader):
    resolver = ParagraphTypeResolver(type_reader)
    resolver.resolve_type(3)
    resolver.reset()
    resolver.resolve_type(3)
    assert type_reader.calls == [3, 3]


def test_each_resolver_owns_its_cache(type_reader):
    first = ParagraphTypeResolver(type_reader)
    second = ParagraphTypeResolver(type_reader)
    first.resolve_type(4)
    second.resolve_type(4)
    assert type_reader.calls == [4, 4]
    assert len(first.cache) == 1


def test_shared_cache_can_be_passed_in(type_reader):
    cache = TypeCache()
    ParagraphTypeResolver(type_reader, cache).resolve_type(1)
    ParagraphTypeResolver(type_reader, cache).resolve_type(1)
    assert type_reader.calls == [1]
    assert 1 in cache
