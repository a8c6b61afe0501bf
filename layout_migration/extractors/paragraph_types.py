from __future__ import annotations

from typing import Any, Dict, Optional

from layout_migration.contracts import TypeDatasetReader


class TypeCache:
    """Unbounded, run-scoped memo of paragraph id -> paragraph type."""

    def __init__(self) -> None:
        self._types: Dict[Any, Optional[str]] = {}

    def __contains__(self, source_id: Any) -> bool:
        return source_id in self._types

    def __len__(self) -> int:
        return len(self._types)

    def get(self, source_id: Any) -> Optional[str]:
        return self._types.get(source_id)

    def set(self, source_id: Any, paragraph_type: Optional[str]) -> None:
        self._types[source_id] = paragraph_type

    def reset(self) -> None:
        self._types.clear()


class ParagraphTypeResolver:
    """
    Resolve the type (bundle) of a legacy paragraph from its id.

    The same paragraph can be looked up several times during one run, so
    results are cached per resolver instance, keyed by id only.  Ids that are
    absent from the dataset are cached as ``None`` too.
    """

    def __init__(self, reader: TypeDatasetReader, cache: Optional[TypeCache] = None) -> None:
        self.reader = reader
        self.cache = cache if cache is not None else TypeCache()

    def resolve_type(self, source_id: Any) -> Optional[str]:
        if source_id not in self.cache:
            self.cache.set(source_id, self.reader.lookup_type_by_id(source_id) or None)
        return self.cache.get(source_id)

    def reset(self) -> None:
        self.cache.reset()
