from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional

from layout_migration.contracts import LayoutConfigStore
from layout_migration.models.layout import DEFAULT_LAYOUT, Component, Section


class SectionBuilder:
    """Create layout sections, either fresh or from stored defaults."""

    def __init__(self, config_store: Optional[LayoutConfigStore] = None) -> None:
        self.config_store = config_store

    def new_section(
        self,
        components: Optional[Iterable[Component]] = None,
        layout_template: str = DEFAULT_LAYOUT,
        settings: Optional[Dict[str, Any]] = None,
    ) -> Section:
        """
        Create a section holding ``components`` in the order given.

        A pre-built list is stored as-is: each component keeps its weight.
        Use :meth:`Section.append_component` to add after the fact.

        :param components: Components already built, if any.
        :param layout_template: Layout template id for the section.
        :param settings: Layout settings.
        :return: The new section.
        """
        section = Section(layout_template=layout_template, settings=dict(settings or {}))
        for component in components or []:
            section.components_by_region.setdefault(component.region, []).append(component)
        return section

    def load_defaults(self, bundle_key: str) -> List[Section]:
        """Rebuild the default sections stored for ``bundle_key``.

        Returns an empty list when no store is attached or nothing is
        configured for the bundle.
        """
        if self.config_store is None:
            return []
        sections_data = self.config_store.get_layout_config(bundle_key)
        if not sections_data:
            return []
        return [Section.from_config(data) for data in sections_data]
