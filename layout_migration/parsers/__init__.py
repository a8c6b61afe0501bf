"""
Builders and normalizers for layout values.

Currently this subpackage exposes ``flatten`` from
:mod:`layout_migration.parsers.layout_flattener` and ``SectionBuilder`` from
:mod:`layout_migration.parsers.section_builder`.
"""

from .layout_flattener import flatten
from .section_builder import SectionBuilder

__all__ = ["flatten", "SectionBuilder"]
