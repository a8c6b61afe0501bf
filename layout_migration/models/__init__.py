"""
Data models shared by the layout migration.

:mod:`layout_migration.models.layout` holds the pydantic models for layout
items, components and sections, the tagged nodes used to describe nested
layout values, and the outcome types returned by component resolution.
"""

from .layout import (
    DEFAULT_LAYOUT,
    DEFAULT_REGION,
    Branch,
    Component,
    Empty,
    LayoutItem,
    Leaf,
    LookupResult,
    Missing,
    Node,
    Resolution,
    Resolved,
    Section,
)

__all__ = [
    "DEFAULT_LAYOUT",
    "DEFAULT_REGION",
    "Branch",
    "Component",
    "Empty",
    "LayoutItem",
    "Leaf",
    "LookupResult",
    "Missing",
    "Node",
    "Resolution",
    "Resolved",
    "Section",
]
