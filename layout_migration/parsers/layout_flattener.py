"""
Flattening of nested layout values.

Some process steps add several sections to the layout field at once, so the
destination value can look like::

    [Section, [Section, Section], None, Section]

The layout field only supports a single-dimensional list of sections.  The
helpers below collapse such a value depth-first, left to right, dropping
empty placeholders at every level before descending.

Empty elements are ``None``, ``""``, ``0``, ``False`` and empty
collections.  A :class:`~layout_migration.models.layout.Section` is never
empty, even when it holds no components, so it always survives.
"""

from __future__ import annotations

from typing import Any, Iterable, List

from layout_migration.models.layout import Branch, Empty, Leaf, Node

_COLLECTIONS = (list, tuple)


def _is_empty(element: Any) -> bool:
    return not element


def flatten(collection: Iterable[Any]) -> List[Any]:
    """Return a new flat list of the leaves in ``collection``.

    The input is never modified.  A value that is not a list or tuple is
    treated as a single element.
    """
    return flatten_node(to_node(collection))


def to_node(value: Any) -> Node:
    """Convert a raw nested layout value into tagged nodes.

    Built with an explicit stack of iterators, so deeply nested input
    cannot hit the interpreter recursion limit.
    """
    if _is_empty(value):
        return Empty()
    if not isinstance(value, _COLLECTIONS):
        return Leaf(value)
    root = Branch()
    stack = [(iter(value), root.children)]
    while stack:
        elements, children = stack[-1]
        try:
            element = next(elements)
        except StopIteration:
            stack.pop()
            continue
        if _is_empty(element):
            children.append(Empty())
        elif isinstance(element, _COLLECTIONS):
            branch = Branch()
            children.append(branch)
            stack.append((iter(element), branch.children))
        else:
            children.append(Leaf(element))
    return root


def flatten_node(node: Node) -> List[Any]:
    """Flatten a tagged node tree, same ordering rules as :func:`flatten`."""
    flat: List[Any] = []
    stack = [iter([node])]
    while stack:
        try:
            current = next(stack[-1])
        except StopIteration:
            stack.pop()
            continue
        if current.kind == "leaf":
            flat.append(current.value)
        elif current.kind == "branch":
            stack.append(iter(current.children))
        # "empty" nodes contribute nothing
    return flat
