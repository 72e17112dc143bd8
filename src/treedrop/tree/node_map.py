"""Flatten a nested tree into an id-indexed ``NodeMap`` snapshot.

Every node reachable from the roots gets an entry, collapsed or not, so
ancestor and no-op checks in the drop engine never miss a node. The map
preserves depth-first pre-order.
"""

from __future__ import annotations

from collections.abc import Collection, Iterable, Mapping
from types import MappingProxyType
from typing import Any

from treedrop.models.dnd import NodeMap, TreeNodeMeta
from treedrop.tree.records import TreeDataError, TreeRecord, validate_tree_records


def build_node_map(
    data: Iterable[TreeRecord | Mapping[str, Any]],
    expanded_ids: Collection[str] = (),
) -> NodeMap:
    """Build per-node structural metadata for the whole tree.

    Args:
        data: Root rows, each optionally carrying ``children``.
        expanded_ids: Ids of rows currently expanded in the view. Expansion
            only sets ``is_expanded``; collapsed subtrees are still walked.

    Returns:
        A read-only mapping of id to ``TreeNodeMeta``.

    Raises:
        TreeDataError: If a row is malformed or an id appears twice.
    """
    roots = validate_tree_records(data)
    expanded = frozenset(expanded_ids)
    nodes: dict[str, TreeNodeMeta] = {}

    # (siblings, index, level, parent_id, sibling_ids), pushed reversed
    top_ids = tuple(record.id for record in roots)
    stack = [(roots, i, 0, None, top_ids) for i in reversed(range(len(roots)))]

    while stack:
        siblings, index, level, parent_id, sibling_ids = stack.pop()
        record = siblings[index]
        if record.id in nodes:
            msg = f"Duplicate id {record.id!r} in tree data"
            raise TreeDataError(msg)

        child_ids = tuple(child.id for child in record.children)
        has_children = bool(child_ids)
        nodes[record.id] = TreeNodeMeta(
            id=record.id,
            level=level,
            parent_id=parent_id,
            child_ids=child_ids,
            has_children=has_children,
            is_expanded=has_children and record.id in expanded,
            index_among_siblings=index,
            sibling_ids=sibling_ids,
        )

        stack.extend(
            (record.children, i, level + 1, record.id, child_ids)
            for i in reversed(range(len(record.children)))
        )

    return MappingProxyType(nodes)


def root_ids(node_map: NodeMap) -> tuple[str, ...]:
    """Return the root ids in display order."""
    first = next(iter(node_map.values()), None)
    return first.sibling_ids if first is not None else ()


def visible_row_ids(node_map: NodeMap) -> list[str]:
    """Return ids of rows a renderer shows, top to bottom.

    A row is visible when every ancestor is expanded.
    """
    visible: list[str] = []
    stack = list(reversed(root_ids(node_map)))
    while stack:
        node = node_map[stack.pop()]
        visible.append(node.id)
        if node.is_expanded:
            stack.extend(reversed(node.child_ids))
    return visible
