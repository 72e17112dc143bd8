"""Drop decision engine for tree-table drag-and-drop.

``compute_drop_result()`` takes a drag source, a hovered target row and the
raw instruction the interaction layer derived from pointer geometry, and
decides against a ``NodeMap`` snapshot:

1. both ids must exist, differ, and the source must not be an ancestor of
   the target (no drops into the dragged subtree);
2. ``below-ancestor`` is redirected to ``below`` the target's ancestor at
   the source's level;
3. ``above``/``below`` only reorder siblings at the same level;
   ``make-child`` only targets a row one level shallower;
4. drops that would leave the tree unchanged are no-ops.

Illegal and no-op drops both return ``BLOCKED``. They are not errors: a
blocked drag simply snaps back, so nothing is raised or logged.
"""

from __future__ import annotations

from treedrop.models.dnd import (
    BLOCKED,
    DropResult,
    IndicatorKind,
    NodeMap,
    RawInstruction,
    TreeNodeMeta,
)


def _is_ancestor(ancestor_id: str, descendant_id: str, node_map: NodeMap) -> bool:
    current = node_map.get(descendant_id)
    while current is not None and current.parent_id is not None:
        if current.parent_id == ancestor_id:
            return True
        current = node_map.get(current.parent_id)
    return False


def _ancestor_at_level(node_id: str, level: int, node_map: NodeMap) -> str | None:
    """Walk up from ``node_id`` (inclusive) to the node at ``level``."""
    current = node_map.get(node_id)
    while current is not None:
        if current.level == level:
            return current.id
        if current.parent_id is None:
            return None
        current = node_map.get(current.parent_id)
    return None


def _last_visible_descendant(node_id: str, node_map: NodeMap) -> str:
    """Follow the last-child chain while each node is expanded."""
    current = node_map[node_id]
    while current.is_expanded and current.child_ids:
        current = node_map[current.child_ids[-1]]
    return current.id


def _make_child(source: TreeNodeMeta, target: TreeNodeMeta) -> DropResult:
    if target.is_expanded and target.child_ids:
        # Rendered as "above the first child" so the indicator sits inside
        # the expanded block.
        first_child_id = target.child_ids[0]
        if first_child_id == source.id:
            return BLOCKED
        if source.parent_id == target.id and source.index_among_siblings == 0:
            return BLOCKED
        return DropResult.to(source.id, first_child_id, IndicatorKind.ABOVE)

    if source.parent_id == target.id and target.child_ids[-1:] == (source.id,):
        return BLOCKED
    return DropResult.to(source.id, target.id, IndicatorKind.MAKE_CHILD)


def _above(source: TreeNodeMeta, target: TreeNodeMeta) -> DropResult:
    if (
        source.parent_id == target.parent_id
        and source.index_among_siblings + 1 == target.index_among_siblings
    ):
        return BLOCKED
    return DropResult.to(source.id, target.id, IndicatorKind.ABOVE)


def _below(source: TreeNodeMeta, target: TreeNodeMeta, node_map: NodeMap) -> DropResult:
    if (
        source.parent_id == target.parent_id
        and target.index_among_siblings + 1 == source.index_among_siblings
    ):
        return BLOCKED
    # The line is drawn under the target's whole visible subtree, but the
    # move itself is still "below target".
    anchor_id = _last_visible_descendant(target.id, node_map)
    return DropResult.to(
        source.id, target.id, IndicatorKind.BELOW, indicator_row_id=anchor_id
    )


def compute_drop_result(
    source_id: str,
    target_id: str,
    raw_instruction: RawInstruction | str,
    node_map: NodeMap,
) -> DropResult:
    """Decide the outcome of dropping ``source_id`` on ``target_id``.

    Args:
        source_id: Row being dragged.
        target_id: Row under the pointer.
        raw_instruction: Geometry-derived intent (``above``, ``below``,
            ``make-child`` or ``below-ancestor``).
        node_map: Snapshot from ``build_node_map()``; never mutated.

    Returns:
        A ``DropResult`` with the indicator to paint and the reorder event
        to emit, or ``BLOCKED`` for illegal and no-op drops.
    """
    source = node_map.get(source_id)
    target = node_map.get(target_id)
    if source is None or target is None:
        return BLOCKED
    if source_id == target_id:
        return BLOCKED
    if _is_ancestor(source_id, target_id, node_map):
        return BLOCKED

    try:
        instruction = RawInstruction(raw_instruction)
    except ValueError:
        return BLOCKED

    match instruction:
        case RawInstruction.BELOW_ANCESTOR:
            ancestor_id = _ancestor_at_level(target_id, source.level, node_map)
            if ancestor_id is None:
                return BLOCKED
            return compute_drop_result(
                source_id, ancestor_id, RawInstruction.BELOW, node_map
            )
        case RawInstruction.MAKE_CHILD:
            if target.level != source.level - 1:
                return BLOCKED
            return _make_child(source, target)
        case RawInstruction.ABOVE:
            if target.level != source.level:
                return BLOCKED
            return _above(source, target)
        case RawInstruction.BELOW:
            if target.level != source.level:
                return BLOCKED
            return _below(source, target, node_map)
