"""Apply a ``ReorderEvent`` to nested row data.

The drop engine only decides; storing the result belongs to the host
application. ``apply_reorder()`` is the reference way to do it for
in-memory trees: it returns a new tree and leaves the input alone.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from treedrop.models.dnd import IndicatorKind
from treedrop.tree.records import (
    TreeDataError,
    TreeRecord,
    copy_tree_records,
    validate_tree_records,
)

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from treedrop.models.dnd import ReorderEvent

logger = logging.getLogger(__name__)


def _find(
    siblings: list[TreeRecord], row_id: str
) -> tuple[list[TreeRecord], int, str | None] | None:
    """Locate ``row_id``: the list holding it, its index and its parent id."""
    stack: list[tuple[list[TreeRecord], str | None]] = [(siblings, None)]
    while stack:
        current, parent_id = stack.pop()
        for index, record in enumerate(current):
            if record.id == row_id:
                return current, index, parent_id
            stack.append((record.children, record.id))
    return None


def apply_reorder(
    data: Iterable[TreeRecord | Mapping[str, Any]],
    event: ReorderEvent,
) -> list[TreeRecord]:
    """Move ``event.source_id`` relative to ``event.target_id``.

    ``above``/``below`` place the source next to the target among the
    target's siblings; ``make-child`` appends it as the target's last child.
    The moved record's ``parent_id`` is updated to its new parent.

    Raises:
        TreeDataError: If either id is unknown or the target lies inside
            the source's subtree.
    """
    roots = copy_tree_records(validate_tree_records(data))

    source_at = _find(roots, event.source_id)
    if source_at is None:
        msg = f"Unknown source row {event.source_id!r}"
        raise TreeDataError(msg)
    source_list, source_index, _ = source_at
    source = source_list[source_index]
    if _find([source], event.target_id) is not None:
        msg = f"Cannot move {event.source_id!r} into its own subtree"
        raise TreeDataError(msg)

    del source_list[source_index]
    target_at = _find(roots, event.target_id)
    if target_at is None:
        msg = f"Unknown target row {event.target_id!r}"
        raise TreeDataError(msg)
    target_list, target_index, target_parent_id = target_at
    target = target_list[target_index]

    if event.position == IndicatorKind.MAKE_CHILD:
        source.parent_id = target.id
        target.children.append(source)
    else:
        source.parent_id = target_parent_id
        offset = 1 if event.position == IndicatorKind.BELOW else 0
        target_list.insert(target_index + offset, source)

    logger.debug(
        "Moved %s %s %s", event.source_id, event.position, event.target_id
    )
    return roots
