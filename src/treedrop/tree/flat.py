"""Flat ``{id, parentId}`` rows to nested ``TreeRecord`` trees.

Structural anomalies are recovered rather than rejected:

- a row whose parent is not in the input is promoted to a root (orphan);
- a parent chain that loops back on itself is broken by promoting the
  cycle member that appears first in the input.

Both cases log a warning and processing continues. Children keep input
order; nothing is sorted.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from treedrop.tree.records import (
    DEFAULT_PARENT_KEY,
    FlatRecord,
    TreeRecord,
    validate_flat_records,
)

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

logger = logging.getLogger(__name__)


def _resolve_parents(
    records: list[FlatRecord], root_parent_id: str | None
) -> dict[str, str | None]:
    """Map each id to its effective parent id (None for roots)."""
    known = {record.id for record in records}
    parent_of: dict[str, str | None] = {}

    for record in records:
        parent_id = record.parent_id
        if parent_id is None or parent_id == root_parent_id:
            parent_of[record.id] = None
        elif parent_id not in known:
            logger.warning(
                "Row %r references missing parent %r; promoted to root",
                record.id,
                parent_id,
            )
            parent_of[record.id] = None
        else:
            parent_of[record.id] = parent_id

    return parent_of


def _break_cycles(records: list[FlatRecord], parent_of: dict[str, str | None]) -> None:
    """Promote one member of every parent cycle to root, in place."""
    order = {record.id: index for index, record in enumerate(records)}
    settled: set[str] = set()

    for record in records:
        path: list[str] = []
        on_path: set[str] = set()
        current: str | None = record.id
        while current is not None and current not in settled:
            if current in on_path:
                cycle = path[path.index(current) :]
                head = min(cycle, key=order.__getitem__)
                logger.warning(
                    "Parent cycle %s; promoted %r to root",
                    " -> ".join(cycle),
                    head,
                )
                parent_of[head] = None
                break
            path.append(current)
            on_path.add(current)
            current = parent_of[current]
        settled.update(path)


def build_tree_from_flat(
    records: Iterable[FlatRecord | Mapping[str, Any]],
    *,
    parent_key: str = DEFAULT_PARENT_KEY,
    root_parent_id: str | None = None,
) -> list[TreeRecord]:
    """Nest flat rows under their parents.

    Args:
        records: Rows carrying an ``id`` and a parent reference.
        parent_key: Field holding the parent id in raw mappings.
        root_parent_id: Parent value that marks a root (None is always a root).

    Returns:
        Root records in input order. Each is a new ``TreeRecord`` carrying
        the row's original fields plus ``children``; the input is untouched.

    Raises:
        TreeDataError: If a row is malformed or an id repeats.
    """
    flat = validate_flat_records(records, parent_key=parent_key)
    parent_of = _resolve_parents(flat, root_parent_id)
    _break_cycles(flat, parent_of)

    nodes = {
        record.id: TreeRecord.model_validate({**record.model_dump(), "children": []})
        for record in flat
    }

    roots: list[TreeRecord] = []
    for record in flat:
        node = nodes[record.id]
        parent_id = parent_of[record.id]
        if parent_id is None:
            roots.append(node)
        else:
            nodes[parent_id].children.append(node)

    return roots
