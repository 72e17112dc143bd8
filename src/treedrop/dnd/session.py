"""Per-table drag session wiring pointer events to the drop engine.

Design decisions:
- One ``TreeDragSession`` per rendered table per client, so concurrent
  clients never see each other's drags or indicators
- All collaborators (node map, indicator store, reorder callback) are
  constructor arguments; nothing is looked up from ambient state
- The node map is swapped wholesale via ``update_node_map()``; a gesture
  in flight sees the new snapshot on its next pointer move
- Every terminal event (drop, leave, cancel) clears the indicator
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from treedrop.dnd.hitbox import RowGeometry, classify_instruction, closest_edge
from treedrop.models.dnd import BLOCKED
from treedrop.tree.drop_result import compute_drop_result
from treedrop.tree.indicator_store import IndicatorStore

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from treedrop.dnd.payload import DragSource
    from treedrop.models.dnd import (
        DropResult,
        NodeMap,
        RawInstruction,
        ReorderEvent,
    )

logger = logging.getLogger(__name__)


class TreeDragSession:
    """Tracks the dragged row and turns hover/drop events into decisions."""

    __slots__ = ("_dragged", "_node_map", "_on_reorder", "indicators")

    def __init__(
        self,
        node_map: NodeMap,
        *,
        indicators: IndicatorStore | None = None,
        on_reorder: Callable[[ReorderEvent], Awaitable[None]] | None = None,
    ) -> None:
        self._node_map = node_map
        self._on_reorder = on_reorder
        self._dragged: DragSource | None = None
        self.indicators = indicators if indicators is not None else IndicatorStore()

    @property
    def node_map(self) -> NodeMap:
        return self._node_map

    @property
    def dragged(self) -> DragSource | None:
        """The row being dragged, or None outside a gesture."""
        return self._dragged

    def update_node_map(self, node_map: NodeMap) -> None:
        """Swap in a rebuilt snapshot after the data or expansion changed."""
        self._node_map = node_map

    def start(self, source: DragSource) -> None:
        """Record the row whose handle started a drag.

        A payload rendered from an older snapshot (the row has since moved
        to another parent or level, or is gone) does not start a drag.
        """
        self.indicators.clear()
        meta = self._node_map.get(source.row_id)
        if meta is None or (meta.level, meta.parent_id) != (
            source.level,
            source.parent_id,
        ):
            logger.debug("Ignoring stale drag of row %s", source.row_id)
            self._dragged = None
            return
        self._dragged = source

    def instruction_at(
        self, target_id: str, geometry: RowGeometry | None
    ) -> RawInstruction | None:
        """Classify the pointer over ``target_id`` for the current drag."""
        target = self._node_map.get(target_id)
        if self._dragged is None or target is None:
            return None
        edge = (
            closest_edge(geometry.offset_y, geometry.height)
            if geometry is not None
            else None
        )
        return classify_instruction(self._dragged.level, target.level, edge)

    def drag_over(
        self, target_id: str, instruction: RawInstruction | None
    ) -> DropResult:
        """Recompute the decision for a pointer move and update the indicator."""
        if self._dragged is None or instruction is None:
            self.indicators.clear()
            return BLOCKED
        result = compute_drop_result(
            self._dragged.row_id, target_id, instruction, self._node_map
        )
        self.indicators.set(result.indicator)
        return result

    def drag_leave(self) -> None:
        """Pointer left a row: hide the indicator."""
        self.indicators.clear()

    async def drop(
        self, target_id: str, instruction: RawInstruction | None
    ) -> ReorderEvent | None:
        """Finish the gesture on ``target_id``.

        Clears the indicator and drag state, then fires ``on_reorder`` if the
        drop is legal and changes the tree.

        Returns:
            The emitted event, or None for blocked drops.
        """
        self.indicators.clear()
        source = self._dragged
        self._dragged = None
        if source is None:
            logger.warning("Drop on %s with no dragged row", target_id)
            return None
        if instruction is None:
            return None

        result = compute_drop_result(
            source.row_id, target_id, instruction, self._node_map
        )
        event = result.event
        if event is None:
            return None

        logger.info(
            "Drop: row=%s %s %s", event.source_id, event.position, event.target_id
        )
        if self._on_reorder is not None:
            await self._on_reorder(event)
        return event

    def cancel(self) -> None:
        """Abandon the gesture (escape, drag end outside the table)."""
        self._dragged = None
        self.indicators.clear()


def create_drag_session(
    node_map: NodeMap,
    on_reorder: Callable[[ReorderEvent], Awaitable[None]] | None = None,
) -> TreeDragSession:
    """Create a drag session with its own indicator store."""
    return TreeDragSession(node_map, on_reorder=on_reorder)
