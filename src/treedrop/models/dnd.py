"""Value types shared by the node map, drop engine and indicator store.

These are plain frozen dataclasses. A ``NodeMap`` is a read-only snapshot;
nothing downstream of ``build_node_map()`` mutates it.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import StrEnum
from typing import TypeAlias


class RawInstruction(StrEnum):
    """Pointer-derived drop intent before tree-aware validation."""

    ABOVE = "above"
    BELOW = "below"
    MAKE_CHILD = "make-child"
    BELOW_ANCESTOR = "below-ancestor"


class IndicatorKind(StrEnum):
    """Visual indicator style, also used as a reorder position."""

    ABOVE = "above"
    BELOW = "below"
    MAKE_CHILD = "make-child"


@dataclass(frozen=True, slots=True)
class TreeNodeMeta:
    """Structural metadata for one node in the tree.

    Attributes:
        id: Unique row key.
        level: Depth from the root (roots are 0).
        parent_id: Parent row key, or None for roots.
        child_ids: Immediate children in source order, collapsed or not.
        has_children: Whether the node has any children.
        is_expanded: True only when the node has children and is expanded.
        index_among_siblings: Position of ``id`` within ``sibling_ids``.
        sibling_ids: All ids under the same parent, including this one.
    """

    id: str
    level: int
    parent_id: str | None
    child_ids: tuple[str, ...]
    has_children: bool
    is_expanded: bool
    index_among_siblings: int
    sibling_ids: tuple[str, ...]


NodeMap: TypeAlias = Mapping[str, TreeNodeMeta]


@dataclass(frozen=True, slots=True)
class Indicator:
    """Which row shows a drop indicator, and what kind."""

    row_id: str
    kind: IndicatorKind


@dataclass(frozen=True, slots=True)
class ReorderEvent:
    """The tree-validated effect of releasing a drag now."""

    source_id: str
    target_id: str
    position: IndicatorKind


@dataclass(frozen=True)
class DropResult:
    """Outcome of a candidate drop.

    ``indicator`` and ``event`` are both None for illegal or no-op drops
    and both set otherwise.
    """

    indicator: Indicator | None = None
    event: ReorderEvent | None = None

    @property
    def blocked(self) -> bool:
        return self.event is None

    @classmethod
    def to(
        cls,
        source_id: str,
        target_id: str,
        position: IndicatorKind,
        *,
        indicator_row_id: str | None = None,
    ) -> DropResult:
        """Build an allowed result; the indicator defaults to the target row."""
        return cls(
            indicator=Indicator(indicator_row_id or target_id, position),
            event=ReorderEvent(source_id, target_id, position),
        )


BLOCKED = DropResult()
