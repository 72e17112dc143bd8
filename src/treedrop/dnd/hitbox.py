"""Pointer hit-testing: turn row geometry into a raw drop instruction.

Which instruction a hovered row can produce depends on the dragged row's
level relative to the hovered row:

- same level: the closest edge decides ``above`` or ``below``;
- one level shallower: the row is a prospective parent, ``make-child``;
- deeper: the row is a descendant of a same-level row, ``below-ancestor``
  (the drop engine redirects it to that ancestor);
- anything else offers no instruction.
"""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field

from treedrop.models.dnd import RawInstruction


class Edge(StrEnum):
    TOP = "top"
    BOTTOM = "bottom"


class RowGeometry(BaseModel):
    """Pointer position reported by a ``dragover`` handler."""

    model_config = ConfigDict(populate_by_name=True)

    offset_y: float = Field(alias="offsetY")
    height: float = Field(gt=0)


def closest_edge(offset_y: float, height: float) -> Edge:
    """Top half of the row is ``top``, the rest ``bottom``."""
    return Edge.TOP if offset_y < height / 2 else Edge.BOTTOM


def classify_instruction(
    source_level: int,
    target_level: int,
    edge: Edge | None = None,
) -> RawInstruction | None:
    """Map the level relationship (and edge, for siblings) to an instruction."""
    if source_level == target_level:
        if edge is None:
            return None
        return RawInstruction.ABOVE if edge == Edge.TOP else RawInstruction.BELOW
    if target_level == source_level - 1:
        return RawInstruction.MAKE_CHILD
    if target_level > source_level:
        return RawInstruction.BELOW_ANCESTOR
    return None
