"""Interaction adapters between pointer events and the drop engine."""

from treedrop.dnd.hitbox import Edge, RowGeometry, classify_instruction, closest_edge
from treedrop.dnd.payload import DragSource, parse_drag_source
from treedrop.dnd.session import TreeDragSession, create_drag_session

__all__ = [
    "DragSource",
    "Edge",
    "RowGeometry",
    "TreeDragSession",
    "classify_instruction",
    "closest_edge",
    "create_drag_session",
    "parse_drag_source",
]
