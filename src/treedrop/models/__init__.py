"""Data models for treedrop drag-and-drop decisions."""

from treedrop.models.dnd import (
    BLOCKED,
    DropResult,
    Indicator,
    IndicatorKind,
    NodeMap,
    RawInstruction,
    ReorderEvent,
    TreeNodeMeta,
)

__all__ = [
    "BLOCKED",
    "DropResult",
    "Indicator",
    "IndicatorKind",
    "NodeMap",
    "RawInstruction",
    "ReorderEvent",
    "TreeNodeMeta",
]
