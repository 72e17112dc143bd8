"""Inline styles that paint drop indicators on ``<tr>`` elements.

Indicators are drawn with an inset box-shadow on the row itself. A child
``<div>`` inside a ``<tr>`` is invalid HTML and browsers hoist it out of
the table, which puts the line above or below the whole table instead of
the row.
"""

from __future__ import annotations

from treedrop.models.dnd import IndicatorKind

INDENT_PX = 24


def indicator_style(kind: IndicatorKind | None, color: str = "#1890ff") -> str:
    """CSS for a row showing ``kind`` (empty string when it shows nothing)."""
    match kind:
        case IndicatorKind.ABOVE:
            return f"box-shadow: inset 0 2px 0 0 {color}"
        case IndicatorKind.BELOW:
            return f"box-shadow: inset 0 -2px 0 0 {color}"
        case IndicatorKind.MAKE_CHILD:
            return f"outline: 2px solid {color}; outline-offset: -2px"
        case _:
            return ""


def indent_style(level: int) -> str:
    """Left padding for the first cell of a row at ``level``."""
    return f"padding-left: {level * INDENT_PX}px"
