"""Drag-source payload carried from the drag handle to drop targets."""

from __future__ import annotations

import logging
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError

logger = logging.getLogger(__name__)

DRAG_SOURCE_TYPE = "tree-row"


class DragSource(BaseModel):
    """The row being dragged, as announced on ``dragstart``."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    type: Literal["tree-row"] = DRAG_SOURCE_TYPE
    row_id: str = Field(alias="rowId", min_length=1)
    level: int = Field(ge=0)
    parent_id: str | None = Field(default=None, alias="parentId")


def parse_drag_source(data: Any) -> DragSource | None:
    """Return the payload as a ``DragSource``, or None if it is not one.

    Drags that did not start on a tree row (files, text, other widgets)
    land here too and are ignored.
    """
    if isinstance(data, DragSource):
        return data
    try:
        return DragSource.model_validate(data)
    except ValidationError:
        logger.debug("Ignoring non tree-row drag payload: %r", data)
        return None
