"""Drag-and-drop tree table page.

Renders nested rows as an HTML table with expand toggles and a drag handle
per row, using NiceGUI element events for HTML5 drag-and-drop:

- ``dragstart`` on a handle records the dragged row in the table's
  ``TreeDragSession``
- ``dragover`` (throttled) reports pointer geometry; the session classifies
  it and updates the indicator store
- rows repaint only when their own indicator changes (``subscribe_row``)
- ``drop`` applies the resulting ``ReorderEvent`` in memory, rebuilds the
  node map and re-renders the body

Each client gets its own ``TreeTableView`` so drags never cross clients.
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any

from nicegui import ui
from pydantic import ValidationError

from treedrop.config import get_settings
from treedrop.dnd import DragSource, RowGeometry, TreeDragSession, parse_drag_source
from treedrop.pages.layout import page_layout
from treedrop.pages.registry import page_route
from treedrop.pages.row_styles import indent_style, indicator_style
from treedrop.tree import apply_reorder, build_node_map, build_tree_from_flat
from treedrop.tree.node_map import visible_row_ids

if TYPE_CHECKING:
    from collections.abc import Callable, Collection, Sequence

    from nicegui.events import GenericEventArguments

    from treedrop.models.dnd import ReorderEvent
    from treedrop.tree import TreeRecord

logger = logging.getLogger(__name__)

# (field, title, width)
COLUMNS: tuple[tuple[str, str, str | None], ...] = (
    ("name", "Name", None),
    ("age", "Age", "12%"),
    ("address", "Address", "30%"),
)

DEMO_ROWS: tuple[dict[str, Any], ...] = (
    {
        "id": "1",
        "name": "John Brown",
        "age": 60,
        "address": "New York No. 1 Lake Park",
    },
    {
        "id": "1-1",
        "parentId": "1",
        "name": "Jim Green",
        "age": 42,
        "address": "London No. 2 Lake Park",
    },
    {
        "id": "1-1-1",
        "parentId": "1-1",
        "name": "Jimmy Green",
        "age": 16,
        "address": "London No. 3 Lake Park",
    },
    {
        "id": "1-1-2",
        "parentId": "1-1",
        "name": "Sammy Green",
        "age": 18,
        "address": "London No. 4 Lake Park",
    },
    {
        "id": "1-2",
        "parentId": "1",
        "name": "Joe Black",
        "age": 32,
        "address": "Sydney No. 1 Lake Park",
    },
    {
        "id": "1-2-1",
        "parentId": "1-2",
        "name": "Joey Black",
        "age": 8,
        "address": "Sydney No. 2 Lake Park",
    },
    {
        "id": "2",
        "name": "Jane Doe",
        "age": 45,
        "address": "Los Angeles No. 5 Street",
    },
    {
        "id": "2-1",
        "parentId": "2",
        "name": "Janet Doe",
        "age": 20,
        "address": "Los Angeles No. 6 Street",
    },
    {
        "id": "2-1-1",
        "parentId": "2-1",
        "name": "Jennifer Doe",
        "age": 2,
        "address": "Los Angeles No. 7 Street",
    },
)

# Row geometry relative to the <tr>, not whichever cell the pointer is over.
_GEOMETRY_JS = """(e) => {
    e.preventDefault();
    const r = e.currentTarget.getBoundingClientRect();
    emit({offsetY: e.clientY - r.top, height: r.height});
}"""


def _dragstart_js(source: DragSource) -> str:
    """Write the drag payload to ``dataTransfer`` and emit it to the server."""
    payload = source.model_dump_json(by_alias=True)
    return (
        "(e) => {"
        " e.dataTransfer.effectAllowed = 'move';"
        # Firefox only starts a drag once data is set
        f" e.dataTransfer.setData('application/json', {json.dumps(payload)});"
        f" emit({payload});"
        " }"
    )


def _geometry(e: GenericEventArguments) -> RowGeometry | None:
    try:
        return RowGeometry.model_validate(e.args)
    except ValidationError:
        logger.debug("Unusable drag geometry: %r", e.args)
        return None


def _cell_text(record: TreeRecord, field: str) -> str:
    value = (record.model_extra or {}).get(field)
    return "" if value is None else str(value)


class TreeTableView:
    """State and rendering for one tree table on one client.

    Keeps the row data, the expanded set and the current node map, and owns
    the drag session (and through it the indicator store).
    """

    def __init__(
        self,
        data: Sequence[TreeRecord],
        *,
        expanded_ids: Collection[str] = (),
        on_reorder: Callable[[ReorderEvent], None] | None = None,
    ) -> None:
        self.data: list[TreeRecord] = list(data)
        self.expanded: set[str] = set(expanded_ids)
        self.node_map = build_node_map(self.data, self.expanded)
        self.session = TreeDragSession(self.node_map, on_reorder=self._handle_reorder)
        self._on_reorder = on_reorder
        self._body: ui.element | None = None
        self._unsubscribes: list[Callable[[], None]] = []

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------
    def _rebuild(self) -> None:
        self.node_map = build_node_map(self.data, self.expanded)
        self.session.update_node_map(self.node_map)

    def toggle(self, row_id: str) -> None:
        """Expand or collapse ``row_id``."""
        self.expanded ^= {row_id}
        self._rebuild()
        self.refresh()

    def apply(self, event: ReorderEvent) -> None:
        """Apply a reorder to the in-memory rows and rebuild the node map."""
        self.data = apply_reorder(self.data, event)
        self._rebuild()

    async def _handle_reorder(self, event: ReorderEvent) -> None:
        self.apply(event)
        self.refresh()
        if self._on_reorder is not None:
            self._on_reorder(event)

    def _records_by_id(self) -> dict[str, TreeRecord]:
        records: dict[str, TreeRecord] = {}
        stack = list(self.data)
        while stack:
            record = stack.pop()
            records[record.id] = record
            stack.extend(record.children)
        return records

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------
    def render(self) -> None:
        """Build the table. Call inside a NiceGUI container context."""
        with ui.element("table").classes("w-full border-collapse"):
            with ui.element("thead"), ui.element("tr"):
                for _, title, width in COLUMNS:
                    th = ui.element("th").classes("text-left q-pa-sm")
                    if width:
                        th.style(f"width: {width}")
                    with th:
                        ui.label(title).classes("font-bold")
            self._body = ui.element("tbody")
        self.refresh()

    def refresh(self) -> None:
        """Re-render the body rows from the current node map."""
        for unsubscribe in self._unsubscribes:
            unsubscribe()
        self._unsubscribes.clear()
        if self._body is None:
            return

        self._body.clear()
        records = self._records_by_id()
        with self._body:
            for row_id in visible_row_ids(self.node_map):
                self._render_row(records[row_id])

    def _render_row(self, record: TreeRecord) -> None:
        meta = self.node_map[record.id]
        color = get_settings().dnd.indicator_color
        throttle = get_settings().dnd.dragover_throttle
        row_id = record.id

        tr = ui.element("tr").classes("border-b")
        tr.style(indicator_style(self.session.indicators.kind_for_row(row_id), color))

        with tr:
            first_field, *other_fields = (field for field, _, _ in COLUMNS)
            with (
                ui.element("td").classes("q-pa-sm"),
                ui.row().classes("items-center no-wrap gap-1").style(
                    indent_style(meta.level)
                ),
            ):
                handle = ui.icon("drag_indicator").classes("cursor-grab text-grey-6")
                handle.props("draggable")
                if meta.has_children:
                    ui.button(
                        icon="expand_more" if meta.is_expanded else "chevron_right",
                        on_click=lambda: self.toggle(row_id),
                    ).props("flat dense round size=sm")
                else:
                    ui.element("span").style("width: 28px")
                ui.label(_cell_text(record, first_field))
            for field in other_fields:
                with ui.element("td").classes("q-pa-sm"):
                    ui.label(_cell_text(record, field))

        source = DragSource(row_id=row_id, level=meta.level, parent_id=meta.parent_id)

        def on_dragstart(e: GenericEventArguments) -> None:
            dragged = parse_drag_source(e.args)
            if dragged is not None:
                self.session.start(dragged)

        handle.on("dragstart", on_dragstart, js_handler=_dragstart_js(source))
        handle.on("dragend", self.session.cancel)

        def on_dragover(e: GenericEventArguments) -> None:
            instruction = self.session.instruction_at(row_id, _geometry(e))
            self.session.drag_over(row_id, instruction)

        async def on_drop(e: GenericEventArguments) -> None:
            instruction = self.session.instruction_at(row_id, _geometry(e))
            await self.session.drop(row_id, instruction)

        tr.on("dragover", on_dragover, js_handler=_GEOMETRY_JS, throttle=throttle)
        tr.on("dragleave", self.session.drag_leave)
        tr.on("drop", on_drop, js_handler=_GEOMETRY_JS)

        self._unsubscribes.append(
            self.session.indicators.subscribe_row(
                row_id,
                lambda kind: tr.style(replace=indicator_style(kind, color)),
            )
        )


def demo_tree() -> list[TreeRecord]:
    """Nest the demo rows using the configured parent key and root sentinel."""
    tree_config = get_settings().tree
    rows = DEMO_ROWS
    if tree_config.parent_key != "parentId":
        rows = tuple(
            {
                (tree_config.parent_key if key == "parentId" else key): value
                for key, value in row.items()
            }
            for row in DEMO_ROWS
        )
    return build_tree_from_flat(
        rows,
        parent_key=tree_config.parent_key,
        root_parent_id=tree_config.root_parent_id,
    )


@page_route("/", title="Tree Table", icon="account_tree", order=10)
async def tree_table_page() -> None:
    """Demo tree table with drag-and-drop reordering."""

    def notify(event: ReorderEvent) -> None:
        ui.notify(
            f"Moved {event.source_id} {event.position} {event.target_id}",
            type="info",
            position="bottom",
        )

    view = TreeTableView(demo_tree(), expanded_ids={"1"}, on_reorder=notify)
    with page_layout():
        ui.label("Drag a row by its handle to reorder or re-parent it.").classes(
            "text-body2 text-grey-7 q-mb-md"
        )
        view.render()
