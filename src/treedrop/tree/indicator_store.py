"""Observable holder for the drop indicator of one tree table.

Each table instance owns its own ``IndicatorStore``; there is no module
level state. Rows subscribe with ``subscribe_row()`` and are only called
back when *their* indicator kind changes, so a pointer move between two
rows repaints exactly those two rows.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, TypeAlias

if TYPE_CHECKING:
    from collections.abc import Callable

    from treedrop.models.dnd import Indicator, IndicatorKind

Listener: TypeAlias = "Callable[[], None]"
RowListener: TypeAlias = "Callable[[IndicatorKind | None], None]"


class IndicatorStore:
    """Current indicator plus change listeners."""

    __slots__ = ("_current", "_listeners")

    def __init__(self) -> None:
        self._current: Indicator | None = None
        self._listeners: list[Listener] = []

    def get(self) -> Indicator | None:
        """Return the current indicator, or None."""
        return self._current

    def set(self, indicator: Indicator | None) -> None:
        """Replace the indicator, notifying listeners only on change."""
        if indicator == self._current:
            return
        self._current = indicator
        # Copy: listeners may unsubscribe while being notified.
        for listener in list(self._listeners):
            listener()

    def clear(self) -> None:
        """Remove any indicator (drag end, leave or cancel)."""
        self.set(None)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call ``listener`` after every change. Returns an unsubscribe function."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def kind_for_row(self, row_id: str) -> IndicatorKind | None:
        """Indicator kind shown on ``row_id``, or None if it shows nothing."""
        current = self._current
        if current is not None and current.row_id == row_id:
            return current.kind
        return None

    def subscribe_row(self, row_id: str, listener: RowListener) -> Callable[[], None]:
        """Call ``listener(kind)`` only when ``kind_for_row(row_id)`` changes."""
        last = self.kind_for_row(row_id)

        def on_change() -> None:
            nonlocal last
            kind = self.kind_for_row(row_id)
            if kind != last:
                last = kind
                listener(kind)

        return self.subscribe(on_change)
