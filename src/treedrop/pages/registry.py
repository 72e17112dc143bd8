"""Page registration system for data-driven navigation.

Provides a decorator for registering pages with metadata so the layout
can build its navigation drawer without a hand-maintained list.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from nicegui import ui

if TYPE_CHECKING:
    from collections.abc import Callable


@dataclass
class PageMeta:
    """Metadata for a registered page."""

    route: str
    title: str
    icon: str
    order: int = field(default=100)


# Global registry of all pages
_page_registry: dict[str, PageMeta] = {}


def page_route(
    route: str,
    *,
    title: str,
    icon: str,
    order: int = 100,
) -> Callable:
    """Decorator to register a page with navigation metadata.

    Usage:
        @page_route("/", title="Tree", icon="account_tree", order=10)
        async def tree_page():
            ...

    Args:
        route: URL path for the page.
        title: Display title in navigation.
        icon: Material icon name.
        order: Sort order in the drawer (lower = higher).

    Returns:
        Decorated function registered with NiceGUI and the page registry.
    """

    def decorator(func: Callable) -> Callable:
        _page_registry[route] = PageMeta(
            route=route,
            title=title,
            icon=icon,
            order=order,
        )
        return ui.page(route)(func)

    return decorator


def get_visible_pages() -> list[PageMeta]:
    """Get navigable pages, sorted by order."""
    return sorted(_page_registry.values(), key=lambda p: p.order)
