"""Shared fixtures for unit tests.

The sample tree used throughout::

    A
    ├── A1
    │   ├── A1a
    │   └── A1b
    └── A2
    B
    └── B1
    C
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import pytest

from treedrop.tree import build_node_map

if TYPE_CHECKING:
    from collections.abc import Callable, Collection

    from treedrop.models.dnd import NodeMap


@pytest.fixture
def sample_tree() -> list[dict[str, Any]]:
    """Nested rows for the sample tree, with a display field per row."""
    return [
        {
            "id": "A",
            "name": "Alpha",
            "children": [
                {
                    "id": "A1",
                    "name": "Alpha one",
                    "children": [
                        {"id": "A1a", "name": "Alpha one a"},
                        {"id": "A1b", "name": "Alpha one b"},
                    ],
                },
                {"id": "A2", "name": "Alpha two"},
            ],
        },
        {"id": "B", "name": "Bravo", "children": [{"id": "B1", "name": "Bravo one"}]},
        {"id": "C", "name": "Charlie"},
    ]


@pytest.fixture
def make_map(
    sample_tree: list[dict[str, Any]],
) -> Callable[[Collection[str]], NodeMap]:
    """Build a node map of the sample tree for a given expanded set."""

    def _make(expanded: Collection[str] = ()) -> NodeMap:
        return build_node_map(sample_tree, expanded)

    return _make


@pytest.fixture
def node_map(make_map: Callable[[Collection[str]], NodeMap]) -> NodeMap:
    """Sample tree with A and A1 expanded, B collapsed."""
    return make_map({"A", "A1"})


@pytest.fixture
def sample_ids() -> tuple[str, ...]:
    """All sample ids in depth-first pre-order."""
    return ("A", "A1", "A1a", "A1b", "A2", "B", "B1", "C")
