"""Unit tests for node map construction and visible-row flattening."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import pytest

from treedrop.tree import (
    TreeDataError,
    build_node_map,
    build_tree_from_flat,
    root_ids,
    visible_row_ids,
)

if TYPE_CHECKING:
    from treedrop.models.dnd import NodeMap


class TestBuildNodeMap:
    """Structural metadata for every node."""

    def test_every_node_is_present_regardless_of_expansion(
        self, make_map, sample_ids: tuple[str, ...]
    ) -> None:
        """Collapsed subtrees are still walked."""
        assert tuple(make_map(())) == sample_ids
        assert tuple(make_map({"A", "A1", "B"})) == sample_ids

    def test_metadata_of_nested_node(self, node_map: NodeMap) -> None:
        meta = node_map["A1b"]
        assert meta.level == 2
        assert meta.parent_id == "A1"
        assert meta.index_among_siblings == 1
        assert meta.sibling_ids == ("A1a", "A1b")
        assert meta.child_ids == ()
        assert not meta.has_children
        assert not meta.is_expanded

    def test_roots(self, node_map: NodeMap) -> None:
        meta = node_map["C"]
        assert meta.level == 0
        assert meta.parent_id is None
        assert meta.sibling_ids == ("A", "B", "C")
        assert meta.index_among_siblings == 2

    def test_collapsed_node_keeps_child_ids(self, node_map: NodeMap) -> None:
        """B is collapsed but still lists its children."""
        meta = node_map["B"]
        assert meta.child_ids == ("B1",)
        assert meta.has_children
        assert not meta.is_expanded

    def test_expanded_leaf_is_not_expanded(self, make_map) -> None:
        """is_expanded requires children."""
        assert not make_map({"C"})["C"].is_expanded

    def test_structural_invariants(self, node_map: NodeMap) -> None:
        """Sibling indices and parent/child links agree everywhere."""
        for node_id, meta in node_map.items():
            assert meta.sibling_ids[meta.index_among_siblings] == node_id
            for child_id in meta.child_ids:
                child = node_map[child_id]
                assert child.parent_id == node_id
                assert child.level == meta.level + 1

    def test_map_is_read_only(self, node_map: NodeMap) -> None:
        with pytest.raises(TypeError):
            node_map["Z"] = node_map["A"]  # type: ignore[index]

    def test_accepts_flat_builder_output(self) -> None:
        """Records from build_tree_from_flat are used directly."""
        tree = build_tree_from_flat(
            [{"id": "p"}, {"id": "c", "parentId": "p"}, {"id": "q"}]
        )
        node_map = build_node_map(tree, {"p"})
        assert node_map["c"].parent_id == "p"
        assert node_map["p"].is_expanded
        assert root_ids(node_map) == ("p", "q")

    def test_duplicate_id_across_branches(self) -> None:
        data = [{"id": "a", "children": [{"id": "x"}]}, {"id": "x"}]
        with pytest.raises(TreeDataError, match="Duplicate id 'x'"):
            build_node_map(data)

    def test_malformed_row(self) -> None:
        with pytest.raises(TreeDataError, match="record 0"):
            build_node_map([{"children": []}])

    def test_children_must_be_a_list(self) -> None:
        with pytest.raises(TreeDataError, match="children must be a list"):
            build_node_map([{"id": "a", "children": "b"}])

    def test_malformed_nested_row_names_its_top_level_record(self) -> None:
        data = [{"id": "a"}, {"id": "b", "children": [{"name": "no id"}]}]
        with pytest.raises(TreeDataError, match="record 1"):
            build_node_map(data)

    def test_empty_tree(self) -> None:
        node_map = build_node_map([])
        assert len(node_map) == 0
        assert root_ids(node_map) == ()
        assert visible_row_ids(node_map) == []


class TestVisibleRowIds:
    """Rows shown by a renderer, top to bottom."""

    def test_all_collapsed(self, make_map) -> None:
        assert visible_row_ids(make_map(())) == ["A", "B", "C"]

    def test_partially_expanded(self, node_map: NodeMap) -> None:
        assert visible_row_ids(node_map) == ["A", "A1", "A1a", "A1b", "A2", "B", "C"]

    def test_expanded_child_under_collapsed_parent_is_hidden(self, make_map) -> None:
        """A1 being expanded does not show it while A is collapsed."""
        assert visible_row_ids(make_map({"A1"})) == ["A", "B", "C"]


class TestDeepTrees:
    """Depth is not limited by the interpreter's recursion limit."""

    def test_deep_nested_input(self) -> None:
        node: dict[str, Any] = {"id": "leaf"}
        for level in range(1000):
            node = {"id": f"d{level}", "children": [node]}

        node_map = build_node_map([node], expanded_ids={"d999"})

        assert len(node_map) == 1001
        assert node_map["leaf"].level == 1000
        assert node_map["leaf"].parent_id == "d0"
        assert node_map["d999"].child_ids == ("d998",)

    def test_deep_flat_chain(self) -> None:
        rows = [{"id": "r0"}] + [
            {"id": f"r{i}", "parentId": f"r{i - 1}"} for i in range(1, 1000)
        ]

        node_map = build_node_map(build_tree_from_flat(rows))

        assert node_map["r999"].level == 999
        assert root_ids(node_map) == ("r0",)
