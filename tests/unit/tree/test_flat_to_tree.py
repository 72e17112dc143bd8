"""Unit tests for building nested trees from flat rows."""

from __future__ import annotations

import copy
import logging

import pytest

from treedrop.tree import TreeDataError, TreeRecord, build_tree_from_flat


def _shape(nodes: list[TreeRecord]) -> list[tuple[str, list]]:
    return [(node.id, _shape(node.children)) for node in nodes]


class TestBuildTreeFromFlat:
    """Nesting, ordering and recovery behaviour."""

    def test_orphan_is_promoted_to_root(self, caplog: pytest.LogCaptureFixture) -> None:
        """A row whose parent is missing becomes a root and a warning is logged."""
        records = [
            {"id": 1, "parentId": None},
            {"id": 2, "parentId": 1},
            {"id": 3, "parentId": "missing"},
        ]

        with caplog.at_level(logging.WARNING, logger="treedrop.tree.flat"):
            roots = build_tree_from_flat(records)

        assert _shape(roots) == [("1", [("2", [])]), ("3", [])]
        assert "missing" in caplog.text

    def test_absent_parent_is_root(self) -> None:
        """Rows without a parent field are roots, in input order."""
        roots = build_tree_from_flat([{"id": "b"}, {"id": "a"}])
        assert [node.id for node in roots] == ["b", "a"]

    def test_custom_root_sentinel(self) -> None:
        """Rows pointing at the configured sentinel are roots."""
        records = [
            {"id": "a", "parentId": "0"},
            {"id": "b", "parentId": "a"},
        ]
        roots = build_tree_from_flat(records, root_parent_id="0")
        assert _shape(roots) == [("a", [("b", [])])]

    def test_children_keep_input_order(self) -> None:
        """Children are appended as encountered, even before their parent."""
        records = [
            {"id": "c2", "parentId": "p"},
            {"id": "p"},
            {"id": "c1", "parentId": "p"},
        ]
        roots = build_tree_from_flat(records)
        assert _shape(roots) == [("p", [("c2", []), ("c1", [])])]

    def test_custom_parent_key(self) -> None:
        """The parent reference can live under another field name."""
        records = [{"id": "a"}, {"id": "b", "owner": "a"}]
        roots = build_tree_from_flat(records, parent_key="owner")
        assert _shape(roots) == [("a", [("b", [])])]

    def test_custom_parent_key_field_is_kept(self) -> None:
        """The caller's own parent field survives next to ``parent_id``."""
        records = [{"id": "a"}, {"id": "b", "owner": "a", "x": 1}]

        child = build_tree_from_flat(records, parent_key="owner")[0].children[0]

        assert child.parent_id == "a"
        assert child.model_extra == {"owner": "a", "x": 1}

    def test_extra_fields_are_preserved(self) -> None:
        """Returned nodes carry the original row fields."""
        roots = build_tree_from_flat([{"id": "a", "name": "Alpha", "age": 3}])
        assert roots[0].model_extra == {"name": "Alpha", "age": 3}

    def test_input_is_not_mutated(self) -> None:
        """The input rows gain no children and are otherwise unchanged."""
        records = [{"id": "a"}, {"id": "b", "parentId": "a"}]
        original = copy.deepcopy(records)

        build_tree_from_flat(records)

        assert records == original

    def test_empty_input(self) -> None:
        assert build_tree_from_flat([]) == []


class TestCycles:
    """Parent cycles are broken instead of silently dropping rows."""

    def test_two_node_cycle(self, caplog: pytest.LogCaptureFixture) -> None:
        """The cycle member listed first becomes the root."""
        records = [
            {"id": "a", "parentId": "b"},
            {"id": "b", "parentId": "a"},
            {"id": "c", "parentId": "a"},
        ]

        with caplog.at_level(logging.WARNING, logger="treedrop.tree.flat"):
            roots = build_tree_from_flat(records)

        assert _shape(roots) == [("a", [("b", []), ("c", [])])]
        assert "cycle" in caplog.text

    def test_self_parent(self) -> None:
        """A row that is its own parent becomes a root."""
        roots = build_tree_from_flat([{"id": "x", "parentId": "x"}])
        assert _shape(roots) == [("x", [])]

    def test_cycle_reached_through_tail(self) -> None:
        """A chain leading into a cycle keeps its tail attached."""
        records = [
            {"id": "t", "parentId": "b"},
            {"id": "a", "parentId": "b"},
            {"id": "b", "parentId": "a"},
        ]
        roots = build_tree_from_flat(records)
        assert _shape(roots) == [("a", [("b", [("t", [])])])]

    def test_every_row_appears_once(self) -> None:
        """No row is lost or duplicated when cycles are broken."""
        records = [
            {"id": "a", "parentId": "c"},
            {"id": "b", "parentId": "a"},
            {"id": "c", "parentId": "b"},
            {"id": "d", "parentId": "e"},
            {"id": "e", "parentId": "d"},
        ]
        roots = build_tree_from_flat(records)

        seen: list[str] = []
        stack = list(roots)
        while stack:
            node = stack.pop()
            seen.append(node.id)
            stack.extend(node.children)
        assert sorted(seen) == ["a", "b", "c", "d", "e"]
        assert [node.id for node in roots] == ["a", "d"]


class TestValidation:
    """Malformed rows are rejected at ingestion."""

    def test_missing_id(self) -> None:
        with pytest.raises(TreeDataError, match="record 1"):
            build_tree_from_flat([{"id": "a"}, {"name": "no id"}])

    def test_empty_id(self) -> None:
        with pytest.raises(TreeDataError):
            build_tree_from_flat([{"id": ""}])

    def test_duplicate_id(self) -> None:
        with pytest.raises(TreeDataError, match="Duplicate id 'a'"):
            build_tree_from_flat([{"id": "a"}, {"id": "a"}])
