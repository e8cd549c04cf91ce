"""Tests for TreeEditor (reorder, move_into) and MoveLedger provenance."""

from __future__ import annotations

from typing import Any

import pytest

from jq_view.mutations import MoveLedger, MoveRecord, TreeEditor
from jq_view.tree.builder import TreeBuilder, find_node
from jq_view.tree.nodes import TreeNode

# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def doc() -> dict[str, Any]:
    return {
        "meta": {"owner": "o", "version": 2},
        "items": [{"x": 1, "y": 2}],
        "name": "n",
    }


@pytest.fixture
def tree(doc: dict[str, Any]) -> TreeNode:
    return TreeBuilder().build(doc)


@pytest.fixture
def editor(tree: TreeNode) -> TreeEditor:
    return TreeEditor(tree)


def _keys(node: TreeNode | None) -> list[str]:
    assert node is not None
    return [c.key for c in node.children]


def _addresses(root: TreeNode) -> list[str]:
    return [n.address for n in root.walk()]


# ---------------------------------------------------------------------------
# Reorder
# ---------------------------------------------------------------------------


class TestReorder:
    def test_insert_before_earlier_sibling(
        self, tree: TreeNode, editor: TreeEditor
    ) -> None:
        assert editor.reorder("$.name", "$.meta", insert_after=False)
        assert _keys(tree) == ["name", "meta", "items"]

    def test_insert_after_later_sibling(
        self, tree: TreeNode, editor: TreeEditor
    ) -> None:
        assert editor.reorder("$.meta", "$.name", insert_after=True)
        assert _keys(tree) == ["items", "name", "meta"]

    def test_insert_before_later_sibling(
        self, tree: TreeNode, editor: TreeEditor
    ) -> None:
        assert editor.reorder("$.meta", "$.name", insert_after=False)
        assert _keys(tree) == ["items", "meta", "name"]

    def test_insert_after_earlier_sibling(
        self, tree: TreeNode, editor: TreeEditor
    ) -> None:
        assert editor.reorder("$.name", "$.meta", insert_after=True)
        assert _keys(tree) == ["meta", "name", "items"]

    def test_reorder_inside_array_schema(
        self, tree: TreeNode, editor: TreeEditor
    ) -> None:
        assert editor.reorder("$.items[].y", "$.items[].x", insert_after=False)
        assert _keys(find_node(tree, "$.items")) == ["y", "x"]

    def test_addresses_unchanged(self, tree: TreeNode, editor: TreeEditor) -> None:
        before = set(_addresses(tree))
        editor.reorder("$.name", "$.meta", insert_after=False)
        assert set(_addresses(tree)) == before

    @pytest.mark.parametrize(
        ("source", "target"),
        [
            ("$.name", "$.name"),
            ("$.meta.owner", "$.name"),
            ("$.missing", "$.name"),
            ("$.name", "$.missing"),
            ("$", "$.name"),
        ],
    )
    def test_rejected_reorder_is_noop(
        self, tree: TreeNode, editor: TreeEditor, source: str, target: str
    ) -> None:
        before = _addresses(tree)
        assert editor.reorder(source, target, insert_after=False) is False
        assert _addresses(tree) == before


# ---------------------------------------------------------------------------
# Move into
# ---------------------------------------------------------------------------


class TestMoveInto:
    def test_move_into_object(self, tree: TreeNode, editor: TreeEditor) -> None:
        assert editor.move_into("$.name", "$.meta")
        assert _keys(tree) == ["meta", "items"]
        assert _keys(find_node(tree, "$.meta")) == ["owner", "version", "name"]
        assert find_node(tree, "$.meta.name") is not None
        assert find_node(tree, "$.name") is None

    def test_move_into_array_goes_behind_marker(
        self, tree: TreeNode, editor: TreeEditor
    ) -> None:
        assert editor.move_into("$.meta.owner", "$.items")
        assert _keys(find_node(tree, "$.items")) == ["x", "y", "owner"]
        assert editor.ledger.resolve("$.items[].owner") == "$.meta.owner"

    def test_target_is_expanded(self, tree: TreeNode, editor: TreeEditor) -> None:
        editor.move_into("$.name", "$.meta")
        meta = find_node(tree, "$.meta")
        assert meta is not None
        assert meta.expanded is True

    def test_move_into_empty_object(self) -> None:
        tree = TreeBuilder().build({"data": {}, "n": 1})
        editor = TreeEditor(tree)
        assert editor.move_into("$.n", "$.data")
        assert _keys(find_node(tree, "$.data")) == ["n"]

    def test_subtree_addresses_rewritten(self) -> None:
        tree = TreeBuilder().build({"data": {}, "items": [{"x": 1, "y": 2}]})
        editor = TreeEditor(tree)
        assert editor.move_into("$.items", "$.data")
        assert _addresses(tree) == [
            "$",
            "$.data",
            "$.data.items",
            "$.data.items[].x",
            "$.data.items[].y",
        ]
        assert editor.ledger.resolve("$.data.items[].x") == "$.items[].x"

    def test_selection_survives_move(self, tree: TreeNode, editor: TreeEditor) -> None:
        owner = find_node(tree, "$.meta.owner")
        assert owner is not None
        owner.selected = True
        editor.move_into("$.meta.owner", "$.items")
        moved = find_node(tree, "$.items[].owner")
        assert moved is owner
        assert moved.selected is True

    @pytest.mark.parametrize(
        ("source", "target"),
        [
            ("$.meta", "$.meta"),
            ("$.items", "$.items"),
            ("$", "$.meta"),
            ("$.meta.owner", "$.name"),
            ("$.missing", "$.meta"),
            ("$.name", "$.missing"),
        ],
    )
    def test_rejected_move_is_noop(
        self, tree: TreeNode, editor: TreeEditor, source: str, target: str
    ) -> None:
        before = _addresses(tree)
        assert editor.move_into(source, target) is False
        assert _addresses(tree) == before
        assert len(editor.ledger) == 0

    def test_cannot_move_into_own_descendant(self) -> None:
        tree = TreeBuilder().build({"a": {"b": {"c": 1}}})
        editor = TreeEditor(tree)
        assert editor.move_into("$.a", "$.a.b") is False
        assert _addresses(tree) == ["$", "$.a", "$.a.b", "$.a.b.c"]

    def test_key_collision_rejected(self) -> None:
        tree = TreeBuilder().build({"name": "n", "items": [{"name": "i"}]})
        editor = TreeEditor(tree)
        assert editor.move_into("$.items[].name", "$") is False
        assert _keys(tree) == ["name", "items"]

    def test_sibling_prefix_is_not_descendant(self) -> None:
        tree = TreeBuilder().build({"a": {"x": 1}, "ab": {"y": 2}})
        editor = TreeEditor(tree)
        assert editor.move_into("$.a", "$.ab")
        assert find_node(tree, "$.ab.a.x") is not None


# ---------------------------------------------------------------------------
# Provenance across several moves
# ---------------------------------------------------------------------------


class TestChainedMoves:
    def test_remove_keeps_first_original(
        self, tree: TreeNode, editor: TreeEditor
    ) -> None:
        editor.move_into("$.meta.owner", "$.items")
        editor.move_into("$.items[].owner", "$")
        assert find_node(tree, "$.owner") is not None
        assert editor.ledger.resolve("$.owner") == "$.meta.owner"
        assert len(editor.ledger) == 1

    def test_move_back_resolves_to_itself(self, editor: TreeEditor) -> None:
        editor.move_into("$.meta.owner", "$.items")
        editor.move_into("$.items[].owner", "$.meta")
        assert editor.ledger.resolve("$.meta.owner") == "$.meta.owner"

    def test_moving_a_container_rebases_nested_moves(
        self, tree: TreeNode, editor: TreeEditor
    ) -> None:
        editor.move_into("$.meta.owner", "$.items")
        editor.move_into("$.items", "$.meta")
        assert find_node(tree, "$.meta.items[].owner") is not None
        assert editor.ledger.resolve("$.meta.items[].owner") == "$.meta.owner"
        assert editor.ledger.resolve("$.meta.items[].x") == "$.items[].x"

    def test_moving_out_of_a_moved_container(self, editor: TreeEditor) -> None:
        editor.move_into("$.meta", "$.items")
        editor.move_into("$.items[].meta.owner", "$")
        assert editor.ledger.resolve("$.owner") == "$.meta.owner"
        assert editor.ledger.resolve("$.items[].meta.version") == "$.meta.version"
        assert len(editor.ledger) == 2


# ---------------------------------------------------------------------------
# MoveLedger
# ---------------------------------------------------------------------------


class TestMoveLedger:
    def test_empty_ledger_resolves_to_itself(self) -> None:
        ledger = MoveLedger()
        assert ledger.resolve("$.a.b") == "$.a.b"
        assert len(ledger) == 0

    def test_relocate_creates_record(self) -> None:
        ledger = MoveLedger()
        record = ledger.relocate("$.x", "$.a", "x", into_array=False)
        assert record == MoveRecord("$.x", "$.a", "x", False)
        assert "$.a.x" in ledger
        assert ledger.get("$.a.x") == record
        assert ledger.records == [record]

    def test_resolve_appends_suffix(self) -> None:
        ledger = MoveLedger()
        ledger.relocate("$.x", "$.a", "x", into_array=False)
        assert ledger.resolve("$.a.x.deep") == "$.x.deep"

    def test_resolve_matches_whole_segments(self) -> None:
        ledger = MoveLedger()
        ledger.relocate("$.x", "$.a", "x", into_array=False)
        assert ledger.resolve("$.a.xy") == "$.a.xy"

    def test_record_address_into_array(self) -> None:
        record = MoveRecord("$.o", "$.items", "o", into_array=True)
        assert record.address == "$.items[].o"

    def test_clear(self) -> None:
        ledger = MoveLedger()
        ledger.relocate("$.x", "$.a", "x", into_array=False)
        ledger.clear()
        assert len(ledger) == 0
        assert list(ledger) == []


class TestPlainListTarget:
    def test_selected_plain_list_target_is_deselected(self) -> None:
        tree = TreeBuilder().build({"tags": [], "name": "n"})
        editor = TreeEditor(tree)
        tags = find_node(tree, "$.tags")
        assert tags is not None
        tags.selected = True
        assert editor.move_into("$.name", "$.tags")
        assert tags.selected is False
        assert not tags.is_selectable
        assert find_node(tree, "$.tags[].name") is not None
