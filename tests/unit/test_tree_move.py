"""Unit tests for the move engine."""

import json
from io import StringIO

import pytest

from pipedit.core.logging import StructuredLogger
from pipedit.tree.exceptions import InvalidSelectorError, SelectorNotFoundError
from pipedit.tree.move import (
    MoveRejection,
    adjust_destination,
    check_move,
)
from pipedit.tree.node import Forest, ProcessorContent, ProcessorNode
from pipedit.tree.selector import Selector
from pipedit.tree.store import TreeStore

S = Selector.parse


def _node(name: str, *children: ProcessorNode) -> ProcessorNode:
    return ProcessorNode(
        id=name,
        content=ProcessorContent(type="set", options={"field": name}),
        on_failure=list(children) or None,
    )


def _ids(nodes: list[ProcessorNode] | None) -> list[str]:
    return [node.id for node in nodes or []]


@pytest.fixture
def abc() -> TreeStore:
    """processors: [A, B, C]; onFailure: []."""
    return TreeStore(Forest(processors=[_node("A"), _node("B"), _node("C")]))


@pytest.fixture
def nested() -> TreeStore:
    """processors: [A, B, C {onFailure: [X, Y]}]; onFailure: [F]."""
    return TreeStore(
        Forest(
            processors=[_node("A"), _node("B"), _node("C", _node("X"), _node("Y"))],
            on_failure=[_node("F")],
        )
    )


class TestAdjustDestination:
    """Tests for pre-removal to post-removal translation."""

    def test_forward_in_same_sequence_shifts(self) -> None:
        assert adjust_destination(S("processors.0"), S("processors.3")) == S("processors.2")

    def test_backward_in_same_sequence_unchanged(self) -> None:
        assert adjust_destination(S("processors.2"), S("processors.0")) == S("processors.0")

    def test_other_root_unchanged(self) -> None:
        assert adjust_destination(S("processors.0"), S("onFailure.0")) == S("onFailure.0")

    def test_descends_through_later_sibling(self) -> None:
        """A path through a later sibling shifts at the source's depth."""
        adjusted = adjust_destination(S("processors.0"), S("processors.2.onFailure.1"))
        assert adjusted == S("processors.1.onFailure.1")

    def test_descends_through_earlier_sibling_unchanged(self) -> None:
        destination = S("processors.0.onFailure.0")
        assert adjust_destination(S("processors.2"), destination) == destination

    def test_nested_source_to_shallower_destination_unchanged(self) -> None:
        destination = S("processors.1")
        assert adjust_destination(S("processors.2.onFailure.0"), destination) == destination

    def test_nested_forward_shift(self) -> None:
        adjusted = adjust_destination(
            S("processors.2.onFailure.0"), S("processors.2.onFailure.2")
        )
        assert adjusted == S("processors.2.onFailure.1")


class TestCheckMove:
    """Tests for structural refusals."""

    def test_self_move(self) -> None:
        assert check_move(S("processors.1"), S("processors.1")) == MoveRejection.SELF_MOVE

    def test_into_own_subtree(self) -> None:
        rejection = check_move(S("processors.2"), S("processors.2.onFailure.0"))
        assert rejection == MoveRejection.INTO_OWN_SUBTREE

    def test_gap_below_self_is_no_op(self) -> None:
        """Dropping just below itself leaves the node in place."""
        assert check_move(S("processors.1"), S("processors.2")) == MoveRejection.NO_OP

    def test_legal_move(self) -> None:
        assert check_move(S("processors.1"), S("processors.0")) is None


class TestExecuteMove:
    """Tests for moves applied through the store."""

    def test_backward_move(self, abc: TreeStore) -> None:
        result = abc.move(S("processors.2"), S("processors.0"))
        assert result.moved
        assert result.final == S("processors.0")
        assert _ids(abc.forest.processors) == ["C", "A", "B"]

    def test_forward_move_compensates(self, abc: TreeStore) -> None:
        """Destination past the source is computed on the pre-move tree."""
        result = abc.move(S("processors.0"), S("processors.2"))
        assert result.moved
        assert result.final == S("processors.1")
        assert _ids(abc.forest.processors) == ["B", "A", "C"]

    def test_forward_move_to_end(self, abc: TreeStore) -> None:
        abc.move(S("processors.0"), S("processors.3"))
        assert _ids(abc.forest.processors) == ["B", "C", "A"]

    def test_cross_root_move(self, abc: TreeStore) -> None:
        result = abc.move(S("processors.1"), S("onFailure.0"))
        assert result.moved
        assert _ids(abc.forest.processors) == ["A", "C"]
        assert _ids(abc.forest.on_failure) == ["B"]

    def test_move_keeps_identity_and_subtree(self, nested: TreeStore) -> None:
        nested.move(S("processors.2"), S("onFailure.1"))
        moved = nested.get(S("onFailure.1"))
        assert moved.id == "C"
        assert _ids(moved.on_failure) == ["X", "Y"]

    def test_move_into_branch_of_later_sibling(self, nested: TreeStore) -> None:
        result = nested.move(S("processors.0"), S("processors.2.onFailure.1"))
        assert result.final == S("processors.1.onFailure.1")
        assert _ids(nested.forest.processors) == ["B", "C"]
        assert _ids(nested.get(S("processors.1")).on_failure) == ["X", "A", "Y"]

    def test_move_out_of_branch_drops_empty_branch(self) -> None:
        store = TreeStore(Forest(processors=[_node("A", _node("X")), _node("B")]))
        store.move(S("processors.0.onFailure.0"), S("processors.2"))
        assert _ids(store.forest.processors) == ["A", "B", "X"]
        assert store.get(S("processors.0")).on_failure is None

    def test_move_into_absent_branch(self, abc: TreeStore) -> None:
        abc.move(S("processors.0"), S("processors.2.onFailure.0"))
        assert _ids(abc.forest.processors) == ["B", "C"]
        assert _ids(abc.get(S("processors.1")).on_failure) == ["A"]

    @pytest.mark.parametrize(
        ("source", "destination", "rejection"),
        [
            ("processors.1", "processors.1", MoveRejection.SELF_MOVE),
            ("processors.2", "processors.2.onFailure.0", MoveRejection.INTO_OWN_SUBTREE),
            ("processors.2", "processors.2.onFailure.2", MoveRejection.INTO_OWN_SUBTREE),
            ("processors.0", "processors.1", MoveRejection.NO_OP),
        ],
    )
    def test_refusal_leaves_tree_unchanged(
        self,
        nested: TreeStore,
        source: str,
        destination: str,
        rejection: MoveRejection,
    ) -> None:
        before = nested.forest.copy()
        result = nested.move(S(source), S(destination))
        assert not result.moved
        assert result.rejection == rejection
        assert result.final is None
        assert nested.forest == before

    def test_unresolvable_source_raises_before_mutation(self, abc: TreeStore) -> None:
        before = abc.forest.copy()
        with pytest.raises(SelectorNotFoundError):
            abc.move(S("processors.5"), S("processors.0"))
        assert abc.forest == before

    def test_unresolvable_destination_raises_before_mutation(self, abc: TreeStore) -> None:
        before = abc.forest.copy()
        with pytest.raises(SelectorNotFoundError):
            abc.move(S("processors.0"), S("onFailure.3"))
        assert abc.forest == before

    def test_sequence_selectors_rejected(self, abc: TreeStore) -> None:
        with pytest.raises(InvalidSelectorError):
            abc.move(S("processors"), S("onFailure.0"))

    def test_refusal_is_logged(self) -> None:
        output = StringIO()
        store = TreeStore(
            Forest(processors=[_node("A")]),
            logger=StructuredLogger(component="tree", output=output),
        )
        store.move(S("processors.0"), S("processors.0"))
        data = json.loads(output.getvalue())
        assert data["event_type"] == "move_rejected"
        assert data["selector"] == "processors.0"
        assert data["extra"]["reason"] == "self_move"
