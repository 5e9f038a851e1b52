"""Unit tests for interaction state and derived render data."""

from pipedit.interaction.state import (
    DropPosition,
    InteractionMode,
    InteractionState,
    ProcessorInfo,
    derive_drop_zones,
    derive_processor_infos,
    info_for,
)
from pipedit.tree.node import Forest, ProcessorContent, ProcessorNode
from pipedit.tree.selector import Selector

S = Selector.parse


def _node(name: str, *children: ProcessorNode) -> ProcessorNode:
    return ProcessorNode(
        id=name,
        content=ProcessorContent(type="set"),
        on_failure=list(children) or None,
    )


class TestInteractionState:
    """Tests for InteractionState snapshots."""

    def test_idle_has_no_pick(self) -> None:
        state = InteractionState.idle()
        assert state.mode == InteractionMode.IDLE
        assert state.picked is None
        assert state.is_idle

    def test_move_pending_carries_pick(self) -> None:
        info = ProcessorInfo(id="A", selector=S("processors.0"))
        state = InteractionState.move_pending(info)
        assert state.mode == InteractionMode.MOVE_PENDING
        assert state.picked == info
        assert not state.is_idle


class TestDeriveProcessorInfos:
    """Tests for derive_processor_infos()."""

    def test_adjacency(self) -> None:
        forest = Forest(processors=[_node("A"), _node("B"), _node("C")])
        infos = derive_processor_infos(forest)
        assert infos == [
            ProcessorInfo("A", S("processors.0"), None, "B"),
            ProcessorInfo("B", S("processors.1"), "A", "C"),
            ProcessorInfo("C", S("processors.2"), "B", None),
        ]

    def test_document_order_with_branches(self) -> None:
        forest = Forest(
            processors=[_node("A", _node("X"), _node("Y")), _node("B")],
            on_failure=[_node("F")],
        )
        infos = derive_processor_infos(forest)
        assert [info.id for info in infos] == ["A", "X", "Y", "B", "F"]
        by_id = {info.id: info for info in infos}
        assert by_id["Y"].selector == S("processors.0.onFailure.1")
        assert by_id["Y"].above_id == "X"
        assert by_id["Y"].below_id is None
        # siblings only; the owner is not adjacent to its branch
        assert by_id["X"].above_id is None

    def test_info_for(self) -> None:
        forest = Forest(on_failure=[_node("F", _node("G"))])
        info = info_for(forest, S("onFailure.0.onFailure.0"))
        assert info is not None
        assert info.id == "G"
        assert info_for(forest, S("processors.0")) is None


class TestDeriveDropZones:
    """Tests for derive_drop_zones()."""

    def test_flat_sequence(self) -> None:
        """Above the first node, then below every node."""
        forest = Forest(processors=[_node("A"), _node("B")], on_failure=[_node("F")])
        zones = derive_drop_zones(forest)
        assert [(str(z.destination), z.position, z.anchor.id if z.anchor else None) for z in zones] == [
            ("processors.0", DropPosition.ABOVE, "A"),
            ("processors.1", DropPosition.BELOW, "A"),
            ("processors.2", DropPosition.BELOW, "B"),
            ("onFailure.0", DropPosition.ABOVE, "F"),
            ("onFailure.1", DropPosition.BELOW, "F"),
        ]

    def test_empty_roots_get_single_gap(self) -> None:
        zones = derive_drop_zones(Forest())
        assert [(str(z.destination), z.position, z.anchor) for z in zones] == [
            ("processors.0", DropPosition.EMPTY, None),
            ("onFailure.0", DropPosition.EMPTY, None),
        ]

    def test_nested_branch_gaps(self) -> None:
        forest = Forest(processors=[_node("A", _node("X"))])
        destinations = [str(z.destination) for z in derive_drop_zones(forest)]
        assert "processors.0.onFailure.0" in destinations
        assert "processors.0.onFailure.1" in destinations

    def test_one_gap_per_position(self) -> None:
        forest = Forest(processors=[_node("A"), _node("B"), _node("C")])
        destinations = [z.destination for z in derive_drop_zones(forest)]
        assert len(destinations) == len(set(destinations))
