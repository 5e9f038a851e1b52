"""Interaction state and the per-render data derived from the forest."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from enum import Enum

from pipedit.tree.node import Forest, ProcessorNode
from pipedit.tree.selector import ROOTS, Selector


class InteractionMode(Enum):
    """Interaction modes as seen by the tree."""

    IDLE = "idle"
    MOVE_PENDING = "move_pending"


@dataclass(frozen=True)
class ProcessorInfo:
    """Adjacency descriptor of one node, recomputed on every render.

    Attributes:
        id: Identity of the node
        selector: Where the node currently is
        above_id: Identity of the previous sibling, if any
        below_id: Identity of the next sibling, if any
    """

    id: str
    selector: Selector
    above_id: str | None = None
    below_id: str | None = None


@dataclass(frozen=True)
class InteractionState:
    """Immutable snapshot of the interaction state.

    ``picked`` is set exactly when ``mode`` is MOVE_PENDING.
    """

    mode: InteractionMode = InteractionMode.IDLE
    picked: ProcessorInfo | None = None

    @classmethod
    def idle(cls) -> InteractionState:
        return cls()

    @classmethod
    def move_pending(cls, picked: ProcessorInfo) -> InteractionState:
        return cls(mode=InteractionMode.MOVE_PENDING, picked=picked)

    @property
    def is_idle(self) -> bool:
        return self.mode == InteractionMode.IDLE


class DropPosition(Enum):
    """Which side of its anchor node a drop zone sits on."""

    ABOVE = "above"
    BELOW = "below"
    EMPTY = "empty"  # the only gap of an empty root sequence


@dataclass(frozen=True)
class DropZone:
    """An insertion gap in a sequence.

    Attributes:
        destination: Insertion point selector (pre-move coordinates)
        position: Side of the anchor the gap sits on
        anchor: The node the gap is attached to (None for an empty root)
    """

    destination: Selector
    position: DropPosition
    anchor: ProcessorInfo | None = None


def _sequence_infos(base: Selector, sequence: list[ProcessorNode]) -> list[ProcessorInfo]:
    infos = []
    for index, node in enumerate(sequence):
        above = sequence[index - 1] if index > 0 else None
        below = sequence[index + 1] if index + 1 < len(sequence) else None
        infos.append(
            ProcessorInfo(
                id=node.id,
                selector=base.child(index),
                above_id=above.id if above else None,
                below_id=below.id if below else None,
            )
        )
    return infos


def _walk_sequences(
    base: Selector, sequence: list[ProcessorNode]
) -> Iterator[tuple[Selector, list[ProcessorNode]]]:
    yield base, sequence
    for index, node in enumerate(sequence):
        if node.on_failure:
            yield from _walk_sequences(base.child(index).on_failure(), node.on_failure)


def derive_processor_infos(forest: Forest) -> list[ProcessorInfo]:
    """ProcessorInfo for every node, in document order."""
    infos: list[ProcessorInfo] = []

    def visit(base: Selector, sequence: list[ProcessorNode]) -> None:
        for info, node in zip(_sequence_infos(base, sequence), sequence, strict=True):
            infos.append(info)
            if node.on_failure:
                visit(info.selector.on_failure(), node.on_failure)

    for name in ROOTS:
        visit(Selector.root(name), forest.root(name))
    return infos


def derive_drop_zones(forest: Forest) -> list[DropZone]:
    """Every gap a picked node could be dropped into.

    Each non-empty sequence gets a gap above its first node and one below
    each node. An empty root sequence gets a single gap at index 0.
    """
    zones: list[DropZone] = []
    for name in ROOTS:
        root = Selector.root(name)
        sequence = forest.root(name)
        if not sequence:
            zones.append(DropZone(destination=root.child(0), position=DropPosition.EMPTY))
            continue
        for base, nodes in _walk_sequences(root, sequence):
            for index, info in enumerate(_sequence_infos(base, nodes)):
                if index == 0:
                    zones.append(
                        DropZone(
                            destination=base.child(0),
                            position=DropPosition.ABOVE,
                            anchor=info,
                        )
                    )
                zones.append(
                    DropZone(
                        destination=base.child(index + 1),
                        position=DropPosition.BELOW,
                        anchor=info,
                    )
                )
    return zones


def info_for(forest: Forest, selector: Selector) -> ProcessorInfo | None:
    """The ProcessorInfo of the node at ``selector`` in the current forest."""
    for info in derive_processor_infos(forest):
        if info.selector == selector:
            return info
    return None
