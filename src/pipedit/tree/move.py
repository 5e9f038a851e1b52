"""Move engine.

Turns a (source, destination) pair into one remove-then-insert edit. The
destination is an insertion point computed on the tree *before* the source
is removed, so any index along the destination path that sits after the
source in the source's own sequence is shifted down by one.

Illegal moves are refused through MoveResult, never raised, and are
detected before anything is mutated.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from pipedit.tree.exceptions import InvalidSelectorError
from pipedit.tree.selector import Selector

if TYPE_CHECKING:
    from pipedit.tree.store import TreeStore


class MoveRejection(Enum):
    """Why a move was refused."""

    SELF_MOVE = "self_move"  # destination is the source itself
    INTO_OWN_SUBTREE = "into_own_subtree"  # destination inside the source's branch
    NO_OP = "no_op"  # node would land exactly where it already is


@dataclass(frozen=True)
class MoveResult:
    """Outcome of a move request.

    Attributes:
        moved: Whether the forest was changed
        source: Requested source selector
        destination: Requested destination (pre-removal coordinates)
        final: Where the node ended up (post-move coordinates), if moved
        rejection: Reason for refusal, if not moved
    """

    moved: bool
    source: Selector
    destination: Selector
    final: Selector | None = None
    rejection: MoveRejection | None = None


def adjust_destination(source: Selector, destination: Selector) -> Selector:
    """Translate a pre-removal destination into post-removal coordinates.

    Only the segment at the source's depth can shift: the source's removal
    renumbers its later siblings, and with them every path that descends
    through one of those siblings. Backward moves are left untouched.
    """
    depth = len(source.segments) - 1
    if len(destination.segments) <= depth:
        return destination
    if destination.segments[:depth] != source.segments[:depth]:
        return destination

    destination_index = int(destination.segments[depth])
    if destination_index <= source.index:
        return destination

    segments = list(destination.segments)
    segments[depth] = str(destination_index - 1)
    return Selector(tuple(segments))


def check_move(source: Selector, destination: Selector) -> MoveRejection | None:
    """Structural legality of a move, independent of any forest.

    Returns:
        The rejection reason, or None when the move is legal.
    """
    if source == destination:
        return MoveRejection.SELF_MOVE
    if destination.is_descendant_of(source):
        return MoveRejection.INTO_OWN_SUBTREE
    if adjust_destination(source, destination) == source:
        return MoveRejection.NO_OP
    return None


def execute_move(store: TreeStore, source: Selector, destination: Selector) -> MoveResult:
    """Validate and apply a move against ``store``.

    Raises:
        InvalidSelectorError: If either selector addresses a sequence.
        SelectorNotFoundError: If the source or the destination's insertion
            point does not resolve. Raised before any mutation.
    """
    if not source.is_node or not destination.is_node:
        raise InvalidSelectorError(
            f"Move requires node selectors, got {source} -> {destination}"
        )

    rejection = check_move(source, destination)
    if rejection is not None:
        store.logger.log_move_rejected(source, destination, rejection.value)
        return MoveResult(
            moved=False,
            source=source,
            destination=destination,
            rejection=rejection,
        )

    # Resolve both ends on the current tree; either call raises before mutation
    store.get(source)
    store.check_insertion_point(destination)

    final = adjust_destination(source, destination)
    node = store.remove(source)
    store.insert(final, node)

    store.logger.log_tree_mutation(
        "move", source, destination=destination, final=final, node_id=node.id
    )
    return MoveResult(moved=True, source=source, destination=destination, final=final)
