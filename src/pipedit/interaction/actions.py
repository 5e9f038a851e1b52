"""Actions emitted by the tree towards the editor orchestrator."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from pipedit.tree.node import ProcessorNode
from pipedit.tree.selector import Selector


@dataclass(frozen=True)
class MoveAction:
    """Relocate the node at ``source`` to the gap ``destination``."""

    source: Selector
    destination: Selector


@dataclass(frozen=True)
class EditAction:
    """Open the settings form for an existing processor."""

    selector: Selector
    processor: ProcessorNode


@dataclass(frozen=True)
class DuplicateAction:
    source: Selector


@dataclass(frozen=True)
class AddOnFailureAction:
    """Open the settings form to add to ``target``'s failure branch."""

    target: Selector


@dataclass(frozen=True)
class RemoveAction:
    selector: Selector
    processor: ProcessorNode


Action = Union[MoveAction, EditAction, DuplicateAction, AddOnFailureAction, RemoveAction]

ACTION_NAMES: dict[type, str] = {
    MoveAction: "move",
    EditAction: "edit",
    DuplicateAction: "duplicate",
    AddOnFailureAction: "addOnFailure",
    RemoveAction: "remove",
}


def action_name(action: Action) -> str:
    return ACTION_NAMES[type(action)]
