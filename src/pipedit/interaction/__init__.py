"""Pick-then-drop interaction for moving processors.

This module provides:
- Interaction state (idle / move-pending) and per-render adjacency data
- The drop-target legality rule
- The interaction state machine
- Structural actions emitted towards the editor
"""

from pipedit.interaction.actions import (
    Action,
    AddOnFailureAction,
    DuplicateAction,
    EditAction,
    MoveAction,
    RemoveAction,
    action_name,
)
from pipedit.interaction.legality import (
    is_drop_zone_above_disabled,
    is_drop_zone_below_disabled,
    is_drop_zone_disabled,
    legal_drop_zones,
)
from pipedit.interaction.machine import InteractionStateMachine
from pipedit.interaction.state import (
    DropPosition,
    DropZone,
    InteractionMode,
    InteractionState,
    ProcessorInfo,
    derive_drop_zones,
    derive_processor_infos,
    info_for,
)

__all__ = [
    # State
    "InteractionMode",
    "InteractionState",
    "ProcessorInfo",
    "DropPosition",
    "DropZone",
    "derive_processor_infos",
    "derive_drop_zones",
    "info_for",
    # Legality
    "is_drop_zone_above_disabled",
    "is_drop_zone_below_disabled",
    "is_drop_zone_disabled",
    "legal_drop_zones",
    # Machine
    "InteractionStateMachine",
    # Actions
    "Action",
    "MoveAction",
    "EditAction",
    "DuplicateAction",
    "AddOnFailureAction",
    "RemoveAction",
    "action_name",
]
