"""Interaction state machine for the pick-then-drop move gesture.

States:
    IDLE          nothing picked
    MOVE_PENDING  one node picked, waiting for a drop

Transitions:
    IDLE / MOVE_PENDING --pick(info)--> MOVE_PENDING(info)
    MOVE_PENDING --cancel--> IDLE
    MOVE_PENDING --drop(zone)--> IDLE, emits MoveAction (enabled zones only)
    any --structural action--> IDLE, action forwarded unchanged
"""

from __future__ import annotations

from collections.abc import Callable

from pipedit.core.logging import StructuredLogger, get_logger
from pipedit.interaction.actions import Action, MoveAction, action_name
from pipedit.interaction.legality import is_drop_zone_disabled
from pipedit.interaction.state import DropZone, InteractionState, ProcessorInfo


class InteractionStateMachine:
    """Owns the interaction state of one editor session."""

    def __init__(self, logger: StructuredLogger | None = None) -> None:
        """Initialize in IDLE.

        Args:
            logger: Structured logger (the ``interaction`` component logger if None)
        """
        self._state = InteractionState.idle()
        self._logger = logger or get_logger("interaction")
        self._on_state_change: list[Callable[[InteractionState], None]] = []

    @property
    def state(self) -> InteractionState:
        return self._state

    def add_state_change_callback(
        self, callback: Callable[[InteractionState], None]
    ) -> None:
        """Add a callback to be called after every transition."""
        self._on_state_change.append(callback)

    def _transition(self, new_state: InteractionState, reason: str) -> None:
        old_state = self._state
        self._state = new_state
        self._logger.log_state_transition(
            old_state.mode.value, new_state.mode.value, reason=reason
        )
        for callback in self._on_state_change:
            callback(new_state)

    def pick(self, info: ProcessorInfo) -> InteractionState:
        """Earmark a node for moving, replacing any earlier pick."""
        self._transition(InteractionState.move_pending(info), f"pick {info.selector}")
        return self._state

    def cancel(self) -> InteractionState:
        """Abandon the pending move, if any."""
        if not self._state.is_idle:
            self._transition(InteractionState.idle(), "cancel")
        return self._state

    def is_disabled(self, zone: DropZone) -> bool:
        """Legality of ``zone`` in the current state."""
        return is_drop_zone_disabled(zone, self._state)

    def drop(self, zone: DropZone) -> MoveAction | None:
        """Drop the picked node into ``zone``.

        Returns:
            The MoveAction to forward, or None when nothing is picked or the
            zone is disabled. A disabled drop leaves the state unchanged.
        """
        picked = self._state.picked
        if picked is None:
            return None
        if self.is_disabled(zone):
            self._logger.debug(
                "Ignoring drop on disabled zone",
                selector=zone.destination,
                position=zone.position.value,
            )
            return None

        action = MoveAction(source=picked.selector, destination=zone.destination)
        self._transition(InteractionState.idle(), f"drop {zone.destination}")
        return action

    def forward(self, action: Action) -> Action:
        """Pass a structural action through, abandoning any pending move first."""
        if not self._state.is_idle:
            self._transition(InteractionState.idle(), action_name(action))
        return action

    def reset(self) -> None:
        """Reset for a new editor session."""
        self._state = InteractionState.idle()
