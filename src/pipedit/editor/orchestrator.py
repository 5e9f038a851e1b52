"""Editor orchestrator.

Routes tree events through the interaction state machine, structural
actions to the tree store, and content editing to the settings form. It
also owns the session state the page shell pulls from: whether the editor
is currently valid and the serialized pipeline.
"""

from __future__ import annotations

import random
import string
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any

from pipedit.core.logging import StructuredLogger, get_logger
from pipedit.editor.collaborators import (
    FormUpdate,
    FormValidityState,
    RemovalConfirmationProtocol,
    SettingsFormProtocol,
)
from pipedit.interaction.actions import (
    Action,
    AddOnFailureAction,
    DuplicateAction,
    EditAction,
    MoveAction,
    RemoveAction,
)
from pipedit.interaction.machine import InteractionStateMachine
from pipedit.interaction.state import (
    DropZone,
    InteractionState,
    ProcessorInfo,
    derive_drop_zones,
    derive_processor_infos,
    info_for,
)
from pipedit.tree.exceptions import SelectorNotFoundError, TreeError
from pipedit.tree.move import MoveResult
from pipedit.tree.node import ProcessorContent, ProcessorNode, create_processor
from pipedit.tree.selector import ROOTS, Selector
from pipedit.tree.serialize import serialize
from pipedit.tree.store import TreeStore


def generate_session_id() -> str:
    """Generate an editing session id.

    Format: sess_{random8chars}
    """
    suffix = "".join(random.choices(string.ascii_lowercase + string.digits, k=8))
    return f"sess_{suffix}"


class SettingsFormKind(Enum):
    """What the settings form is open for."""

    CLOSED = "closed"
    CREATING_TOP_LEVEL = "creating_top_level"
    CREATING_ON_FAILURE = "creating_on_failure"
    EDITING = "editing"


@dataclass(frozen=True)
class SettingsFormMode:
    """Settings form mode.

    Attributes:
        kind: Why the form is open
        root: Root sequence to append to (CREATING_TOP_LEVEL)
        target_id: Identity of the processor being edited or extended
        selector: Target's selector when the form opened, for diagnostics only
    """

    kind: SettingsFormKind = SettingsFormKind.CLOSED
    root: str | None = None
    target_id: str | None = None
    selector: Selector | None = None

    @property
    def is_open(self) -> bool:
        return self.kind != SettingsFormKind.CLOSED


@dataclass(frozen=True)
class EditorUpdate:
    """Pull-based accessor handed to the page shell.

    Both callables read the live session, so a held EditorUpdate never goes
    stale.
    """

    is_valid: Callable[[], bool]
    serialize: Callable[[], dict[str, Any]]


class EditorOrchestrator:
    """Composes the tree store, interaction machine and collaborators."""

    def __init__(
        self,
        store: TreeStore,
        settings_form: SettingsFormProtocol,
        removal_confirmation: RemovalConfirmationProtocol,
        machine: InteractionStateMachine | None = None,
        logger: StructuredLogger | None = None,
    ) -> None:
        """Initialize the orchestrator.

        Args:
            store: Tree store owning the forest
            settings_form: Settings form collaborator
            removal_confirmation: Removal confirmation collaborator
            machine: Interaction state machine (a fresh one if None)
            logger: Structured logger (the ``editor`` component logger if None);
                every entry carries this session's ``session_id``
        """
        self.store = store
        self.settings_form = settings_form
        self.removal_confirmation = removal_confirmation
        self.machine = machine or InteractionStateMachine()
        self.session_id = generate_session_id()
        self._logger = (logger or get_logger("editor")).with_context(
            session_id=self.session_id
        )

        self._settings_mode = SettingsFormMode()
        self._form_validity = FormValidityState()
        self._pending_removal: Selector | None = None
        self._update_callbacks: list[Callable[[EditorUpdate], None]] = []

    @property
    def settings_mode(self) -> SettingsFormMode:
        return self._settings_mode

    @property
    def pending_removal(self) -> Selector | None:
        return self._pending_removal

    @property
    def interaction_state(self) -> InteractionState:
        return self.machine.state

    # Derived per-render data

    def processor_infos(self) -> list[ProcessorInfo]:
        return derive_processor_infos(self.store.forest)

    def drop_zones(self) -> list[DropZone]:
        return derive_drop_zones(self.store.forest)

    def is_drop_zone_disabled(self, zone: DropZone) -> bool:
        return self.machine.is_disabled(zone)

    # Interaction events

    def pick(self, selector: Selector) -> InteractionState:
        """Pick the node at ``selector`` for moving.

        Raises:
            SelectorNotFoundError: If the selector does not resolve.
        """
        info = info_for(self.store.forest, selector)
        if info is None:
            raise SelectorNotFoundError(selector)
        return self.machine.pick(info)

    def cancel_move(self) -> InteractionState:
        return self.machine.cancel()

    def drop(self, zone: DropZone) -> MoveResult | None:
        """Drop the picked node into ``zone``; None if nothing was emitted."""
        action = self.machine.drop(zone)
        if action is None:
            return None
        return self._move(action)

    def dispatch(self, action: Action) -> Any:
        """Handle a structural action coming from the tree.

        Any pending move is abandoned first.

        Returns:
            MoveResult for moves, the new Selector for duplicates, the removed
            node for completed removals, otherwise None.
        """
        self.machine.forward(action)

        if isinstance(action, MoveAction):
            return self._move(action)
        if isinstance(action, DuplicateAction):
            return self._duplicate(action)
        if isinstance(action, RemoveAction):
            return self._remove(action)
        if isinstance(action, EditAction):
            self._open_settings_form(
                SettingsFormMode(
                    kind=SettingsFormKind.EDITING,
                    target_id=action.processor.id,
                    selector=action.selector,
                ),
                action.processor.content,
            )
            return None
        if isinstance(action, AddOnFailureAction):
            target = self.store.get(action.target)
            self._open_settings_form(
                SettingsFormMode(
                    kind=SettingsFormKind.CREATING_ON_FAILURE,
                    target_id=target.id,
                    selector=action.target,
                ),
                None,
            )
            return None
        raise TypeError(f"Unsupported action: {action!r}")

    def add_processor(self, root: str) -> None:
        """Open the settings form to append a processor to ``root``."""
        if root not in ROOTS:
            raise ValueError(f"Unknown root sequence: {root}")
        self.machine.cancel()
        self._open_settings_form(
            SettingsFormMode(kind=SettingsFormKind.CREATING_TOP_LEVEL, root=root),
            None,
        )

    # Structural operations

    def _move(self, action: MoveAction) -> MoveResult:
        result = self.store.move(action.source, action.destination)
        self._notify()
        return result

    def _duplicate(self, action: DuplicateAction) -> Selector:
        selector = self.store.duplicate(action.source)
        self._notify()
        return selector

    def _remove(self, action: RemoveAction) -> ProcessorNode | None:
        node = self.store.get(action.selector)
        if not node.has_on_failure:
            removed = self.store.remove(action.selector)
            self._notify()
            return removed

        self._pending_removal = action.selector
        try:
            confirmed = self.removal_confirmation.confirm(node)
        finally:
            self._pending_removal = None

        if not confirmed:
            self._logger.info("Removal not confirmed", selector=action.selector)
            return None
        removed = self.store.remove(action.selector)
        self._notify()
        return removed

    # Settings form

    def _open_settings_form(
        self, mode: SettingsFormMode, processor: ProcessorContent | None
    ) -> None:
        if self._settings_mode.is_open:
            # the previous form is abandoned along with its validity
            self.settings_form.close()
            self._form_validity = FormValidityState()
        self._settings_mode = mode
        self._logger.info(
            f"Settings form opened: {mode.kind.value}",
            selector=mode.selector,
            target_id=mode.target_id,
        )
        self.settings_form.open(
            processor.copy() if processor is not None else None,
            self.on_form_update,
        )
        self._notify()

    def on_form_update(self, update: FormUpdate) -> None:
        """Validity channel handed to the settings form."""
        self._form_validity = FormValidityState.from_update(update)
        self._notify()

    def _resolve_target(self) -> Selector:
        mode = self._settings_mode
        if mode.target_id is None or mode.selector is None:
            raise TreeError(f"Settings form open for {mode.kind.value} has no target")
        selector = self.store.find(mode.target_id)
        if selector is None:
            raise SelectorNotFoundError(
                mode.selector, f"processor {mode.target_id} no longer exists"
            )
        return selector

    def submit_settings(self, content: ProcessorContent) -> Selector | None:
        """Apply a submitted settings form.

        The target is re-resolved by identity against the current forest, so
        edits made while the form was open do not redirect the submission.
        The form is closed whether or not the submission applies.

        Returns:
            Selector of the created or updated node, None if no form was open.

        Raises:
            SelectorNotFoundError: If the target processor has been removed.
        """
        mode = self._settings_mode
        if not mode.is_open:
            self._logger.warning("Settings submitted with no form open")
            return None

        try:
            self.machine.cancel()
            if mode.kind == SettingsFormKind.CREATING_TOP_LEVEL:
                if mode.root is None:
                    raise TreeError("Top-level settings form has no root")
                return self.store.add_top_level(
                    mode.root, create_processor(content.type, content.options)
                )
            selector = self._resolve_target()
            if mode.kind == SettingsFormKind.CREATING_ON_FAILURE:
                return self.store.wrap_with_on_failure(
                    selector, create_processor(content.type, content.options)
                )
            self.store.update(selector, content)
            return selector
        finally:
            self._dismiss_settings_form()

    def close_settings_form(self) -> None:
        """Cancel the settings form; the forest is left untouched."""
        self._form_validity = FormValidityState()
        self._dismiss_settings_form()

    def _dismiss_settings_form(self) -> None:
        if self._settings_mode.is_open:
            self.settings_form.close()
        self._settings_mode = SettingsFormMode()
        self._notify()

    # Parent boundary

    def is_valid(self) -> bool:
        """Valid when the form reports valid and no form is open."""
        return self._form_validity.validate() and not self._settings_mode.is_open

    def serialize(self) -> dict[str, Any]:
        return serialize(self.store.forest)

    def get_update(self) -> EditorUpdate:
        return EditorUpdate(is_valid=self.is_valid, serialize=self.serialize)

    def add_update_callback(self, callback: Callable[[EditorUpdate], None]) -> None:
        """Add a callback to be called after every change to the session."""
        self._update_callbacks.append(callback)

    def _notify(self) -> None:
        update = self.get_update()
        for callback in self._update_callbacks:
            callback(update)

    def reset(self) -> None:
        """End the session: drop interaction, form and pending removal state."""
        self.machine.reset()
        if self._settings_mode.is_open:
            self.settings_form.close()
        self._settings_mode = SettingsFormMode()
        self._form_validity = FormValidityState()
        self._pending_removal = None
