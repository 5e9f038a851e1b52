"""Shared fixtures for integration tests."""

from __future__ import annotations

from collections.abc import Callable
from io import StringIO
from typing import Any

import pytest

from pipedit.core.logging import LogLevel, StructuredLogger
from pipedit.editor import EditorOrchestrator, FormUpdate
from pipedit.interaction import DropZone, InteractionStateMachine
from pipedit.tree import ProcessorContent, ProcessorNode, Selector, TreeStore, deserialize


# =============================================================================
# Collaborator Doubles
# =============================================================================


class ScriptedSettingsForm:
    """Settings form that remembers its validity channel."""

    def __init__(self) -> None:
        self.is_open = False
        self.processor: ProcessorContent | None = None
        self.on_form_update: Callable[[FormUpdate], None] | None = None

    def open(
        self,
        processor: ProcessorContent | None,
        on_form_update: Callable[[FormUpdate], None],
    ) -> None:
        self.is_open = True
        self.processor = processor
        self.on_form_update = on_form_update

    def close(self) -> None:
        self.is_open = False

    def report(self, is_valid: bool) -> None:
        assert self.on_form_update is not None
        self.on_form_update(FormUpdate(is_valid=is_valid))


class ScriptedConfirmation:
    """Removal confirmation answering from a queue of replies."""

    def __init__(self, *answers: bool) -> None:
        self.answers = list(answers)
        self.asked: list[str] = []

    def confirm(self, processor: ProcessorNode) -> bool:
        self.asked.append(processor.content.type)
        return self.answers.pop(0)


# =============================================================================
# Editor Fixtures
# =============================================================================


@pytest.fixture
def log_output() -> StringIO:
    """Captured structured log stream shared by the session components."""
    return StringIO()


@pytest.fixture
def settings_form() -> ScriptedSettingsForm:
    return ScriptedSettingsForm()


@pytest.fixture
def make_editor(
    log_output: StringIO, settings_form: ScriptedSettingsForm
) -> Callable[..., EditorOrchestrator]:
    """Build an editor session over a pipeline document."""

    def factory(
        document: dict[str, Any],
        confirmation: ScriptedConfirmation | None = None,
    ) -> EditorOrchestrator:
        def logger(component: str) -> StructuredLogger:
            return StructuredLogger(component=component, level=LogLevel.DEBUG, output=log_output)

        return EditorOrchestrator(
            store=TreeStore(deserialize(document), logger=logger("tree")),
            settings_form=settings_form,
            removal_confirmation=confirmation or ScriptedConfirmation(),
            machine=InteractionStateMachine(logger=logger("interaction")),
            logger=logger("editor"),
        )

    return factory


def zone_at(editor: EditorOrchestrator, destination: str) -> DropZone:
    """The drop zone with the given destination in the editor's current tree."""
    target = Selector.parse(destination)
    return next(zone for zone in editor.drop_zones() if zone.destination == target)


def processor_types(document: dict[str, Any], root: str = "processors") -> list[str]:
    return [next(iter(processor)) for processor in document.get(root, [])]


@pytest.fixture
def zone() -> Callable[[EditorOrchestrator, str], DropZone]:
    return zone_at


@pytest.fixture
def types() -> Callable[..., list[str]]:
    return processor_types


@pytest.fixture
def confirmations() -> type[ScriptedConfirmation]:
    """Factory for removal confirmations with scripted answers."""
    return ScriptedConfirmation
