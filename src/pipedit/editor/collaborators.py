"""Boundary protocols for the collaborators the editor drives.

The settings form and the removal confirmation live outside this package;
these protocols allow for dependency injection and testing.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Protocol

from pipedit.tree.node import ProcessorContent, ProcessorNode


@dataclass(frozen=True)
class FormUpdate:
    """Validity report pushed by the settings form.

    Attributes:
        is_valid: Known validity, or None when it must be computed
        validate: Computes validity on demand
    """

    is_valid: bool | None = None
    validate: Callable[[], bool] = field(default=lambda: True)


@dataclass(frozen=True)
class FormValidityState:
    """What the editor remembers about the open form's validity."""

    validate: Callable[[], bool] = field(default=lambda: True)

    @classmethod
    def from_update(cls, update: FormUpdate) -> FormValidityState:
        if update.is_valid is None:
            return cls(validate=update.validate)
        known = update.is_valid
        return cls(validate=lambda: known)


class SettingsFormProtocol(Protocol):
    """Protocol for the processor settings form."""

    def open(
        self,
        processor: ProcessorContent | None,
        on_form_update: Callable[[FormUpdate], None],
    ) -> None:
        """Show the form; ``processor`` is None when creating."""
        ...

    def close(self) -> None:
        """Hide the form without submitting."""
        ...


class RemovalConfirmationProtocol(Protocol):
    """Protocol for confirming destructive removals."""

    def confirm(self, processor: ProcessorNode) -> bool:
        """Return True if the user confirmed removing ``processor``."""
        ...


class AlwaysConfirm:
    """Confirmation collaborator that accepts every removal."""

    def confirm(self, processor: ProcessorNode) -> bool:
        return True


class NullSettingsForm:
    """Settings form collaborator with no visible surface.

    Submission is driven directly through EditorOrchestrator.submit_settings.
    """

    def open(
        self,
        processor: ProcessorContent | None,
        on_form_update: Callable[[FormUpdate], None],
    ) -> None:
        pass

    def close(self) -> None:
        pass
