"""Editor - routes tree actions to the store and to the settings form.

The orchestrator is the only caller of the tree store's mutations.
"""

from pipedit.editor.collaborators import (
    AlwaysConfirm,
    FormUpdate,
    FormValidityState,
    NullSettingsForm,
    RemovalConfirmationProtocol,
    SettingsFormProtocol,
)
from pipedit.editor.orchestrator import (
    EditorOrchestrator,
    EditorUpdate,
    SettingsFormKind,
    SettingsFormMode,
)

__all__ = [
    # Orchestrator
    "EditorOrchestrator",
    "EditorUpdate",
    "SettingsFormKind",
    "SettingsFormMode",
    # Collaborators
    "FormUpdate",
    "FormValidityState",
    "SettingsFormProtocol",
    "RemovalConfirmationProtocol",
    "AlwaysConfirm",
    "NullSettingsForm",
]
