"""Tree exceptions hierarchy.

Defines exception classes for selector resolution, selector parsing and
pipeline document parsing. Illegal moves are not exceptions: the move
engine refuses them through a result value.
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pipedit.tree.selector import Selector


class TreeErrorType(Enum):
    """Types of tree errors."""

    SELECTOR_NOT_FOUND = "selector_not_found"
    INVALID_SELECTOR = "invalid_selector"
    PIPELINE_PARSE = "pipeline_parse"
    UNKNOWN = "unknown"


class TreeError(Exception):
    """Base exception for all tree errors."""

    def __init__(
        self,
        message: str,
        error_type: TreeErrorType = TreeErrorType.UNKNOWN,
    ) -> None:
        """Initialize TreeError.

        Args:
            message: Error message.
            error_type: Type of error.
        """
        super().__init__(message)
        self.error_type = error_type


class SelectorNotFoundError(TreeError):
    """A selector does not resolve against the current forest."""

    def __init__(self, selector: Selector, message: str = "") -> None:
        """Initialize SelectorNotFoundError.

        Args:
            selector: The selector that failed to resolve.
            message: Optional detail appended to the default message.
        """
        text = f"Selector not found: {selector}"
        if message:
            text = f"{text} ({message})"
        super().__init__(text, TreeErrorType.SELECTOR_NOT_FOUND)
        self.selector = selector


class InvalidSelectorError(TreeError):
    """Selector segments do not form a well-shaped path."""

    def __init__(self, message: str, raw: str = "") -> None:
        """Initialize InvalidSelectorError.

        Args:
            message: Error message.
            raw: The raw selector text or segments that were rejected.
        """
        super().__init__(message, TreeErrorType.INVALID_SELECTOR)
        self.raw = raw


class PipelineParseError(TreeError):
    """A pipeline document cannot be turned into a forest."""

    def __init__(self, message: str) -> None:
        super().__init__(message, TreeErrorType.PIPELINE_PARSE)
