"""Selector - immutable path addressing a node or a sequence in the forest.

A selector starts at one of the two roots and alternates index segments
with ``onFailure`` segments when it descends into a processor's own
failure branch::

    processors                      the main root sequence
    processors.1                    second main processor
    processors.1.onFailure          its failure branch
    processors.1.onFailure.0        first node of that branch
    onFailure.2                     third pipeline-level failure processor

Selectors are only meaningful against the forest snapshot they were derived
from and must be recomputed after every mutation.
"""

from __future__ import annotations

from dataclasses import dataclass

from pipedit.tree.exceptions import InvalidSelectorError

PROCESSORS_ROOT = "processors"
ON_FAILURE_ROOT = "onFailure"
ON_FAILURE_SEGMENT = "onFailure"

ROOTS = (PROCESSORS_ROOT, ON_FAILURE_ROOT)

SEPARATOR = "."


def _is_index(segment: str) -> bool:
    return segment.isdigit() and (segment == "0" or not segment.startswith("0"))


@dataclass(frozen=True)
class Selector:
    """Path of string segments from a root down to a node or sequence."""

    segments: tuple[str, ...]

    def __post_init__(self) -> None:
        segments = self.segments
        if not segments:
            raise InvalidSelectorError("Selector must have at least one segment")
        if segments[0] not in ROOTS:
            raise InvalidSelectorError(
                f"Selector must start with one of {ROOTS}, got {segments[0]!r}",
                raw=SEPARATOR.join(segments),
            )
        for position, segment in enumerate(segments[1:], start=1):
            # odd positions are indices, even positions are branch markers
            if position % 2 == 1:
                valid = _is_index(segment)
            else:
                valid = segment == ON_FAILURE_SEGMENT
            if not valid:
                raise InvalidSelectorError(
                    f"Unexpected segment {segment!r} at position {position}",
                    raw=SEPARATOR.join(segments),
                )

    @classmethod
    def of(cls, *segments: str | int) -> Selector:
        """Build a selector from loose segments, accepting ints for indices."""
        return cls(tuple(str(segment) for segment in segments))

    @classmethod
    def parse(cls, text: str) -> Selector:
        """Parse the dotted text form, e.g. ``processors.0.onFailure.1``.

        Raises:
            InvalidSelectorError: If the text is empty or malformed.
        """
        text = text.strip()
        if not text:
            raise InvalidSelectorError("Selector text is empty", raw=text)
        return cls(tuple(text.split(SEPARATOR)))

    @classmethod
    def root(cls, name: str) -> Selector:
        """Selector of one of the root sequences."""
        return cls((name,))

    def __str__(self) -> str:
        return SEPARATOR.join(self.segments)

    def __len__(self) -> int:
        return len(self.segments)

    @property
    def root_name(self) -> str:
        return self.segments[0]

    @property
    def is_node(self) -> bool:
        """True when the selector addresses a processor rather than a sequence."""
        return len(self.segments) % 2 == 0

    @property
    def is_sequence(self) -> bool:
        return not self.is_node

    @property
    def index(self) -> int:
        """Position of the addressed node within its sequence."""
        if not self.is_node:
            raise InvalidSelectorError(
                f"Sequence selector {self} has no index", raw=str(self)
            )
        return int(self.segments[-1])

    @property
    def parent(self) -> Selector:
        """The sequence that contains the addressed node."""
        if not self.is_node:
            raise InvalidSelectorError(
                f"Sequence selector {self} has no parent sequence", raw=str(self)
            )
        return Selector(self.segments[:-1])

    @property
    def owner(self) -> Selector | None:
        """The node owning this sequence, or None for root sequences."""
        if self.is_node or len(self.segments) == 1:
            return None
        return Selector(self.segments[:-1])

    def child(self, index: int) -> Selector:
        """Selector of the node at ``index`` inside this sequence."""
        if not self.is_sequence:
            raise InvalidSelectorError(
                f"Node selector {self} has no children; use on_failure()",
                raw=str(self),
            )
        return Selector(self.segments + (str(index),))

    def on_failure(self) -> Selector:
        """Selector of this node's failure branch."""
        if not self.is_node:
            raise InvalidSelectorError(
                f"Sequence selector {self} has no failure branch", raw=str(self)
            )
        return Selector(self.segments + (ON_FAILURE_SEGMENT,))

    def with_index(self, index: int) -> Selector:
        """Same sequence, different position."""
        return self.parent.child(index)

    def starts_with(self, prefix: Selector) -> bool:
        """Segment-wise prefix test (``processors.1`` is not a prefix of ``processors.10``)."""
        return self.segments[: len(prefix.segments)] == prefix.segments

    def is_descendant_of(self, other: Selector) -> bool:
        """True when this selector lies strictly inside ``other``'s subtree."""
        return len(self.segments) > len(other.segments) and self.starts_with(other)


PROCESSORS = Selector.root(PROCESSORS_ROOT)
ON_FAILURE = Selector.root(ON_FAILURE_ROOT)
