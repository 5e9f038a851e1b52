"""Processor nodes and the two-rooted forest."""

from __future__ import annotations

import copy
import random
import string
from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Any

from pipedit.tree.selector import ON_FAILURE_ROOT, PROCESSORS_ROOT, ROOTS


def generate_processor_id() -> str:
    """Generate a stable processor identity.

    Format: proc_{random8chars}
    """
    suffix = "".join(random.choices(string.ascii_lowercase + string.digits, k=8))
    return f"proc_{suffix}"


@dataclass
class ProcessorContent:
    """Content payload of a processor: its type and options.

    The editor core never looks inside ``options``.
    """

    type: str
    options: dict[str, Any] = field(default_factory=dict)

    def copy(self) -> ProcessorContent:
        return ProcessorContent(type=self.type, options=copy.deepcopy(self.options))

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type, "options": copy.deepcopy(self.options)}


@dataclass
class ProcessorNode:
    """A processor with a stable identity and an optional failure branch.

    Attributes:
        id: Identity assigned once, independent of position
        content: Processor type and options
        on_failure: Ordered failure branch, or None when absent (never empty)
    """

    id: str
    content: ProcessorContent
    on_failure: list[ProcessorNode] | None = None

    @property
    def has_on_failure(self) -> bool:
        return bool(self.on_failure)

    def clone(self) -> ProcessorNode:
        """Deep copy of this subtree with fresh identities throughout."""
        children = None
        if self.on_failure:
            children = [child.clone() for child in self.on_failure]
        return ProcessorNode(
            id=generate_processor_id(),
            content=self.content.copy(),
            on_failure=children,
        )

    def structure(self) -> dict[str, Any]:
        """Identity-free view used to compare subtrees structurally."""
        return {
            **self.content.to_dict(),
            "on_failure": (
                [child.structure() for child in self.on_failure]
                if self.on_failure
                else None
            ),
        }

    def walk(self) -> Iterator[ProcessorNode]:
        """Yield this node and every node in its failure branch, depth first."""
        yield self
        for child in self.on_failure or []:
            yield from child.walk()


def create_processor(
    processor_type: str,
    options: dict[str, Any] | None = None,
    on_failure: list[ProcessorNode] | None = None,
) -> ProcessorNode:
    """Create a processor node with a generated identity.

    Args:
        processor_type: Processor type, e.g. ``set`` or ``grok``
        options: Processor options
        on_failure: Failure branch; an empty list is normalised to None

    Returns:
        New ProcessorNode
    """
    return ProcessorNode(
        id=generate_processor_id(),
        content=ProcessorContent(type=processor_type, options=dict(options or {})),
        on_failure=on_failure or None,
    )


@dataclass
class Forest:
    """The two named top-level processor sequences."""

    processors: list[ProcessorNode] = field(default_factory=list)
    on_failure: list[ProcessorNode] = field(default_factory=list)

    def root(self, name: str) -> list[ProcessorNode]:
        """Return the root sequence called ``name``."""
        if name == PROCESSORS_ROOT:
            return self.processors
        if name == ON_FAILURE_ROOT:
            return self.on_failure
        raise KeyError(name)

    def roots(self) -> list[tuple[str, list[ProcessorNode]]]:
        return [(name, self.root(name)) for name in ROOTS]

    def walk(self) -> Iterator[ProcessorNode]:
        """Yield every node in the forest in document order."""
        for _, sequence in self.roots():
            for node in sequence:
                yield from node.walk()

    def structure(self) -> dict[str, Any]:
        """Identity-free view of the whole forest."""
        return {
            name: [node.structure() for node in sequence]
            for name, sequence in self.roots()
        }

    def copy(self) -> Forest:
        """Deep copy preserving identities."""
        return copy.deepcopy(self)
