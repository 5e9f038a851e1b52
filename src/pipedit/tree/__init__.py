"""Selector-addressed processor forest.

This module provides:
- Selector paths over the two-rooted forest
- Processor nodes and the forest model
- The tree store (insert, remove, move, duplicate, update)
- The move engine with index compensation
- Pipeline document serialization
"""

from pipedit.tree.exceptions import (
    InvalidSelectorError,
    PipelineParseError,
    SelectorNotFoundError,
    TreeError,
    TreeErrorType,
)
from pipedit.tree.move import (
    MoveRejection,
    MoveResult,
    adjust_destination,
    check_move,
)
from pipedit.tree.node import (
    Forest,
    ProcessorContent,
    ProcessorNode,
    create_processor,
    generate_processor_id,
)
from pipedit.tree.selector import (
    ON_FAILURE,
    ON_FAILURE_ROOT,
    PROCESSORS,
    PROCESSORS_ROOT,
    ROOTS,
    Selector,
)
from pipedit.tree.serialize import (
    deserialize,
    load_pipeline,
    parse_pipeline,
    serialize,
)
from pipedit.tree.store import TreeStore

__all__ = [
    # Selector
    "Selector",
    "PROCESSORS",
    "ON_FAILURE",
    "PROCESSORS_ROOT",
    "ON_FAILURE_ROOT",
    "ROOTS",
    # Nodes
    "Forest",
    "ProcessorContent",
    "ProcessorNode",
    "create_processor",
    "generate_processor_id",
    # Store
    "TreeStore",
    # Move
    "MoveRejection",
    "MoveResult",
    "adjust_destination",
    "check_move",
    # Serialization
    "serialize",
    "deserialize",
    "parse_pipeline",
    "load_pipeline",
    # Errors
    "TreeError",
    "TreeErrorType",
    "SelectorNotFoundError",
    "InvalidSelectorError",
    "PipelineParseError",
]
