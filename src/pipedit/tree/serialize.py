"""Pipeline document <-> forest conversion.

The persisted form follows the ingest pipeline layout::

    processors:
      - set:
          field: a
          value: 1
          on_failure:
            - remove: {field: a}
    on_failure:
      - drop: {}

Each processor is a single-key mapping from its type to its options. A
processor's own failure branch lives in its options under ``on_failure``.
Empty ``on_failure`` lists are never written.
"""

from __future__ import annotations

import copy
from pathlib import Path
from typing import Any

import yaml

from pipedit.tree.exceptions import PipelineParseError
from pipedit.tree.node import Forest, ProcessorContent, ProcessorNode, generate_processor_id

ON_FAILURE_KEY = "on_failure"
PROCESSORS_KEY = "processors"


def _serialize_processor(node: ProcessorNode) -> dict[str, Any]:
    options = copy.deepcopy(node.content.options)
    options.pop(ON_FAILURE_KEY, None)
    if node.on_failure:
        options[ON_FAILURE_KEY] = [_serialize_processor(child) for child in node.on_failure]
    return {node.content.type: options}


def serialize(forest: Forest) -> dict[str, Any]:
    """Convert a forest to its persisted pipeline representation."""
    result: dict[str, Any] = {
        PROCESSORS_KEY: [_serialize_processor(node) for node in forest.processors],
    }
    if forest.on_failure:
        result[ON_FAILURE_KEY] = [
            _serialize_processor(node) for node in forest.on_failure
        ]
    return result


def _deserialize_processors(raw: Any, where: str) -> list[ProcessorNode]:
    if not isinstance(raw, list):
        raise PipelineParseError(f"{where} must be a list")

    nodes = []
    for i, entry in enumerate(raw):
        if not isinstance(entry, dict) or len(entry) != 1:
            raise PipelineParseError(
                f"{where}[{i}] must be a mapping with exactly one processor type"
            )
        ((processor_type, options),) = entry.items()
        if not isinstance(processor_type, str) or not processor_type.strip():
            raise PipelineParseError(f"{where}[{i}] processor type must be a non-empty string")
        if options is None:
            options = {}
        if not isinstance(options, dict):
            raise PipelineParseError(f"{where}[{i}].{processor_type} options must be a mapping")

        options = copy.deepcopy(options)
        children = None
        if ON_FAILURE_KEY in options:
            children = _deserialize_processors(
                options.pop(ON_FAILURE_KEY),
                f"{where}[{i}].{processor_type}.{ON_FAILURE_KEY}",
            )
        nodes.append(
            ProcessorNode(
                id=generate_processor_id(),
                content=ProcessorContent(type=processor_type, options=options),
                on_failure=children or None,
            )
        )
    return nodes


def deserialize(document: Any) -> Forest:
    """Build a forest from a pipeline document, assigning fresh identities.

    Raises:
        PipelineParseError: If the document does not have the pipeline shape.
    """
    if document is None:
        return Forest()
    if not isinstance(document, dict):
        raise PipelineParseError("Pipeline document must be a mapping")

    return Forest(
        processors=_deserialize_processors(document.get(PROCESSORS_KEY, []), PROCESSORS_KEY),
        on_failure=_deserialize_processors(document.get(ON_FAILURE_KEY, []), ON_FAILURE_KEY),
    )


def parse_pipeline(content: str) -> Forest:
    """Parse JSON or YAML pipeline text.

    Raises:
        PipelineParseError: If the text is not valid YAML/JSON or not a pipeline.
    """
    try:
        document = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise PipelineParseError(f"Failed to parse pipeline: {e}") from e
    return deserialize(document)


def load_pipeline(path: Path) -> Forest:
    """Load a pipeline document from a JSON or YAML file.

    Raises:
        PipelineParseError: If the file cannot be read or parsed.
    """
    try:
        content = path.read_text()
    except OSError as e:
        raise PipelineParseError(f"Failed to read pipeline file: {e}") from e
    return parse_pipeline(content)
