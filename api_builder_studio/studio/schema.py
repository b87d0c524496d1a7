"""Structural schema inference over JSON values.

The schema vocabulary is a small subset of JSON Schema: ``null``,
``boolean``, ``number``, ``string``, ``array`` (sampled from the first
element) and ``object`` (every present key is required). Nesting deeper than
the configured bound collapses into a string sentinel, which also guarantees
termination on self-referential input.
"""

from collections.abc import Mapping
from typing import Any, Dict

DEFAULT_MAX_DEPTH = 5
TRUNCATED_DESCRIPTION = "Maximum depth reached, schema truncated."


def truncation_sentinel() -> Dict[str, Any]:
    return {"type": "string", "description": TRUNCATED_DESCRIPTION}


def infer_schema(value: Any, depth: int = 0, max_depth: int = DEFAULT_MAX_DEPTH) -> Dict[str, Any]:
    """Infer the structural schema of a JSON value

    Args:
        value: Any value produced by ``json.loads`` (tuples and other
            mappings are accepted as arrays and objects)
        depth: Nesting level of ``value`` within the document
        max_depth: Deepest level that is still described

    Returns:
        Schema dictionary; ``{"type": "unknown"}`` for non-JSON values
    """
    if depth > max_depth:
        return truncation_sentinel()

    if value is None:
        return {"type": "null"}

    # bool is a subclass of int
    if isinstance(value, bool):
        return {"type": "boolean"}
    if isinstance(value, (int, float)):
        return {"type": "number"}
    if isinstance(value, str):
        return {"type": "string"}

    if isinstance(value, (list, tuple)):
        items = infer_schema(value[0], depth + 1, max_depth) if value else {}
        return {"type": "array", "items": items}

    if isinstance(value, Mapping):
        properties = {}
        required = []
        for key, item in value.items():
            properties[key] = infer_schema(item, depth + 1, max_depth)
            required.append(key)
        schema = {"type": "object", "properties": properties}
        if required:
            schema["required"] = required
        return schema

    return {"type": "unknown"}


class SchemaInferencer:
    """Schema inference bound to a configured maximum depth"""

    def __init__(self, max_depth: int = DEFAULT_MAX_DEPTH):
        self.max_depth = max_depth

    def infer(self, value: Any, depth: int = 0) -> Dict[str, Any]:
        return infer_schema(value, depth, self.max_depth)


__all__ = [
    "DEFAULT_MAX_DEPTH",
    "TRUNCATED_DESCRIPTION",
    "SchemaInferencer",
    "infer_schema",
    "truncation_sentinel",
]
