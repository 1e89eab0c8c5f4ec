"""JSON Schema inference from example payloads."""

from __future__ import annotations

import json
from collections.abc import Mapping, Sequence
from typing import Any

SCHEMA_DRAFT_URI = "https://json-schema.org/draft/2020-12/schema"
GENERATED_SCHEMA_TITLE = "Generated schema from jellyfaas"

_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1


class SchemaParseError(Exception):
    """Raised when the example payload is not valid JSON."""


def load_example_document(json_text: str) -> Any:
    """Decode example JSON, keeping integer and fractional literals distinct."""
    try:
        return json.loads(json_text, parse_constant=_reject_constant)
    except RecursionError as exc:
        raise SchemaParseError("Invalid JSON example: document is nested too deeply") from exc
    except (json.JSONDecodeError, ValueError) as exc:
        raise SchemaParseError(f"Invalid JSON example: {exc}") from exc


def json_type_name(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, int):
        # Signed 64-bit range; larger literals are numbers.
        return "integer" if _INT64_MIN <= value <= _INT64_MAX else "number"
    if isinstance(value, float):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, Mapping):
        return "object"
    if isinstance(value, Sequence):
        return "array"
    return "null"


def infer_schema(value: Any) -> tuple[dict[str, Any], list[str]]:
    """Return the schema node for ``value`` and the keys it marks as required.

    Every key of an observed mapping is required. Arrays take their ``items``
    schema from the first element only; empty arrays carry no ``items``.
    Nodes are filled from an explicit work list, so nesting depth is not
    limited by the interpreter stack.
    """
    root: dict[str, Any] = {}
    pending: list[tuple[dict[str, Any], Any]] = [(root, value)]
    while pending:
        node, current = pending.pop()
        node["type"] = json_type_name(current)
        if isinstance(current, Mapping):
            properties: dict[str, Any] = {}
            for key in sorted(current):
                properties[key] = {}
                pending.append((properties[key], current[key]))
            node["properties"] = properties
            if properties:
                node["required"] = list(properties)
        elif node["type"] == "array" and current:
            node["items"] = {}
            pending.append((node["items"], current[0]))

    required = list(root.get("required", []))
    return root, required


def build_root_schema(value: Any) -> dict[str, Any]:
    """Wrap inferred properties in the root schema document.

    The root is always typed as an object, whatever the decoded value was.
    """
    node, required = infer_schema(value)
    return {
        "$schema": SCHEMA_DRAFT_URI,
        "title": GENERATED_SCHEMA_TITLE,
        "type": "object",
        "properties": node.get("properties", {}),
        "required": required,
    }


def serialize_schema(schema: Mapping[str, Any], *, flat: bool) -> str:
    """Render the schema with sorted keys, on one line or indented by two spaces.

    The output matches ``json.dumps(schema, sort_keys=True, indent=...)`` but
    walks containers iteratively, since a schema is about twice as deep as the
    example it was inferred from.
    """
    indent = None if flat else 2
    key_separator = ":" if flat else ": "
    parts: list[str] = []
    pending: list[str | tuple[Any, int]] = [(schema, 0)]
    while pending:
        item = pending.pop()
        if isinstance(item, str):
            parts.append(item)
            continue
        current, level = item
        if isinstance(current, Mapping) and current:
            tokens: list[str | tuple[Any, int]] = ["{"]
            for position, key in enumerate(sorted(current)):
                prefix = "," if position else ""
                tokens.append(
                    f"{prefix}{_newline(indent, level + 1)}{_dump_scalar(key)}{key_separator}"
                )
                tokens.append((current[key], level + 1))
            tokens.append(f"{_newline(indent, level)}}}")
            pending.extend(reversed(tokens))
        elif isinstance(current, list) and current:
            tokens = ["["]
            for position, element in enumerate(current):
                tokens.append(f"{',' if position else ''}{_newline(indent, level + 1)}")
                tokens.append((element, level + 1))
            tokens.append(f"{_newline(indent, level)}]")
            pending.extend(reversed(tokens))
        else:
            parts.append(_dump_scalar(current))
    return "".join(parts)


def generate_schema_document(json_text: str, *, flat: bool = False) -> str:
    """Infer a JSON Schema document from example JSON text."""
    return serialize_schema(build_root_schema(load_example_document(json_text)), flat=flat)


def _newline(indent: int | None, level: int) -> str:
    if indent is None:
        return ""
    return "\n" + " " * (indent * level)


def _dump_scalar(value: Any) -> str:
    return json.dumps(value, ensure_ascii=False)


def _reject_constant(name: str) -> Any:
    raise ValueError(f"Unsupported JSON constant: {name}")
