#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/unlatex/ast/serialization.py
"""JSON serialization and deserialization for AST nodes.

The serialized form is deterministic: every node becomes an object whose
first key is ``node_type``, followed by the node's fields in declaration
order and finally its ``position``. Child lists become arrays of such
objects. Deserializing a dump gives back a tree equal to the original.

Examples
--------
Serialize an AST to JSON:

    >>> from unlatex.ast import Root, Text
    >>> json_str = ast_to_json(Root(content=[Text("Hi")]))
    >>> json_str
    '{"node_type": "Root", "content": [{"node_type": "Text", "content": "Hi", "position": null}], "position": null, "schema_version": 1}'

Deserialize JSON back to an AST:

    >>> json_to_ast(json_str).content[0].content
    'Hi'

"""

from __future__ import annotations

import json
import logging
from dataclasses import MISSING, fields
from typing import Any, Optional

from unlatex.ast.nodes import NODE_TYPES, Argument, Node, Position, Span
from unlatex.constants import NODE_TYPE_KEY, POSITION_KEY
from unlatex.exceptions import SerializationError

logger = logging.getLogger(__name__)

SCHEMA_VERSION = 1

_NODE_CLASSES: dict[str, type[Node]] = {cls.__name__: cls for cls in NODE_TYPES}


def _is_node_list(field_default_factory: Any) -> bool:
    # Node-list fields are exactly the ones defaulting to an empty list
    return field_default_factory is list


# ============================================================================
# Positions
# ============================================================================


def _serialize_position(position: Position) -> dict[str, int]:
    return {"line": position.line, "column": position.column, "offset": position.offset}


def _serialize_span(span: Optional[Span]) -> Optional[dict[str, Any]]:
    if span is None:
        return None
    return {"start": _serialize_position(span.start), "end": _serialize_position(span.end)}


def _deserialize_position(data: Any, node_type: str) -> Position:
    if not isinstance(data, dict):
        raise SerializationError(f"Position of {node_type} must be an object", node_type=node_type)
    try:
        values = {key: data[key] for key in ("line", "column", "offset")}
    except KeyError as exc:
        raise SerializationError(f"Position of {node_type} is missing {exc}", node_type=node_type) from exc
    for key, value in values.items():
        if isinstance(value, bool) or not isinstance(value, int):
            raise SerializationError(f"Position field '{key}' of {node_type} must be an integer", node_type=node_type)
    return Position(**values)


def _deserialize_span(data: Any, node_type: str) -> Optional[Span]:
    if data is None:
        return None
    if not isinstance(data, dict) or "start" not in data or "end" not in data:
        raise SerializationError(f"Position of {node_type} must have 'start' and 'end'", node_type=node_type)
    return Span(_deserialize_position(data["start"], node_type), _deserialize_position(data["end"], node_type))


# ============================================================================
# Nodes
# ============================================================================

# Children still to convert: (child, list of its already-converted siblings)
_PendingDump = tuple[Node, list]
# Children still to build: (child data, built siblings, field name, parent node type)
_PendingLoad = tuple[Any, list, str, str]


def _dump_node(node: Node, pending: list[_PendingDump]) -> dict[str, Any]:
    node_class = type(node)
    if _NODE_CLASSES.get(node_class.__name__) is not node_class:
        raise SerializationError(f"Unknown node type for serialization: {node_class.__name__}")

    result: dict[str, Any] = {NODE_TYPE_KEY: node_class.__name__}
    for node_field in fields(node):  # type: ignore[arg-type]
        if node_field.name == POSITION_KEY:
            continue
        value = getattr(node, node_field.name)
        if _is_node_list(node_field.default_factory):
            children: list[dict[str, Any]] = []
            result[node_field.name] = children
            pending.extend((child, children) for child in reversed(value))
        else:
            result[node_field.name] = value
    result[POSITION_KEY] = _serialize_span(node.position)
    return result


def ast_to_dict(node: Node) -> dict[str, Any]:
    """Convert an AST node to a dictionary representation.

    The tree is walked with an explicit stack, so nesting depth is not
    limited by the interpreter's recursion limit.

    Parameters
    ----------
    node : Node
        The AST node to convert

    Returns
    -------
    dict
        Dictionary representation of the node and its descendants

    Raises
    ------
    SerializationError
        If the tree contains an object that is not a known node type

    Examples
    --------
    >>> from unlatex.ast import Text
    >>> ast_to_dict(Text("Hello"))
    {'node_type': 'Text', 'content': 'Hello', 'position': None}

    """
    pending: list[_PendingDump] = []
    result = _dump_node(node, pending)
    while pending:
        child, siblings = pending.pop()
        siblings.append(_dump_node(child, pending))
    return result


def _load_node(data: Any, strict_mode: bool, pending: list[_PendingLoad]) -> Node:
    if not isinstance(data, dict):
        raise SerializationError(f"Expected a node object, got {type(data).__name__}")

    node_type = data.get(NODE_TYPE_KEY)
    if not node_type:
        raise SerializationError(f"Dictionary must contain '{NODE_TYPE_KEY}' field")
    node_class = _NODE_CLASSES.get(node_type)
    if node_class is None:
        raise SerializationError(f"Unknown node type: {node_type}", node_type=node_type)

    kwargs: dict[str, Any] = {}
    known = {NODE_TYPE_KEY}
    for node_field in fields(node_class):  # type: ignore[arg-type]
        name = node_field.name
        known.add(name)
        if name == POSITION_KEY:
            kwargs[name] = _deserialize_span(data.get(POSITION_KEY), node_type)
            continue
        if name not in data:
            if node_field.default is MISSING and node_field.default_factory is MISSING:
                raise SerializationError(f"{node_type} is missing required field '{name}'", node_type=node_type)
            continue

        value = data[name]
        if _is_node_list(node_field.default_factory):
            if not isinstance(value, list):
                raise SerializationError(f"Field '{name}' of {node_type} must be a list", node_type=node_type)
            children: list[Node] = []
            kwargs[name] = children
            pending.extend((child, children, name, node_type) for child in reversed(value))
        elif node_field.type == "bool":
            if not isinstance(value, bool):
                raise SerializationError(f"Field '{name}' of {node_type} must be a boolean", node_type=node_type)
            kwargs[name] = value
        else:
            if not isinstance(value, str):
                raise SerializationError(f"Field '{name}' of {node_type} must be a string", node_type=node_type)
            kwargs[name] = value

    unknown = set(data) - known
    if unknown:
        if strict_mode:
            raise SerializationError(f"Unknown field(s) for {node_type}: {sorted(unknown)}", node_type=node_type)
        logger.warning("Ignoring unknown field(s) for %s: %s", node_type, sorted(unknown))

    return node_class(**kwargs)


def dict_to_ast(data: dict[str, Any], strict_mode: bool = True) -> Node:
    """Convert a dictionary representation back to an AST node.

    Parameters
    ----------
    data : dict
        Dictionary representation of a node
    strict_mode : bool, default True
        If True, unknown keys are an error. If False, they are logged and
        ignored.

    Returns
    -------
    Node
        Reconstructed AST node

    Raises
    ------
    SerializationError
        If the data is not a node object, names an unknown node type, lacks a
        required field or has a field of the wrong type

    Examples
    --------
    >>> data = {'node_type': 'Text', 'content': 'Hello', 'position': None}
    >>> dict_to_ast(data).content
    'Hello'

    """
    # Nodes are created before their children; child lists are filled in as
    # the stack unwinds
    pending: list[_PendingLoad] = []
    root = _load_node(data, strict_mode, pending)
    while pending:
        child_data, siblings, field_name, parent_type = pending.pop()
        child = _load_node(child_data, strict_mode, pending)
        if field_name == "args" and not isinstance(child, Argument):
            raise SerializationError(f"Arguments of {parent_type} must be Argument nodes", node_type=parent_type)
        siblings.append(child)
    return root


def ast_to_json(node: Node, indent: int | None = None) -> str:
    """Serialize an AST node to a JSON string with schema versioning.

    Parameters
    ----------
    node : Node
        The AST node to serialize
    indent : int or None, default = None
        Number of spaces for indentation (None for compact format)

    Returns
    -------
    str
        JSON text; the top-level object ends with a ``schema_version`` key

    """
    node_dict = ast_to_dict(node)
    versioned_dict = {**node_dict, "schema_version": SCHEMA_VERSION}
    return json.dumps(versioned_dict, indent=indent, ensure_ascii=False)


def json_to_ast(json_str: str, strict_mode: bool = True) -> Node:
    """Deserialize a JSON string to an AST node.

    A missing ``schema_version`` is read as version 1.

    Parameters
    ----------
    json_str : str
        JSON string produced by :func:`ast_to_json`
    strict_mode : bool, default True
        Passed to :func:`dict_to_ast`

    Returns
    -------
    Node
        Reconstructed AST node

    Raises
    ------
    SerializationError
        If the text is not valid JSON, has an unsupported schema version, or
        does not describe a valid tree

    """
    try:
        data = json.loads(json_str)
    except json.JSONDecodeError as exc:
        raise SerializationError(f"Invalid JSON: {exc}", original_error=exc) from exc

    if not isinstance(data, dict):
        raise SerializationError(f"Expected a JSON object, got {type(data).__name__}")

    schema_version = data.pop("schema_version", SCHEMA_VERSION)
    if schema_version != SCHEMA_VERSION:
        raise SerializationError(f"Unsupported schema version: {schema_version!r}")

    return dict_to_ast(data, strict_mode=strict_mode)
