"""Tree serialization: unist-style dicts and JSON.

Converts typstdown nodes to and from the JSON shape used by unist
toolchains (mdast/hast): a ``type`` discriminator, ``children`` lists,
``value`` on leaves, ``tagName``/``properties`` on elements and an optional
``position``. This is how a tree produced by an external markdown parser
enters typstdown, and how a rendered tree leaves it.

Example:
    from typstdown.serialization import from_json, to_json

    tree = from_json('{"type": "root", "children": [...]}')
    extract_math(tree)
    print(to_json(tree, indent=2))

Thread Safety:
    All functions are pure and safe to call from any thread.

"""

import json
from dataclasses import fields
from typing import Any

from typstdown.extract.classifier import escape_braces
from typstdown.location import SourceLocation
from typstdown.nodes import (
    Blockquote,
    Break,
    Code,
    Delete,
    Element,
    Emphasis,
    Foreign,
    Heading,
    Html,
    Image,
    InlineCode,
    Link,
    List,
    ListItem,
    MathSegment,
    Node,
    Paragraph,
    Raw,
    Root,
    Strong,
    Text,
    ThematicBreak,
)
from typstdown.utils.logger import get_logger

logger = get_logger(__name__)

# Registry of unist type names to classes for deserialization
_NODE_TYPES: dict[str, type[Node]] = {
    cls.kind: cls
    for cls in (
        Root,
        Paragraph,
        Heading,
        Blockquote,
        List,
        ListItem,
        Code,
        Html,
        ThematicBreak,
        Text,
        Emphasis,
        Strong,
        Delete,
        Link,
        Image,
        InlineCode,
        Break,
        Raw,
        Element,
        MathSegment,
    )
}

# Python field name -> unist key, where they differ
_FIELD_KEYS = {"tag_name": "tagName"}

# remark-math node types; ``math`` is the display form
_REMARK_MATH = frozenset({"inlineMath", "math"})

# Keys a Foreign node keeps outside ``data``
_FOREIGN_RESERVED = frozenset({"type", "children", "position"})


def to_dict(node: Node) -> dict[str, Any]:
    """Convert a node to a unist-style dict.

    Args:
        node: Any typstdown node.

    Returns:
        Dict with ``type``, the node's fields and ``position`` if known.

    """
    if isinstance(node, Foreign):
        return _foreign_to_dict(node)

    result: dict[str, Any] = {"type": node.kind}
    for f in fields(node):
        value = getattr(node, f.name)
        if f.name == "location":
            if value is not None:
                result["position"] = _position(value)
            continue
        if f.name == "children":
            result["children"] = [to_dict(child) for child in value]
            continue
        result[_FIELD_KEYS.get(f.name, f.name)] = _copy_value(value)
    return result


def _foreign_to_dict(node: Foreign) -> dict[str, Any]:
    result: dict[str, Any] = _copy_value(node.data)
    result["type"] = node.type_name
    if node.container or node.children:
        result["children"] = [to_dict(child) for child in node.children]
    if node.location is not None:
        result["position"] = _position(node.location)
    return result


def _copy_value(value: Any) -> Any:
    if isinstance(value, dict):
        return {k: _copy_value(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_copy_value(v) for v in value]
    return value


def _position(loc: SourceLocation) -> dict[str, Any]:
    return {
        "start": {"line": loc.lineno, "column": loc.col_offset, "offset": loc.offset},
        "end": {
            "line": loc.end_lineno,
            "column": loc.end_col_offset,
            "offset": loc.end_offset,
        },
    }


def from_dict(data: dict[str, Any], *, source_file: str | None = None) -> Node:
    """Reconstruct a typed node from a unist-style dict.

    Keys that are not fields of the node class are ignored, so parser
    output carrying extra data (``data``, ``spread``...) loads cleanly.
    remark-math ``inlineMath`` and ``math`` nodes load as math segments.
    Any other unknown type loads as a ``Foreign`` node that keeps its keys.

    Args:
        data: Dict with ``type`` and node fields.
        source_file: Recorded in each node's location

    Returns:
        Typed node with its children.

    Raises:
        ValueError: If ``type`` is missing.

    """
    type_name = data.get("type")
    if type_name is None:
        msg = "Missing 'type' field in serialized node"
        raise ValueError(msg)

    location = None
    if position := data.get("position"):
        location = SourceLocation.from_position(position, source_file)

    if type_name in _REMARK_MATH:
        return _math_from_remark(data, type_name == "math", location)

    node_cls = _NODE_TYPES.get(type_name)
    if node_cls is None:
        return _foreign_from_dict(data, type_name, location, source_file)

    kwargs: dict[str, Any] = {}
    for f in fields(node_cls):
        if f.name == "location":
            if location is not None:
                kwargs["location"] = location
            continue
        key = _FIELD_KEYS.get(f.name, f.name)
        if key not in data:
            continue
        if f.name == "children":
            kwargs["children"] = [
                from_dict(child, source_file=source_file) for child in data["children"]
            ]
            continue
        kwargs[f.name] = _copy_value(data[key])

    return node_cls(**kwargs)


def _math_from_remark(
    data: dict[str, Any], display: bool, location: SourceLocation | None
) -> MathSegment:
    value = str(data.get("value", ""))
    delimiter = "$$" if display else "$"
    return MathSegment(
        content=escape_braces(value.strip()),
        display=display,
        raw=f"{delimiter}{value}{delimiter}",
        location=location,
    )


def _foreign_from_dict(
    data: dict[str, Any],
    type_name: str,
    location: SourceLocation | None,
    source_file: str | None,
) -> Foreign:
    logger.debug("Keeping unmodeled node type %r as-is", type_name)
    children = data.get("children")
    return Foreign(
        type_name=type_name,
        data={k: _copy_value(v) for k, v in data.items() if k not in _FOREIGN_RESERVED},
        container=children is not None,
        children=[from_dict(child, source_file=source_file) for child in children or ()],
        location=location,
    )


def to_json(tree: Node, *, indent: int | None = None) -> str:
    """Serialize a tree to a JSON string.

    Output is deterministic (sorted keys).

    Args:
        tree: Root of the tree to serialize.
        indent: JSON indentation level (None for compact).

    Returns:
        JSON string.

    """
    return json.dumps(to_dict(tree), sort_keys=True, indent=indent)


def from_json(data: str, *, source_file: str | None = None) -> Node:
    """Deserialize a tree from a JSON string.

    Args:
        data: JSON string (as produced by to_json or a unist toolchain).
        source_file: Recorded in each node's location

    Returns:
        Root node of the tree.

    """
    return from_dict(json.loads(data), source_file=source_file)
