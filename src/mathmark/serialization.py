"""JSON form of mathmark trees and token lists.

Nodes, source locations and diagnostics are all dataclasses, and all of
them encode the same way: a dict of their fields plus a ``_type`` tag
naming the class. Enum fields are stored by value. The command line's
``--dump-ast`` and ``--dump-tokens`` print this form.

Example:
    from mathmark import parse
    from mathmark.serialization import to_json, from_json

    doc = parse("%thm Main\\n$x$\\n%%")
    assert from_json(to_json(doc)) == doc

Output is deterministic: keys are sorted.
"""

import json
from collections.abc import Iterable
from dataclasses import fields, is_dataclass
from enum import Enum
from typing import Any

from mathmark.errors import Diagnostic, ErrorKind
from mathmark.location import SourceLocation
from mathmark.nodes import Document, EnvType, ListType, Node
from mathmark.tokens import HrStyle, Token

TYPE_TAG = "_type"

# Enum-valued fields, decoded by field name
_ENUM_FIELDS: dict[str, type[Enum]] = {
    "environment_type": EnvType,
    "style": HrStyle,
    "list_type": ListType,
    "kind": ErrorKind,
}


def _node_classes(base: type[Node]) -> Iterable[type[Node]]:
    for cls in base.__subclasses__():
        yield cls
        yield from _node_classes(cls)


def _record_types() -> dict[str, type]:
    """Tag -> class for everything that can appear in a serialized tree."""
    records: dict[str, type] = {cls.__name__: cls for cls in _node_classes(Node)}
    records["SourceLocation"] = SourceLocation
    records["Diagnostic"] = Diagnostic
    return records


_RECORD_TYPES = _record_types()


def to_dict(node: Node) -> dict[str, Any]:
    """Encode a node, and everything below it, as plain dicts and lists.

    >>> from mathmark.nodes import Text
    >>> to_dict(Text("x"))
    {'_type': 'Text', 'location': None, 'content': 'x'}
    """
    return _encode(node)


def _encode(value: Any) -> Any:
    match value:
        case Enum():
            return value.value
        case tuple() | list():
            return [_encode(item) for item in value]
        case _ if is_dataclass(value) and not isinstance(value, type):
            record = {TYPE_TAG: type(value).__name__}
            for f in fields(value):
                record[f.name] = _encode(getattr(value, f.name))
            return record
        case _:
            return value


def from_dict(data: dict[str, Any]) -> Node:
    """Rebuild a node from the output of to_dict.

    Raises:
        ValueError: The dict has no ``_type`` tag, or names no known node
    """
    node = _decode_record(data)
    if not isinstance(node, Node):
        raise ValueError(f"expected a node, got {type(node).__name__}")
    return node


def _decode_record(data: dict[str, Any]) -> Any:
    tag = data.get(TYPE_TAG)
    if tag is None:
        raise ValueError(f"serialized record has no {TYPE_TAG!r} tag")
    cls = _RECORD_TYPES.get(tag)
    if cls is None:
        raise ValueError(f"unknown node type {tag!r}")
    kwargs = {
        f.name: _decode(data[f.name], f.name) for f in fields(cls) if f.name in data
    }
    return cls(**kwargs)


def _decode(value: Any, field_name: str) -> Any:
    match value:
        case None:
            return None
        case dict():
            return _decode_record(value)
        case list():
            return tuple(_decode(item, field_name) for item in value)
        case _ if field_name in _ENUM_FIELDS:
            return _ENUM_FIELDS[field_name](value)
        case _:
            return value


def to_json(doc: Document, *, indent: int | None = None) -> str:
    """Encode a Document as a JSON string with sorted keys."""
    return json.dumps(to_dict(doc), sort_keys=True, indent=indent)


def from_json(data: str) -> Document:
    """Decode a Document from to_json output.

    Raises:
        ValueError: The JSON is not an encoded Document
    """
    node = from_dict(json.loads(data))
    if not isinstance(node, Document):
        raise ValueError(f"expected a Document, got {type(node).__name__}")
    return node


def tokens_to_list(tokens: Iterable[Token]) -> list[dict[str, Any]]:
    """Dump tokens as JSON-compatible dicts.

    Example:
        >>> from mathmark.lexer import tokenize
        >>> tokens_to_list(tokenize("~"))
        [{'type': 'NBSP', 'value': '', 'level': 0, 'lineno': 1, 'col': 1}]

    """
    return [
        {
            "type": token.type.name,
            "value": token.value,
            "level": token.level,
            "lineno": token.lineno,
            "col": token.col,
        }
        for token in tokens
    ]
