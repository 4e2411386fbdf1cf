"""JSON Pointers (RFC 6901) applied to schemas.

A pointer is empty, referring to the root, or a sequence of slash-prefixed
segments such as "/$defs/point/properties/x". Within a segment, "~0" stands
for "~" and "~1" for "/".
"""

from __future__ import annotations

import dataclasses
import json
import re
from typing import Any

from .schema import ABSENT, FIELD_BY_JSON_NAME, Schema
from .util import SchemaError

__all__ = [
    "escape_segment",
    "unescape_segment",
    "parse_json_pointer",
    "dereference_json_pointer",
]

_INT_RE = re.compile(r"[+-]?[0-9]+")
_KIND_BY_ATTR = {f.name: f.metadata.get("kind") for f in dataclasses.fields(Schema)}
_MAP_KINDS = frozenset({"schema_map", "vocab", "dep"})
_LIST_KINDS = frozenset({"schemas", "strings", "list", "types"})


def escape_segment(segment: str) -> str:
    """Escape a property name for use as a pointer segment."""
    return segment.replace("~", "~0").replace("/", "~1")


def unescape_segment(segment: str) -> str:
    """Undo escape_segment."""
    return segment.replace("~1", "/").replace("~0", "~")


def parse_json_pointer(ptr: str) -> list[str]:
    """Split a pointer into its unescaped segments.

    Segments are left as strings: whether one is an index depends on the
    value it is applied to.
    """
    if ptr == "":
        return []
    if not ptr.startswith("/"):
        raise SchemaError(f"JSON Pointer {json.dumps(ptr)} does not begin with '/'")
    # Consecutive slashes are not coalesced, and a final "/" yields an empty segment.
    return [unescape_segment(seg) for seg in ptr[1:].split("/")]


def _schema_field(schema: Schema, name: str) -> Any:
    if name == "type":
        # "type" is held by either the single or the multiple form.
        if schema.type:
            return schema.type
        return schema.types if schema.types is not None else []
    attr = FIELD_BY_JSON_NAME.get(name)
    if attr is None:
        raise SchemaError(f"no schema field {json.dumps(name)}")
    value = getattr(schema, attr)
    if value is ABSENT:
        return None
    if value is None:
        kind = _KIND_BY_ATTR.get(attr)
        if kind in _MAP_KINDS:
            return {}
        if kind in _LIST_KINDS:
            return []
    return value


def _index(seq: list[Any] | tuple[Any, ...], seg: str) -> Any:
    if seg == "-":
        raise SchemaError("the JSON Pointer array segment '-' is not supported")
    if len(seg) > 1 and seg[0] == "0":
        raise SchemaError(f"segment {json.dumps(seg)} has leading zeroes")
    if not _INT_RE.fullmatch(seg):
        raise SchemaError(f"invalid int: {json.dumps(seg)}")
    n = int(seg)
    if n < 0 or n >= len(seq):
        raise SchemaError(f"index {n} is out of bounds for array of length {len(seq)}")
    return seq[n]


def _step(value: Any, seg: str) -> Any:
    if value is None:
        raise SchemaError("navigated to nil reference")
    if isinstance(value, Schema):
        return _schema_field(value, seg)
    if isinstance(value, (list, tuple)):
        return _index(value, seg)
    if isinstance(value, dict):
        if seg not in value:
            raise SchemaError(f"no key {json.dumps(seg)} in map")
        return value[seg]
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        raise SchemaError(f"navigated to non-Schema {type(value).__name__}")
    raise SchemaError(
        f"value {value!r} ({type(value).__name__}) is not a schema, slice or map"
    )


def dereference_json_pointer(schema: Schema, ptr: str) -> Schema:
    """Return the schema that ptr points to within schema.

    Raises SchemaError if the pointer is malformed or does not lead to a schema.
    """
    try:
        value: Any = schema
        for seg in parse_json_pointer(ptr):
            value = _step(value, seg)
        if not isinstance(value, Schema):
            raise SchemaError(
                f"does not refer to a schema, but to a {type(value).__name__}"
            )
        return value
    except SchemaError as exc:
        raise SchemaError(f"JSON Pointer {json.dumps(ptr)}: {exc}") from exc