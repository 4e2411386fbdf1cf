"""Build a schema that describes a Python type.

Strings, booleans, integers and floats map to the matching JSON types.
Lists, sequences and tuples become arrays; a fixed-length homogeneous tuple
also bounds the number of items. Mappings with string keys become objects
whose additional properties follow the value type. Dataclasses become
objects that allow no other properties: each public field is a property
named by its JSON name, and is required unless marked omitempty or omitzero.
``X | None`` additionally allows JSON null.

A field's "jsonschema" metadata entry becomes the property's description;
it must not be empty or begin with "WORD=".
"""

from __future__ import annotations

import collections.abc
import dataclasses
import re
import types
import typing
from typing import Any

from .schema import Schema, false_schema
from .util import SchemaError, field_json_info

__all__ = ["for_type"]

_DISALLOWED_PREFIX = re.compile(r"^[^ \t\n]*=")
_NONE_TYPE = type(None)
_MAPPING_ORIGINS = (dict, collections.abc.Mapping, collections.abc.MutableMapping)
_SEQUENCE_ORIGINS = (list, collections.abc.Sequence, collections.abc.MutableSequence)
_NAMED_TYPES: dict[str, Any] = {
    "bool": bool,
    "int": int,
    "float": float,
    "str": str,
    "Any": Any,
    "typing.Any": Any,
    "object": object,
    "dict": dict,
    "list": list,
    "tuple": tuple,
}


def for_type(tp: Any) -> Schema:
    """Return a new schema describing tp.

    Raises SchemaError for types with no JSON counterpart (callables, complex
    numbers, maps with non-string keys and the like) and for cycles of dataclasses.
    """
    try:
        return _for_type(tp, set())
    except SchemaError as exc:
        raise SchemaError(f"for_type({_type_name(tp)}): {exc}") from exc


def _type_name(tp: Any) -> str:
    if isinstance(tp, type):
        return tp.__qualname__
    return repr(tp)


def _is_union(tp: Any) -> bool:
    origin = typing.get_origin(tp)
    return origin is typing.Union or origin is types.UnionType


def _is_dataclass_type(tp: Any) -> bool:
    return isinstance(tp, type) and dataclasses.is_dataclass(tp)


def _unsupported(tp: Any) -> SchemaError:
    return SchemaError(f"type {_type_name(tp)} is unsupported by jsonschema")


def _for_type(tp: Any, seen: set[type]) -> Schema:
    # X | None is described like X, except that null is allowed as well.
    allow_null = False
    while _is_union(tp):
        args = typing.get_args(tp)
        others = [a for a in args if a is not _NONE_TYPE]
        if len(others) != 1 or len(others) == len(args):
            raise _unsupported(tp)
        allow_null = True
        tp = others[0]

    if _is_dataclass_type(tp):
        if tp in seen:
            raise SchemaError(f"cycle detected for type {_type_name(tp)}")
        seen.add(tp)
        try:
            schema = _for_dataclass(tp, seen)
        finally:
            seen.discard(tp)
    else:
        schema = _for_plain(tp, seen)

    if allow_null and schema.type:
        schema.types = ["null", schema.type]
        schema.type = ""
    return schema


def _for_plain(tp: Any, seen: set[type]) -> Schema:
    schema = Schema()
    origin = typing.get_origin(tp)
    args = typing.get_args(tp)

    if tp is Any or tp is object:
        return schema  # unrestricted
    if isinstance(tp, type):
        if issubclass(tp, bool):
            schema.type = "boolean"
            return schema
        if issubclass(tp, int):
            schema.type = "integer"
            return schema
        if issubclass(tp, float):
            schema.type = "number"
            return schema
        if issubclass(tp, str):
            schema.type = "string"
            return schema
        if issubclass(tp, collections.abc.Mapping):
            return _for_mapping(str, Any, seen)
        if issubclass(tp, (list, tuple)):
            return _for_array(Any, None, seen)
    if origin in _MAPPING_ORIGINS:
        key, value = args if len(args) == 2 else (str, Any)
        return _for_mapping(key, value, seen)
    if origin is tuple:
        if len(args) == 2 and args[1] is Ellipsis:
            return _for_array(args[0], None, seen)
        if args and args[0] != () and all(a == args[0] for a in args):
            return _for_array(args[0], len(args), seen)
        raise _unsupported(tp)
    if origin in _SEQUENCE_ORIGINS:
        return _for_array(args[0] if args else Any, None, seen)
    raise _unsupported(tp)


def _for_mapping(key: Any, value: Any, seen: set[type]) -> Schema:
    if not (isinstance(key, type) and issubclass(key, str)):
        raise SchemaError(f"unsupported map key type {_type_name(key)}")
    schema = Schema(type="object")
    try:
        schema.additional_properties = _for_type(value, seen)
    except SchemaError as exc:
        raise SchemaError(f"computing map value schema: {exc}") from exc
    return schema


def _for_array(item: Any, length: int | None, seen: set[type]) -> Schema:
    schema = Schema(type="array")
    try:
        schema.items = _for_type(item, seen)
    except SchemaError as exc:
        raise SchemaError(f"computing element schema: {exc}") from exc
    if length is not None:
        schema.min_items = length
        schema.max_items = length
    return schema


def _field_type(cls: type, fld: dataclasses.Field) -> Any:
    ftype = fld.type
    if isinstance(ftype, str):
        resolved = _NAMED_TYPES.get(ftype.strip())
        if resolved is None:
            raise SchemaError(
                f"cannot resolve annotation {ftype!r} of field {cls.__qualname__}.{fld.name}"
            )
        return resolved
    return ftype


def _for_dataclass(cls: type, seen: set[type]) -> Schema:
    schema = Schema(type="object", additional_properties=false_schema())
    for fld in dataclasses.fields(cls):
        info = field_json_info(fld)
        if info.omit:
            continue
        if schema.properties is None:
            schema.properties = {}
        sub = _for_type(_field_type(cls, fld), seen)
        tag = fld.metadata.get("jsonschema") if fld.metadata else None
        if tag is not None:
            if tag == "":
                raise SchemaError(
                    f"empty jsonschema tag on struct field {cls.__qualname__}.{fld.name}"
                )
            if _DISALLOWED_PREFIX.match(tag):
                raise SchemaError(f"tag must not begin with 'WORD=': {tag!r}")
            sub.description = tag
        schema.properties[info.name] = sub
        if "omitempty" not in info.settings and "omitzero" not in info.settings:
            if schema.required is None:
                schema.required = []
            schema.required.append(info.name)
    return schema