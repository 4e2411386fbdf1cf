"""Schema objects for the 2020-12 draft of JSON Schema.

A Schema can be built directly, as a dataclass, or decoded from JSON with
``Schema.from_json`` or ``Schema.from_dict``. It can be encoded back with
``Schema.to_json`` or ``Schema.to_dict``.

Absent values follow JSON's distinction between missing and empty: ``None``
lists and maps are absent, empty ones are present. The ``const`` and
``default`` keywords use the ``ABSENT`` marker, because JSON null (``None``)
is a legitimate value for them.

The "format" and content keywords are recorded but not used for validation.
"""

from __future__ import annotations

import dataclasses
import json
import math
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Any, Iterator

from .util import SchemaError, field_json_info

__all__ = [
    "ABSENT",
    "FIELD_BY_JSON_NAME",
    "SCHEMA_FIELDS",
    "Schema",
    "false_schema",
]

_INT32_MIN = -(2**31)
_INT32_MAX = 2**31 - 1
_SCHEMA_KINDS = ("schema", "schemas", "schema_map")


@dataclass(frozen=True)
class _Absent:
    """Marker for a keyword whose value may be JSON null but is not present."""

    def __repr__(self) -> str:
        return "ABSENT"

    def __bool__(self) -> bool:
        return False


ABSENT = _Absent()


def _kw(json_name: str, kind: str, default: Any = None) -> Any:
    return field(default=default, metadata={"json": f"{json_name},omitempty", "kind": kind})


def _hidden(kind: str, default: Any = None) -> Any:
    return field(default=default, metadata={"json": "-", "kind": kind})


def _internal(default: Any = None) -> Any:
    return field(default=default, init=False, repr=False, compare=False)


@dataclass(eq=False)
class Schema:
    """A JSON schema object.

    ``type`` holds a single type name and ``types`` several; at most one may be set.
    Keywords not described by a field are kept in ``extra``.
    """

    # core
    id: str = _kw("$id", "string", "")
    schema: str = _kw("$schema", "string", "")
    ref: str = _kw("$ref", "string", "")
    comment: str = _kw("$comment", "string", "")
    defs: dict[str, Schema] | None = _kw("$defs", "schema_map")
    definitions: dict[str, Schema] | None = _kw("definitions", "schema_map")
    anchor: str = _kw("$anchor", "string", "")
    dynamic_anchor: str = _kw("$dynamicAnchor", "string", "")
    dynamic_ref: str = _kw("$dynamicRef", "string", "")
    vocabulary: dict[str, bool] | None = _kw("$vocabulary", "vocab")

    # metadata
    title: str = _kw("title", "string", "")
    description: str = _kw("description", "string", "")
    default: Any = _kw("default", "any", ABSENT)
    deprecated: bool = _kw("deprecated", "bool", False)
    read_only: bool = _kw("readOnly", "bool", False)
    write_only: bool = _kw("writeOnly", "bool", False)
    examples: list[Any] | None = _kw("examples", "list")

    # validation
    type: str = _hidden("type", "")
    types: list[str] | None = _hidden("types")
    enum: list[Any] | None = _kw("enum", "list")
    const: Any = _kw("const", "any", ABSENT)
    multiple_of: float | None = _kw("multipleOf", "float")
    minimum: float | None = _kw("minimum", "float")
    maximum: float | None = _kw("maximum", "float")
    exclusive_minimum: float | None = _kw("exclusiveMinimum", "float")
    exclusive_maximum: float | None = _kw("exclusiveMaximum", "float")
    min_length: int | None = _kw("minLength", "int")
    max_length: int | None = _kw("maxLength", "int")
    pattern: str = _kw("pattern", "string", "")

    # arrays
    prefix_items: list[Schema] | None = _kw("prefixItems", "schemas")
    items: Schema | None = _kw("items", "schema")
    min_items: int | None = _kw("minItems", "int")
    max_items: int | None = _kw("maxItems", "int")
    additional_items: Schema | None = _kw("additionalItems", "schema")
    unique_items: bool = _kw("uniqueItems", "bool", False)
    contains: Schema | None = _kw("contains", "schema")
    min_contains: int | None = _kw("minContains", "int")
    max_contains: int | None = _kw("maxContains", "int")
    unevaluated_items: Schema | None = _kw("unevaluatedItems", "schema")

    # objects
    min_properties: int | None = _kw("minProperties", "int")
    max_properties: int | None = _kw("maxProperties", "int")
    required: list[str] | None = _kw("required", "strings")
    dependent_required: dict[str, list[str]] | None = _kw("dependentRequired", "dep")
    properties: dict[str, Schema] | None = _kw("properties", "schema_map")
    pattern_properties: dict[str, Schema] | None = _kw("patternProperties", "schema_map")
    additional_properties: Schema | None = _kw("additionalProperties", "schema")
    property_names: Schema | None = _kw("propertyNames", "schema")
    unevaluated_properties: Schema | None = _kw("unevaluatedProperties", "schema")

    # logic
    all_of: list[Schema] | None = _kw("allOf", "schemas")
    any_of: list[Schema] | None = _kw("anyOf", "schemas")
    one_of: list[Schema] | None = _kw("oneOf", "schemas")
    not_: Schema | None = _kw("not", "schema")

    # conditional
    if_: Schema | None = _kw("if", "schema")
    then: Schema | None = _kw("then", "schema")
    else_: Schema | None = _kw("else", "schema")
    dependent_schemas: dict[str, Schema] | None = _kw("dependentSchemas", "schema_map")

    # content and format: recorded, not validated
    content_encoding: str = _kw("contentEncoding", "string", "")
    content_media_type: str = _kw("contentMediaType", "string", "")
    content_schema: Schema | None = _kw("contentSchema", "schema")
    format: str = _kw("format", "string", "")

    extra: dict[str, Any] | None = _hidden("extra")

    # Computed during resolution.
    _base: Schema | None = _internal()
    _uri: str | None = _internal()
    _path: str = _internal("")
    _resolved_ref: Schema | None = _internal()
    _resolved_dynamic_ref: Schema | None = _internal()
    _dynamic_ref_anchor: str = _internal("")
    _anchors: dict[str, Any] | None = _internal()
    _pattern: Any = _internal()
    _pattern_properties: dict[Any, Schema] | None = _internal()
    _is_required: set[str] | None = _internal()

    def __str__(self) -> str:
        if self._uri:
            return self._uri
        anchor = self.anchor or self.dynamic_anchor
        if anchor:
            base_uri = ""
            if self._base is not None and self._base._uri:
                base_uri = self._base._uri
            return f"{json.dumps(base_uri)}, anchor {anchor}"
        if self._path:
            return self._path
        return "<anonymous schema>"

    @property
    def resolved_ref(self) -> Schema | None:
        """The schema that $ref refers to, once resolved; otherwise None."""
        return self._resolved_ref

    def basic_checks(self) -> None:
        """Raise SchemaError if mutually exclusive fields are both set."""
        if self.type and self.types is not None:
            raise SchemaError("both Type and Types are set; at most one should be")
        if self.defs is not None and self.definitions is not None:
            raise SchemaError("both Defs and Definitions are set; at most one should be")

    def children(self) -> Iterator[Schema]:
        """Yield the immediate subschemas, by keyword name and then by map key."""
        for attr, _, kind in SCHEMA_FIELDS:
            value = getattr(self, attr)
            if value is None:
                continue
            if kind == "schema":
                yield value
            elif kind == "schemas":
                yield from (child for child in value if child is not None)
            else:
                yield from (value[k] for k in sorted(value) if value[k] is not None)

    def all(self) -> Iterator[Schema]:
        """Yield this schema and every schema beneath it, in preorder."""
        yield self
        for child in self.children():
            yield from child.all()

    def to_dict(self) -> dict[str, Any]:
        """Return the schema as a JSON-ready dict."""
        self.basic_checks()
        out: dict[str, Any] = {}
        if self.type:
            out["type"] = self.type
        elif self.types is not None:
            out["type"] = list(self.types)
        for attr, name, kind in _ENCODED_FIELDS:
            value = getattr(self, attr)
            if _is_empty(value, kind):
                continue
            out[name] = _encode(value, kind)
        if self.extra:
            for key in self.extra:
                if key in _JSON_NAMES:
                    raise SchemaError(f"map key {json.dumps(key)} duplicates struct field")
            for key in sorted(self.extra):
                out[key] = _plain(self.extra[key])
        return out

    def to_json(self) -> str:
        """Return the schema as compact JSON text."""
        return json.dumps(self.to_dict(), separators=(",", ":"), ensure_ascii=False)

    @classmethod
    def from_dict(cls, data: Any) -> Schema:
        """Build a schema from a decoded JSON value; booleans become true/false schemas."""
        if isinstance(data, bool):
            return cls() if data else false_schema()
        if not isinstance(data, dict):
            raise SchemaError(f"cannot unmarshal {_kind_name(data)} into a schema")
        s = cls()
        extra: dict[str, Any] = {}
        for key, value in data.items():
            if key == "type":
                _decode_type(s, value)
                continue
            decoder = _DECODERS.get(key)
            if decoder is None:
                extra[key] = _decode_any(value)
                continue
            attr, kind = decoder
            if kind == "any":
                setattr(s, attr, _decode_any(value))
            elif value is not None:
                setattr(s, attr, _decode(key, value, kind))
        if extra:
            s.extra = extra
        return s

    @classmethod
    def from_json(cls, text: str | bytes) -> Schema:
        """Decode a schema from JSON text."""
        try:
            data = json.loads(text, parse_float=Decimal)
        except ValueError as exc:
            raise SchemaError(f"invalid JSON: {exc}") from exc
        return cls.from_dict(data)


def false_schema() -> Schema:
    """Return a new schema that rejects every value."""
    return Schema(not_=Schema())


def _kind_name(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float, Decimal)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, (list, tuple)):
        return "array"
    if isinstance(value, dict):
        return "object"
    return type(value).__name__


def _is_empty(value: Any, kind: str) -> bool:
    if kind == "any":
        return value is ABSENT
    if kind in ("int", "float", "schema"):
        return value is None
    return not value


def _plain(value: Any) -> Any:
    if isinstance(value, Schema):
        return value.to_dict()
    if value is None or isinstance(value, (bool, str)):
        return value
    if isinstance(value, Decimal):
        value = float(value)
    if isinstance(value, float):
        if math.isfinite(value) and value.is_integer() and abs(value) < 1e21:
            return int(value)
        return value
    if isinstance(value, dict):
        return {k: _plain(value[k]) for k in sorted(value)}
    if isinstance(value, (list, tuple)):
        return [_plain(item) for item in value]
    return value


def _encode(value: Any, kind: str) -> Any:
    if kind == "schema":
        return value.to_dict()
    if kind == "schemas":
        return [None if child is None else child.to_dict() for child in value]
    if kind == "schema_map":
        return {
            k: None if value[k] is None else value[k].to_dict() for k in sorted(value)
        }
    return _plain(value)


def _decode_any(value: Any) -> Any:
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, dict):
        return {k: _decode_any(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_decode_any(v) for v in value]
    return value


def _decode_type(s: Schema, value: Any) -> None:
    if isinstance(value, str):
        s.type = value
    elif isinstance(value, list) and all(isinstance(t, str) for t in value):
        s.types = list(value)
    else:
        raise SchemaError(
            f'invalid value for "type": {json.dumps(_plain(value), default=str)}'
        )


def _decode_int(name: str, value: Any) -> int:
    if isinstance(value, bool):
        raise SchemaError(f"{name}: cannot be unmarshaled into an int")
    if isinstance(value, str):
        reason = "not a number" if "." in value else "cannot be unmarshaled into an int"
        raise SchemaError(f"{name}: {reason}")
    if isinstance(value, int):
        n = value
    elif isinstance(value, Decimal):
        if not value.is_finite():
            raise SchemaError(f"{name}: not a number")
        if "." not in str(value):
            raise SchemaError(f"{name}: cannot be unmarshaled into an int")
        try:
            integral = value.to_integral_value()
        except InvalidOperation as exc:
            raise SchemaError(f"{name}: not a number") from exc
        if value != integral:
            raise SchemaError(f"{name}: not an integer value")
        n = int(integral)
    elif isinstance(value, float):
        if not math.isfinite(value):
            raise SchemaError(f"{name}: not a number")
        if not value.is_integer():
            raise SchemaError(f"{name}: not an integer value")
        n = int(value)
    else:
        raise SchemaError(f"{name}: cannot be unmarshaled into an int")
    if n < _INT32_MIN or n > _INT32_MAX:
        raise SchemaError(f"{name}: integer is out of range")
    return n


def _expect(name: str, value: Any, types: type | tuple[type, ...], what: str) -> None:
    if not isinstance(value, types) or isinstance(value, bool) and bool not in (
        types if isinstance(types, tuple) else (types,)
    ):
        raise SchemaError(f"{name}: cannot unmarshal {_kind_name(value)} into {what}")


def _sub(value: Any) -> Schema | None:
    return None if value is None else Schema.from_dict(value)


def _decode(name: str, value: Any, kind: str) -> Any:
    if kind == "string":
        _expect(name, value, str, "a string")
        return value
    if kind == "bool":
        _expect(name, value, bool, "a boolean")
        return value
    if kind == "int":
        return _decode_int(name, value)
    if kind == "float":
        _expect(name, value, (int, float, Decimal), "a number")
        return float(value)
    if kind == "schema":
        return Schema.from_dict(value)
    if kind == "schemas":
        _expect(name, value, list, "an array")
        return [_sub(v) for v in value]
    if kind == "schema_map":
        _expect(name, value, dict, "an object")
        return {k: _sub(v) for k, v in value.items()}
    if kind == "strings":
        _expect(name, value, list, "an array")
        for item in value:
            _expect(name, item, str, "a string")
        return list(value)
    if kind == "list":
        _expect(name, value, list, "an array")
        return [_decode_any(v) for v in value]
    if kind == "vocab":
        _expect(name, value, dict, "an object")
        for item in value.values():
            _expect(name, item, bool, "a boolean")
        return dict(value)
    if kind == "dep":
        _expect(name, value, dict, "an object")
        result: dict[str, list[str] | None] = {}
        for key, names in value.items():
            if names is None:
                result[key] = None
                continue
            _expect(name, names, list, "an array")
            for item in names:
                _expect(name, item, str, "a string")
            result[key] = list(names)
        return result
    raise SchemaError(f"{name}: unknown field kind {kind}")


_ENCODED_FIELDS: tuple[tuple[str, str, str], ...] = tuple(
    (f.name, info.name, f.metadata["kind"])
    for f, info in ((f, field_json_info(f)) for f in dataclasses.fields(Schema))
    if not info.omit
)

# Map from a keyword's JSON name to the Schema attribute that holds it.
FIELD_BY_JSON_NAME: dict[str, str] = {name: attr for attr, name, _ in _ENCODED_FIELDS}

# The subschema-valued fields as (attribute, JSON name, kind), sorted by JSON name.
SCHEMA_FIELDS: tuple[tuple[str, str, str], ...] = tuple(
    sorted((t for t in _ENCODED_FIELDS if t[2] in _SCHEMA_KINDS), key=lambda t: t[1])
)

_JSON_NAMES = frozenset(FIELD_BY_JSON_NAME) | {"type"}
_DECODERS = {name: (attr, kind) for attr, name, kind in _ENCODED_FIELDS}