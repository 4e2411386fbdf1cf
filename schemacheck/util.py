"""JSON value helpers shared by the schema checker: equality, hashing, typing."""

from __future__ import annotations

import dataclasses
import hashlib
import math
import struct
from dataclasses import dataclass
from decimal import Decimal
from fractions import Fraction
from typing import Any, Iterable

__all__ = [
    "SchemaError",
    "JSONInfo",
    "Annotations",
    "equal",
    "json_type",
    "json_number",
    "hash_value",
    "field_json_info",
]


class SchemaError(Exception):
    """Raised when a schema is malformed, cannot be resolved, or rejects an instance."""


def _is_struct(value: Any) -> bool:
    return dataclasses.is_dataclass(value) and not isinstance(value, type)


def _public_fields(value: Any) -> list[dataclasses.Field]:
    return [f for f in dataclasses.fields(value) if not f.name.startswith("_")]


def _kind(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float, Decimal, Fraction)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, (list, tuple)):
        return "array"
    if isinstance(value, dict):
        return "map"
    if _is_struct(value):
        return "struct"
    if isinstance(value, complex):
        return "complex"
    return "other"


def json_number(value: Any) -> Fraction | None:
    """Return value as an exact rational, or None if it is not a finite number."""
    if isinstance(value, bool):
        return None
    if isinstance(value, Fraction):
        return value
    if isinstance(value, int):
        return Fraction(value)
    if isinstance(value, float):
        return Fraction(value) if math.isfinite(value) else None
    if isinstance(value, Decimal):
        return Fraction(value) if value.is_finite() else None
    return None


def json_type(value: Any) -> str | None:
    """Return the JSON Schema type name of value, or None if it is not a JSON value.

    Numbers with no fractional part are reported as "integer".
    """
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, int):
        return "integer"
    if isinstance(value, float):
        return "integer" if math.isfinite(value) and value.is_integer() else "number"
    if isinstance(value, Decimal):
        if value.is_finite() and value == value.to_integral_value():
            return "integer"
        return "number"
    if isinstance(value, Fraction):
        return "integer" if value.denominator == 1 else "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, (list, tuple)):
        return "array"
    if isinstance(value, dict) or _is_struct(value):
        return "object"
    return None


def equal(x: Any, y: Any) -> bool:
    """Report whether two JSON values are equal, comparing numbers mathematically."""
    rx, ry = json_number(x), json_number(y)
    if rx is not None and ry is not None:
        return rx == ry
    kx, ky = _kind(x), _kind(y)
    if kx != ky:
        return False
    if kx == "null":
        return True
    if kx in ("boolean", "string", "complex", "number"):
        # "number" here means a non-finite float or decimal.
        return x == y
    if kx == "array":
        return len(x) == len(y) and all(equal(a, b) for a, b in zip(x, y))
    if kx == "map":
        if len(x) != len(y):
            return False
        return all(k in y and equal(v, y[k]) for k, v in x.items())
    if kx == "struct":
        if type(x) is not type(y):
            return False
        return all(
            equal(getattr(x, f.name), getattr(y, f.name)) for f in _public_fields(x)
        )
    raise TypeError(f"unsupported type for comparison: {type(x).__name__}")


def hash_value(value: Any) -> int:
    """Return a hash of a JSON value; values that are equal() hash the same.

    Raises TypeError for values that are not JSON-like, or for maps whose keys
    are not strings.
    """
    h = hashlib.blake2b(digest_size=8)

    def write_uint(n: int) -> None:
        h.update(struct.pack(">Q", n))

    def write_bytes(data: bytes) -> None:
        write_uint(len(data))
        h.update(data)

    def write(v: Any) -> None:
        r = json_number(v)
        if r is not None:
            h.update(b"n")
            sign = (r > 0) - (r < 0)
            write_uint(sign + 1)
            num = abs(r.numerator)
            write_bytes(num.to_bytes((num.bit_length() + 7) // 8, "big"))
            den = r.denominator
            write_bytes(den.to_bytes((den.bit_length() + 7) // 8, "big"))
            return
        kind = _kind(v)
        if kind == "null":
            h.update(b"\x00")
        elif kind == "string":
            h.update(b"s")
            write_bytes(v.encode("utf-8"))
        elif kind == "boolean":
            h.update(b"b\x01" if v else b"b\x00")
        elif kind == "complex":
            h.update(b"c")
            h.update(struct.pack(">dd", v.real, v.imag))
        elif kind == "number":
            h.update(b"f")
            write_bytes(str(v).encode("ascii"))
        elif kind == "array":
            h.update(b"a")
            write_uint(len(v))
            for item in v:
                write(item)
        elif kind == "struct":
            h.update(b"t")
            for f in _public_fields(v):
                write(getattr(v, f.name))
        elif kind == "map":
            if any(not isinstance(k, str) for k in v):
                raise TypeError("map with non-string key")
            h.update(b"m")
            write_uint(len(v))
            for k in sorted(v):
                write(k)
                write(v[k])
        else:
            raise TypeError(f"unsupported type for hashing: {type(v).__name__}")

    write(value)
    return int.from_bytes(h.digest(), "big")


@dataclass(frozen=True)
class JSONInfo:
    """How a dataclass field appears in JSON."""

    omit: bool = False
    name: str = ""
    settings: frozenset[str] = frozenset()


def field_json_info(field: dataclasses.Field) -> JSONInfo:
    """Describe how a dataclass field is encoded as JSON.

    Fields whose names start with an underscore are private and omitted.
    The "json" metadata entry works like a struct tag: "name,opt1,opt2",
    where a bare "-" omits the field and "-," names it "-".
    """
    if field.name.startswith("_"):
        return JSONInfo(omit=True)
    tag = field.metadata.get("json") if field.metadata else None
    if tag is None:
        return JSONInfo(name=field.name)
    name, sep, rest = tag.partition(",")
    if name == "-" and not sep:
        return JSONInfo(omit=True)
    settings = frozenset(rest.split(",")) if rest else frozenset()
    return JSONInfo(name=name or field.name, settings=settings)


@dataclass
class Annotations:
    """Items and properties evaluated during validation, used by the unevaluated* keywords."""

    all_items: bool = False
    end_index: int = 0
    evaluated_indexes: set[int] = dataclasses.field(default_factory=set)
    all_properties: bool = False
    evaluated_properties: set[str] = dataclasses.field(default_factory=set)

    def note_index(self, index: int) -> None:
        """Mark the item at index as evaluated."""
        self.evaluated_indexes.add(index)

    def note_end_index(self, end: int) -> None:
        """Mark every item with index below end as evaluated."""
        if end > self.end_index:
            self.end_index = end

    def note_property(self, prop: str) -> None:
        """Mark prop as evaluated."""
        self.evaluated_properties.add(prop)

    def note_properties(self, props: Iterable[str]) -> None:
        """Mark every name in props as evaluated."""
        self.evaluated_properties.update(props)

    def merge(self, other: Annotations | None) -> None:
        """Add the annotations of other to these."""
        if other is None:
            return
        if other.all_items:
            self.all_items = True
        if other.end_index > self.end_index:
            self.end_index = other.end_index
        self.evaluated_indexes |= other.evaluated_indexes
        if other.all_properties:
            self.all_properties = True
        self.evaluated_properties |= other.evaluated_properties