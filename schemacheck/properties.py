"""Access to the properties of object instances, and applying defaults.

An object instance is either a dict with string keys or a dataclass
instance. A dataclass's properties are its public fields, named by their
JSON names (see ``field_json_info``).
"""

from __future__ import annotations

import copy
import dataclasses
import functools
from decimal import Decimal
from fractions import Fraction
from typing import Any, Iterator

from .schema import ABSENT, Schema
from .util import SchemaError, field_json_info

__all__ = [
    "get_property",
    "iter_properties",
    "num_properties_bounds",
    "apply_defaults",
]

_NAMED_SCALARS: dict[str, type] = {"bool": bool, "int": int, "float": float, "str": str}


def _is_struct(value: Any) -> bool:
    return dataclasses.is_dataclass(value) and not isinstance(value, type)


def _is_zero(value: Any) -> bool:
    """Report whether value is the zero value of its kind.

    None, False, zero numbers and the empty string are zero; so is a tuple or
    dataclass whose members are all zero. Lists and dicts are zero only when None.
    """
    if value is None:
        return True
    if isinstance(value, (bool, int, float, complex, Decimal, Fraction)):
        return value == 0
    if isinstance(value, str):
        return value == ""
    if isinstance(value, tuple):
        return all(_is_zero(item) for item in value)
    if _is_struct(value):
        return all(_is_zero(getattr(value, f.name)) for f in dataclasses.fields(value))
    return False


@functools.lru_cache(maxsize=None)
def _struct_properties(cls: type) -> dict[str, dataclasses.Field]:
    props: dict[str, dataclasses.Field] = {}
    for fld in dataclasses.fields(cls):
        info = field_json_info(fld)
        if not info.omit:
            props[info.name] = fld
    return props


def _field_hint(fld: dataclasses.Field) -> Any:
    hint = fld.type
    if isinstance(hint, str):
        return _NAMED_SCALARS.get(hint.strip(), hint)
    return hint


def _bad_instance(instance: Any) -> TypeError:
    return TypeError(f"not an object instance: {instance!r} of type {type(instance).__name__}")


def get_property(instance: Any, name: str) -> Any:
    """Return the named property of instance, or ABSENT if it has none."""
    if isinstance(instance, dict):
        return instance.get(name, ABSENT)
    if _is_struct(instance):
        fld = _struct_properties(type(instance)).get(name)
        return ABSENT if fld is None else getattr(instance, fld.name)
    raise _bad_instance(instance)


def iter_properties(instance: Any) -> Iterator[tuple[str, Any]]:
    """Yield the (name, value) pairs of the properties of instance.

    For a dataclass, zero-valued fields marked omitempty or omitzero are left out.
    """
    if isinstance(instance, dict):
        yield from instance.items()
        return
    if not _is_struct(instance):
        raise _bad_instance(instance)
    for name, fld in _struct_properties(type(instance)).items():
        value = getattr(instance, fld.name)
        if _is_zero(value):
            settings = field_json_info(fld).settings
            if "omitempty" in settings or "omitzero" in settings:
                continue
        yield name, value


def num_properties_bounds(instance: Any, required: Any) -> tuple[int, int]:
    """Return lower and upper bounds on the number of properties of instance.

    A dict has exactly its length. For a dataclass a zero field may stand for a
    missing property, so the lower bound counts only non-zero or required fields.
    """
    if isinstance(instance, dict):
        return len(instance), len(instance)
    if not _is_struct(instance):
        raise _bad_instance(instance)
    required = set(required or ())
    props = _struct_properties(type(instance))
    low = sum(
        1
        for name, fld in props.items()
        if not _is_zero(getattr(instance, fld.name)) or name in required
    )
    return low, len(props)


def _coerce(fld: dataclasses.Field, value: Any) -> Any:
    hint = _field_hint(fld)

    def fail() -> SchemaError:
        type_name = hint if isinstance(hint, str) else getattr(hint, "__name__", repr(hint))
        return SchemaError(
            f"cannot assign default {value!r} to field {fld.name} of type {type_name}"
        )

    if hint is bool:
        if not isinstance(value, bool):
            raise fail()
    elif hint is int:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise fail()
        if isinstance(value, float):
            if not value.is_integer():
                raise fail()
            return int(value)
    elif hint is float:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise fail()
        return float(value)
    elif hint is str:
        if not isinstance(value, str):
            raise fail()
    return value


def apply_defaults(schema: Schema, instance: Any) -> None:
    """Fill in missing optional properties of instance from the schema's defaults.

    Only defaults on the schema's own properties are used, and never for
    required ones. A dict gains missing keys; a dataclass has zero fields set.
    Other instances are left alone. The instance is modified in place.
    """
    try:
        _apply_defaults(schema, instance)
    except SchemaError as exc:
        raise SchemaError(
            f"applyDefaults: schema {schema}, instance {instance!r}: {exc}"
        ) from exc


def _apply_defaults(schema: Schema, instance: Any) -> None:
    is_dict = isinstance(instance, dict)
    if not is_dict and not _is_struct(instance):
        return
    if is_dict:
        for key in instance:
            if not isinstance(key, str):
                raise SchemaError(f"map key type {type(key).__name__} is not a string")
    required = set(schema.required or ())
    for prop, subschema in (schema.properties or {}).items():
        if prop in required or subschema is None or subschema.default is ABSENT:
            continue
        if is_dict:
            if prop not in instance:
                instance[prop] = copy.deepcopy(subschema.default)
            continue
        fld = _struct_properties(type(instance)).get(prop)
        if fld is None or not _is_zero(getattr(instance, fld.name)):
            continue
        value = _coerce(fld, copy.deepcopy(subschema.default))
        setattr(instance, fld.name, value)