from dataclasses import dataclass, field
from typing import Optional

import pytest

from schemacheck.properties import (
    apply_defaults,
    get_property,
    iter_properties,
    num_properties_bounds,
)
from schemacheck.schema import ABSENT, Schema
from schemacheck.util import SchemaError


@dataclass
class _Instance:
    I: int
    B: bool = field(metadata={"json": "b"})
    P: Optional[int] = None
    _u: int = 0


@dataclass
class _Optional:
    x: int = field(default=0, metadata={"json": "x,omitempty"})
    y: int = 0


@dataclass
class _S:
    A: int = 0
    B: int = 0
    C: int = 0


def _instance():
    return _Instance(1, True, None)


def _defaults_schema():
    return Schema(
        properties={
            "A": Schema(default=1),
            "B": Schema(default=2),
            "C": Schema(default=3),
        },
        required=["C"],
    )


def test_get_property_dict():
    d = {"a": 1, "n": None}
    assert get_property(d, "a") == 1
    assert get_property(d, "n") is None
    assert get_property(d, "missing") is ABSENT


def test_get_property_struct_uses_json_names():
    inst = _instance()
    assert get_property(inst, "I") == 1
    assert get_property(inst, "b") is True
    assert get_property(inst, "B") is ABSENT
    assert get_property(inst, "_u") is ABSENT
    assert get_property(inst, "P") is None


def test_get_property_rejects_non_object():
    with pytest.raises(TypeError):
        get_property([1, 2], "0")


def test_iter_properties_struct():
    assert dict(iter_properties(_instance())) == {"I": 1, "b": True, "P": None}


def test_iter_properties_skips_zero_omitempty():
    assert dict(iter_properties(_Optional())) == {"y": 0}
    assert dict(iter_properties(_Optional(x=5))) == {"x": 5, "y": 0}


def test_iter_properties_dict():
    d = {"a": 1, "b": [2]}
    assert list(iter_properties(d)) == list(d.items())


def test_num_properties_bounds_struct():
    assert num_properties_bounds(_instance(), None) == (2, 3)
    assert num_properties_bounds(_instance(), {"P"}) == (3, 3)


def test_num_properties_bounds_dict():
    d = {"a": 1, "b": None}
    low, high = num_properties_bounds(d, {"c"})
    assert low == high == len(d)


def test_num_properties_bounds_rejects_non_object():
    with pytest.raises(TypeError):
        num_properties_bounds("text", None)


def test_apply_defaults_dict():
    instance = {"B": 0}
    apply_defaults(_defaults_schema(), instance)
    assert instance == {"A": 1, "B": 0}


def test_apply_defaults_struct():
    instance = _S(B=1)
    apply_defaults(_defaults_schema(), instance)
    assert instance == _S(A=1, B=1, C=0)


def test_apply_defaults_is_idempotent():
    instance = {"B": 0}
    schema = _defaults_schema()
    apply_defaults(schema, instance)
    once = dict(instance)
    apply_defaults(schema, instance)
    assert instance == once


def test_apply_defaults_copies_default():
    schema = Schema(properties={"tags": Schema(default=["a"])})
    first, second = {}, {}
    apply_defaults(schema, first)
    apply_defaults(schema, second)
    first["tags"].append("b")
    assert second["tags"] == ["a"]
    assert schema.properties["tags"].default == ["a"]


def test_apply_defaults_ignores_non_objects():
    items = [1, 2]
    apply_defaults(_defaults_schema(), items)
    assert items == [1, 2]


def test_apply_defaults_type_mismatch():
    schema = Schema(properties={"A": Schema(default="s")})
    with pytest.raises(SchemaError, match="applyDefaults"):
        apply_defaults(schema, _S())


def test_apply_defaults_non_string_key():
    with pytest.raises(SchemaError, match="is not a string"):
        apply_defaults(_defaults_schema(), {1: "x"})