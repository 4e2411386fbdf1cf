import pytest

from schemacheck.schema import ABSENT, Schema, false_schema
from schemacheck.util import SchemaError, equal

ROUND_TRIP = [
    Schema(type="null"),
    Schema(types=["null", "number"]),
    Schema(type="string", min_length=20),
    Schema(minimum=20.0),
    Schema(items=Schema(type="integer")),
    Schema(const=0),
    Schema(const=None),
    Schema(const=[]),
    Schema(const={}),
    Schema(default=1),
    Schema(default=None),
    Schema(extra={"test": "value"}),
]


@pytest.mark.parametrize("schema", ROUND_TRIP)
def test_python_round_trip(schema):
    got = Schema.from_json(schema.to_json())
    assert equal(got, schema)


@pytest.mark.parametrize(
    "text, want",
    [
        ("true", "{}"),
        ("false", '{"not":{}}'),
        ('{"type":"", "enum":null}', "{}"),
        ('{"minimum":1}', '{"minimum":1}'),
        ('{"minimum":1.0}', '{"minimum":1}'),
        ('{"minLength":1.0}', '{"minLength":1}'),
        ('{"$vocabulary":{"b":true, "a":false}}', '{"$vocabulary":{"a":false,"b":true}}'),
        ('{"unk":0}', '{"unk":0}'),
        (
            '{"comment":"test","type":"example","unk":0}',
            '{"type":"example","comment":"test","unk":0}',
        ),
        ('{"extra":0}', '{"extra":0}'),
        ('{"Extra":0}', '{"Extra":0}'),
        ('{"minimum":1.5}', '{"minimum":1.5}'),
    ],
)
def test_json_round_trip(text, want):
    assert Schema.from_json(text).to_json() == want


@pytest.mark.parametrize(
    "text, pattern",
    [
        ("1", "cannot unmarshal number"),
        ('{"type":1}', 'invalid value for "type"'),
        ('{"minLength":1.5}', "not an integer value"),
        ('{"maxLength":1.5}', "not an integer value"),
        ('{"minItems":1.5}', "not an integer value"),
        ('{"maxItems":1.5}', "not an integer value"),
        ('{"minProperties":1.5}', "not an integer value"),
        ('{"maxProperties":1.5}', "not an integer value"),
        ('{"minContains":1.5}', "not an integer value"),
        ('{"maxContains":1.5}', "not an integer value"),
        ('{"maxContains":2147483648}', "out of range"),
        ('{"minLength":9e99}', "cannot be unmarshaled"),
        ('{"minLength":"1.5"}', "not a number"),
    ],
)
def test_unmarshal_errors(text, pattern):
    with pytest.raises(SchemaError, match=pattern):
        Schema.from_json(text)


def test_invalid_json_text():
    with pytest.raises(SchemaError, match="invalid JSON"):
        Schema.from_json("{")


def test_const_null_is_present():
    s = Schema.from_json('{"const":null}')
    assert s.const is None
    assert s.to_dict() == {"const": None}
    assert Schema().const is ABSENT
    assert not equal(Schema(const=None), Schema())


def test_default_null_is_present():
    s = Schema.from_json('{"default":null}')
    assert s.default is None
    assert s.to_json() == '{"default":null}'


def test_nested_schemas_decoded():
    s = Schema.from_json(
        '{"properties":{"a":{"type":"integer"}},"items":false,"allOf":[true,{"minimum":2}]}'
    )
    assert s.properties["a"].type == "integer"
    assert s.items.to_dict() == {"not": {}}
    assert s.all_of[0].to_dict() == {}
    assert s.all_of[1].minimum == 2.0


def test_types_list_decoded():
    s = Schema.from_json('{"type":["string","null"]}')
    assert s.types == ["string", "null"]
    assert s.type == ""


def test_empty_types_is_encoded():
    assert Schema(types=[]).to_json() == '{"type":[]}'


def test_empty_enum_is_omitted():
    assert Schema(enum=[]).to_dict() == {}


def test_field_order_in_output():
    s = Schema(title="t", type="string", minimum=1.5, required=["a"])
    assert s.to_json() == '{"type":"string","title":"t","minimum":1.5,"required":["a"]}'


def test_false_schema():
    first, second = false_schema(), false_schema()
    assert first.to_dict() == {"not": {}}
    first.not_.type = "string"
    assert second.to_dict() == {"not": {}}


def test_basic_checks_type_and_types():
    with pytest.raises(SchemaError, match="both Type and Types"):
        Schema(type="string", types=["null"]).basic_checks()


def test_basic_checks_defs_and_definitions():
    with pytest.raises(SchemaError, match="both Defs and Definitions"):
        Schema(defs={}, definitions={}).to_dict()


def test_extra_duplicating_field_is_rejected():
    with pytest.raises(SchemaError, match="duplicates"):
        Schema(extra={"title": "x"}).to_json()
    with pytest.raises(SchemaError, match="duplicates"):
        Schema(extra={"type": "x"}).to_json()


def test_all_visits_in_sorted_order():
    root = Schema(
        type="string",
        prefix_items=[Schema(type="int"), Schema(items=Schema(type="null"))],
        contains=Schema(properties={"~1": Schema(type="boolean"), "p": Schema()}),
    )
    want = [
        root,
        root.contains,
        root.contains.properties["p"],
        root.contains.properties["~1"],
        root.prefix_items[0],
        root.prefix_items[1],
        root.prefix_items[1].items,
    ]
    assert [id(s) for s in root.all()] == [id(s) for s in want]


def test_children_are_immediate():
    leaf = Schema(type="null")
    middle = Schema(items=leaf)
    root = Schema(not_=middle, defs={"b": Schema(), "a": Schema()})
    got = list(root.children())
    assert [id(s) for s in got] == [id(root.defs["a"]), id(root.defs["b"]), id(middle)]


def test_str_of_unresolved_schema():
    assert str(Schema()) == "<anonymous schema>"


def test_resolved_ref_unset_before_resolution():
    s = Schema(ref="#/$defs/a")
    assert s.resolved_ref is None
    assert s.to_dict() == {"$ref": "#/$defs/a"}


def test_from_dict_accepts_python_values():
    s = Schema.from_dict({"minItems": 3, "enum": [1, "a"], "uniqueItems": True})
    assert s.min_items == 3
    assert s.enum == [1, "a"]
    assert s.unique_items is True


def test_from_dict_rejects_wrong_field_type():
    with pytest.raises(SchemaError, match="cannot unmarshal"):
        Schema.from_dict({"title": 3})