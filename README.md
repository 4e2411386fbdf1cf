# schemacheck

Building blocks for working with JSON Schemas (draft 2020-12):

- a `Schema` dataclass that reads and writes JSON,
- JSON Pointer navigation within a schema,
- inference of a schema from a Python type,
- property access and default filling for object instances,
- JSON value helpers: equality, hashing and type names.

The package has no dependencies outside the standard library.

## Installation

```
pip install schemacheck
```

## Schemas

`schemacheck.schema.Schema` is a dataclass with one field for each draft 2020-12 keyword. Field names are in snake case, for example `min_length`, `prefix_items`, `additional_properties`. Where a keyword is also a Python keyword, the field name ends in an underscore: `not_`, `if_`, `else_`. Build a schema directly, or decode it from JSON:

```python
from schemacheck.schema import Schema

schema = Schema.from_json(
    '{"type": "object", "properties": {"name": {"type": "string"}}, "required": ["name"]}'
)
print(schema.to_json())
# {"type":"object","required":["name"],"properties":{"name":{"type":"string"}}}
```

- `Schema.from_json(text)` and `Schema.from_dict(data)` decode a schema. A boolean schema is accepted: `true` becomes the empty schema and `false` becomes `{"not": {}}`. The `minLength`, `maxItems` and other integer keywords must hold whole numbers that fit in 32 bits. `"type"` may be a string, which sets `type`, or an array, which sets `types`. Keywords the class does not know are kept in `extra`.
- `Schema.to_dict()` and `Schema.to_json()` encode a schema. Absent and empty values are left out, map keys are sorted, and `extra` entries are written after the known keywords. It is an error if an `extra` key has the name of a known keyword.
- Lists and maps that are `None` are absent; empty ones are present. `const` and `default` use the `schemacheck.schema.ABSENT` marker for "not present", because `None` (JSON null) is a valid value for them.
- `Schema.basic_checks()` raises if both `type` and `types` are set, or both `defs` and `definitions`.
- `Schema.children()` yields the immediate subschemas, and `Schema.all()` yields the schema and every schema beneath it in preorder. Both go by keyword name, and then by sorted map key.
- `schemacheck.schema.false_schema()` returns a new schema that rejects every value.

The `format` keyword and the content keywords (`contentEncoding`, `contentMediaType`, `contentSchema`) are recorded and written back out. Nothing in the package interprets them.

## JSON Pointers

`schemacheck.json_pointer` works with RFC 6901 pointers:

```python
from schemacheck.json_pointer import dereference_json_pointer, parse_json_pointer

parse_json_pointer("/$defs/a~1b")                           # ["$defs", "a/b"]
sub = dereference_json_pointer(schema, "/properties/name")   # the "name" subschema
```

`dereference_json_pointer` follows keyword names, array indexes and map keys, and raises `SchemaError` if the pointer is malformed or does not end at a schema. The array segment `-` and indexes with leading zeroes are rejected. `escape_segment` and `unescape_segment` convert between property names and pointer segments.

## Inferring schemas from types

`schemacheck.infer.for_type(tp)` returns a new schema that describes a Python type:

- `str`, `bool`, `int` and `float` become `string`, `boolean`, `integer` and `number`. `Any` and `object` give the empty schema.
- `list[X]`, sequences and `tuple[X, ...]` become arrays of `X`. A fixed-length tuple such as `tuple[X, X, X]` also sets `minItems` and `maxItems`.
- `dict[str, X]` and other mappings with string keys become objects whose `additionalProperties` describe `X`.
- A dataclass becomes an object that allows no other properties. Each public field is a property, named by the field's `"json"` metadata entry or by the field name. Fields are required unless that entry has `omitempty` or `omitzero`. A `"jsonschema"` metadata entry becomes the property's description. It must not be empty and must not begin with `WORD=`.
- `X | None` and `Optional[X]` also allow `null`.

```python
from dataclasses import dataclass, field
from schemacheck.infer import for_type

@dataclass
class Player:
    name: str = field(metadata={"jsonschema": "player name"})
    scores: list[int] = field(default_factory=list)

print(for_type(Player).to_json())
```

`SchemaError` is raised for types with no JSON counterpart (callables, complex numbers, maps with non-string keys), for cycles between dataclasses, and for string annotations other than the plain names `bool`, `int`, `float`, `str`, `Any`, `object`, `dict`, `list` and `tuple`.

## Object instances and defaults

`schemacheck.properties` treats a dict with string keys, or a dataclass instance, as a JSON object:

- `get_property(instance, name)` returns the value, or `ABSENT`.
- `iter_properties(instance)` yields `(name, value)` pairs. It skips zero-valued dataclass fields marked `omitempty` or `omitzero`.
- `num_properties_bounds(instance, required)` returns the smallest and largest property counts the instance may have.
- `apply_defaults(schema, instance)` fills in the optional properties of `schema.properties` that have a `default`. A dict gains the keys it lacks. A dataclass has its zero-valued fields set. Required properties are never filled.

```python
from schemacheck.properties import apply_defaults
from schemacheck.schema import Schema

instance = {"b": 0}
apply_defaults(Schema(properties={"a": Schema(default=1)}), instance)
# instance == {"b": 0, "a": 1}
```

## JSON value helpers

`schemacheck.util` provides:

- `equal(x, y)` compares JSON values and treats numbers by their mathematical value, so `equal([1, 2], [1.0, 2.0])` is true.
- `json_type(value)` returns the JSON Schema type name. Whole-valued floats such as `1.0` count as `"integer"`. The result is `None` for values that are not JSON.
- `json_number(value)` returns an exact `Fraction`, or `None` if the value is not a finite number.
- `hash_value(value)` returns a hash. Values that are `equal` hash the same.
- `field_json_info(field)` reports how a dataclass field is named and tagged in JSON, as a `JSONInfo`.
- `Annotations` records which array items and object properties have been evaluated.
- `SchemaError` is the exception the package raises for malformed schemas and failed lookups.

## What this package does not do

- It does not resolve `$ref`, `$dynamicRef`, `$id` or anchors, and it does not load remote schemas. `Schema.resolved_ref` is always `None` here.
- It does not validate instances against a schema.
- It does not compile `pattern` or `patternProperties`. They are stored as strings.

## Running the tests

```
pip install -e .[test]
pytest
```